"""
Output sink for generated SQL text.
"""

import gzip
import logging
import sys
from pathlib import Path
from typing import Optional, TextIO


class OutputSink:
    """Accumulates script text and writes it to a file in bounded chunks.

    When no file has been opened, appended text goes straight to the
    passthrough stream (stdout by default), which is how preview mode works.
    """

    COMMENT_WIDTH = 50

    def __init__(self, passthrough: Optional[TextIO] = None):
        self.passthrough = passthrough
        self.path: Optional[Path] = None
        self.file_handle: Optional[TextIO] = None
        self._buffer: list[str] = []

    def __enter__(self) -> "OutputSink":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self.file_handle is not None

    def open(self, path: Path, compress: bool = False) -> None:
        """Open the destination file, gzip compressed when requested."""
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if compress:
                self.file_handle = gzip.open(path, 'wt', encoding='utf-8')
            else:
                self.file_handle = open(path, 'w', encoding='utf-8')
        except OSError as e:
            logging.error(f"Failed to open output file '{path}': {e}")
            raise
        self.path = path
        logging.debug(f"Writing backup to {path}")

    def append(self, text: str) -> None:
        if self.file_handle is None:
            (self.passthrough or sys.stdout).write(text)
        else:
            self._buffer.append(text)

    def comment(self, text: str) -> None:
        """Append a section comment padded with dashes to a fixed width."""
        self.append(f"-- {text} ".ljust(self.COMMENT_WIDTH, '-') + "\n\n")

    def flush(self) -> None:
        """Write the buffered text to the file and clear the buffer."""
        if self.file_handle is None or not self._buffer:
            return
        self.file_handle.write(''.join(self._buffer))
        self._buffer = []

    def close(self) -> None:
        """Flush pending text and release the file."""
        if self.file_handle is None:
            return
        try:
            self.flush()
        finally:
            self.file_handle.close()
            self.file_handle = None
