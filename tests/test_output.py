"""
Unit tests for output.py
"""

import gzip
import io
import tempfile
from pathlib import Path

import pytest

from mysql_snapshot.output import OutputSink


class TestPassthrough:
    """Tests for OutputSink without an opened file."""

    def test_append_writes_immediately(self):
        stream = io.StringIO()
        sink = OutputSink(passthrough=stream)

        sink.append("SELECT 1;\n")

        assert stream.getvalue() == "SELECT 1;\n"
        assert not sink.is_open

    def test_flush_and_close_are_noops(self):
        stream = io.StringIO()
        sink = OutputSink(passthrough=stream)
        sink.append("x")
        sink.flush()
        sink.close()
        assert stream.getvalue() == "x"


class TestFileOutput:
    """Tests for OutputSink writing to a file."""

    def test_buffer_until_flush(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "backup.sql"
            sink = OutputSink()
            sink.open(path)

            sink.append("first;\n")
            sink.append("second;\n")
            sink.file_handle.flush()
            assert path.read_text() == ""

            sink.flush()
            sink.file_handle.flush()
            assert path.read_text() == "first;\nsecond;\n"

            sink.close()
            assert not sink.is_open

    def test_close_flushes(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "backup.sql"
            with OutputSink() as sink:
                sink.open(path)
                sink.append("pending;\n")

            assert path.read_text(encoding='utf-8') == "pending;\n"

    def test_creates_missing_folder(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "nested" / "dir" / "backup.sql"
            sink = OutputSink()
            sink.open(path)
            sink.close()
            assert path.exists()

    def test_compressed(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "backup.sql.gz"
            sink = OutputSink()
            sink.open(path, compress=True)
            sink.append("INSERT INTO `t` VALUES ('ñ');\n")
            sink.close()

            with gzip.open(path, 'rt', encoding='utf-8') as f:
                assert f.read() == "INSERT INTO `t` VALUES ('ñ');\n"

    def test_open_failure_raises(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            blocker = Path(tmpdir) / "file"
            blocker.write_text("not a folder")
            sink = OutputSink()

            with pytest.raises(OSError):
                sink.open(blocker / "backup.sql")
            assert not sink.is_open


class TestComment:
    """Tests for section comments."""

    def test_fixed_width(self):
        stream = io.StringIO()
        OutputSink(passthrough=stream).comment("DROP TABLES")

        line = stream.getvalue().split("\n")[0]
        assert line.startswith("-- DROP TABLES ---")
        assert len(line) == OutputSink.COMMENT_WIDTH
        assert stream.getvalue().endswith("\n\n")

    def test_long_text_not_truncated(self):
        stream = io.StringIO()
        text = "X" * 80
        OutputSink(passthrough=stream).comment(text)
        assert text in stream.getvalue()
