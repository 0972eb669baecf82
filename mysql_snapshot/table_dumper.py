"""
Table data dumping for MySQL Snapshot.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Callable

from .connection import DatabaseConnection, quote_identifier
from .models import BackupJob, TableStats
from .output import OutputSink

# Applied in order, backslash first
ESCAPES = (
    ("\\", "\\\\"),
    ("'", "\\'"),
    ("\x00", "\\0"),
    ("\n", "\\n"),
    ("\r", "\\r"),
)


def escape_string(text: str) -> str:
    """Backslash-escape a value for a single quoted SQL literal."""
    for char, replacement in ESCAPES:
        text = text.replace(char, replacement)
    return text


def format_timedelta(value: timedelta) -> str:
    """Render a TIME column value as [-]HH:MM:SS[.ffffff]."""
    sign = '-' if value < timedelta(0) else ''
    value = abs(value)
    hours, remainder = divmod(value.days * 86400 + value.seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    text = f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"
    if value.microseconds:
        text += f".{value.microseconds:06d}"
    return text


class TableDumper:
    """Writes table rows as batched INSERT statements.

    Rows are read one page at a time (LIMIT offset, page_size) until a page
    comes back empty, so a table never has to fit in memory.
    """

    def __init__(
        self,
        connection: DatabaseConnection,
        sink: OutputSink,
        page_size: int = BackupJob.DEFAULT_PAGE_SIZE,
        batch_size: int = BackupJob.DEFAULT_BATCH_SIZE
    ):
        self.connection = connection
        self.sink = sink
        self.page_size = page_size
        self.batch_size = batch_size

        # Text rendering per type, the result is quoted and escaped afterwards
        self._type_formatters: dict[type, Callable[[Any], str]] = {
            bool: lambda v: '1' if v else '0',
            datetime: lambda v: v.isoformat(sep=' '),
            timedelta: format_timedelta,
            set: lambda v: ','.join(sorted(v)),
            frozenset: lambda v: ','.join(sorted(v)),
        }

    def write_truncate(self, tables: list[str]) -> None:
        for table in tables:
            self.sink.append(f"TRUNCATE {quote_identifier(table)};\n")
        self.sink.append("\n")

    def dump_table(self, table: str) -> TableStats:
        """
        Dump every row of a table.

        Args:
            table: Name of the table to dump.

        Returns:
            TableStats with dump statistics.
        """
        stats = TableStats(table=table)
        offset = 0

        while True:
            columns, rows = self.connection.fetch_page(table, offset, self.page_size)
            if not rows:
                break
            stats.pages += 1
            stats.inserts += self._write_page(table, columns, rows)
            stats.rows_dumped += len(rows)
            offset += self.page_size

        logging.debug(
            f"Table '{table}': {stats.rows_dumped} rows in {stats.pages} page(s), "
            f"{stats.inserts} INSERT statement(s)"
        )
        return stats

    def _write_page(self, table: str, columns: list[str], rows: list[tuple]) -> int:
        """Write one page of rows, flushing the sink after every batch.

        Returns:
            Number of INSERT statements written.
        """
        quoted_columns = ', '.join(quote_identifier(col) for col in columns)
        inserts = 0

        self.sink.flush()
        for start in range(0, len(rows), self.batch_size):
            self._write_insert_batch(table, quoted_columns, rows[start:start + self.batch_size])
            self.sink.flush()
            inserts += 1

        return inserts

    def _write_insert_batch(self, table: str, columns: str, rows: list[tuple]) -> None:
        """Write a batch of rows as INSERT statement."""
        if not rows:
            return

        self.sink.append(f"INSERT INTO {quote_identifier(table)} ({columns}) VALUES\n")

        value_lines = [
            f"  ({', '.join(self._format_sql_value(val) for val in row)})"
            for row in rows
        ]

        self.sink.append(',\n'.join(value_lines))
        self.sink.append(';\n\n')

    def _format_sql_value(self, value: Any) -> str:
        """Format a value for SQL INSERT statement.

        NULL stays bare, binary data becomes a hex literal, everything else
        is written as an escaped, single quoted string.
        """
        if value is None:
            return 'NULL'
        if isinstance(value, (bytes, bytearray)):
            return f"X'{bytes(value).hex()}'"

        formatter = self._type_formatters.get(type(value), str)
        return f"'{escape_string(formatter(value))}'"
