"""
Backup orchestration for MySQL Snapshot.
"""

import logging
import socket
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

from .archive import zip_backup
from .connection import DatabaseConnection
from .locking import ConsistencyLock
from .models import BackupJob, BackupStats, ObjectKind, RoutineKind, ShowFlag
from .output import OutputSink
from .program_emitter import ProgramEmitter
from .schema_emitter import SchemaEmitter
from .selector import select_objects
from .table_dumper import TableDumper
from .utils import format_elapsed


class DatabaseBackup:
    """Main class for backup operations.

    One instance handles one job. Any database or file error aborts the run
    and propagates to the caller; a partially written file is left in place.
    """

    def __init__(self, job: BackupJob):
        self.job = job
        self.path: Optional[Path] = None
        self.stats = BackupStats()

    def run(self) -> BackupStats:
        """Write the backup script to a file in the job's output folder."""
        path = self.job.output_path()
        self._backup(OutputSink(), path)
        self.path = path
        self.stats.path = str(path)
        return self.stats

    def preview(self, stream: Optional[TextIO] = None) -> BackupStats:
        """Write the backup script to a stream (stdout by default), no file."""
        self._backup(OutputSink(passthrough=stream), None)
        return self.stats

    def zip(self) -> Path:
        """Package the script into a ZIP file, running the backup first if needed."""
        if self.job.compress:
            raise ValueError("Cannot zip a gzip compressed backup")
        if self.path is None:
            self.run()
        self.path = zip_backup(self.path)
        self.stats.path = str(self.path)
        return self.path

    def _backup(self, sink: OutputSink, path: Optional[Path]) -> None:
        conn_settings = self.job.connection
        started = time.monotonic()

        with DatabaseConnection.from_settings(conn_settings) as conn:
            tables, views = self._select_objects(conn)
            logging.info(f"Backing up {len(tables)} table(s) and {len(views)} view(s) "
                         f"from '{conn_settings.database}'")

            try:
                if path is not None:
                    sink.open(path, compress=self.job.compress)
                with ConsistencyLock(conn, tables + views):
                    self._write_script(conn, sink, tables, views)
                    self.stats.elapsed = time.monotonic() - started
                    self._write_footer(sink)
            finally:
                sink.close()

    def _select_objects(self, conn: DatabaseConnection) -> tuple[list[str], list[str]]:
        """Get the selected tables and views, in catalog order."""
        catalog = conn.get_catalog()
        table_names = [obj.name for obj in catalog if obj.kind is ObjectKind.TABLE]
        view_names = [obj.name for obj in catalog if obj.kind is ObjectKind.VIEW]

        tables = select_objects(table_names, self.job.table_filter)
        views = select_objects(view_names, self.job.table_filter)
        return tables, views

    def _write_script(
        self,
        conn: DatabaseConnection,
        sink: OutputSink,
        tables: list[str],
        views: list[str]
    ) -> None:
        database = self.job.connection.database
        schema = SchemaEmitter(conn, sink)
        programs = ProgramEmitter(conn, sink, database)
        dumper = TableDumper(conn, sink, self.job.page_size, self.job.batch_size)

        self._write_header(sink)

        if self.job.shows(ShowFlag.DATABASE):
            sink.comment('DATABASE')
            schema.write_create_database(database)

        if self.job.shows(ShowFlag.TABLES):
            sink.comment('DROP TABLES')
            schema.write_drop_tables(tables)

            sink.comment('CREATE TABLES')
            schema.write_create_tables(tables)

            sink.comment('FOREIGN KEYS')
            schema.write_foreign_keys(tables)

        if self.job.shows(ShowFlag.VIEWS):
            sink.comment('VIEWS')
            schema.write_views(views)
            self.stats.views = list(views)

        if self.job.shows(ShowFlag.PROGRAMS):
            sink.comment('PROCEDURES')
            self.stats.routines += programs.write_routines(RoutineKind.PROCEDURE)

            sink.comment('FUNCTIONS')
            self.stats.routines += programs.write_routines(RoutineKind.FUNCTION)

        if self.job.shows(ShowFlag.TRIGGERS):
            sink.comment('TRIGGERS')
            self.stats.triggers = programs.write_triggers()

        if self.job.shows(ShowFlag.DATA):
            sink.comment('TRUNCATE DATA')
            dumper.write_truncate(tables)

            sink.comment('DUMP DATA')
            for table in tables:
                table_stats = dumper.dump_table(table)
                self.stats.tables.append(table_stats)
                logging.info(f"  ✓ {table}: {table_stats.rows_dumped} rows")

    def _write_header(self, sink: OutputSink) -> None:
        conn_settings = self.job.connection
        generated = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
        sink.append(
            f"-- BACKUP - {conn_settings.database}@{socket.gethostname()} - {generated}\n\n"
            "SET NAMES utf8mb4;\n"
            "SET SQL_MODE = 'NO_AUTO_VALUE_ON_ZERO';\n"
            "SET FOREIGN_KEY_CHECKS = FALSE;\n\n"
        )

    def _write_footer(self, sink: OutputSink) -> None:
        sink.comment(f"ELAPSED {format_elapsed(self.stats.elapsed)}")
        sink.append("SET FOREIGN_KEY_CHECKS = TRUE;\n")
