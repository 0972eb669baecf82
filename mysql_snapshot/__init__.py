"""
MySQL Snapshot
==============
Writes a replayable SQL backup of a MySQL database with support for:
- Table/view selection with prefix patterns and exclusion mode
- Consistent READ lock while the script is written
- Foreign keys deferred to ALTER TABLE statements
- Stored procedures, functions and triggers
- Paginated data dump with batched INSERT statements
- Compression and ZIP packaging
"""

from .archive import zip_backup
from .backup import DatabaseBackup
from .config import ConfigLoader
from .connection import DatabaseConnection
from .locking import ConsistencyLock
from .main import main
from .models import (
    BackupJob,
    BackupStats,
    CatalogObject,
    ConnectionSettings,
    ObjectKind,
    RoutineKind,
    ShowFlag,
    TableFilter,
    TableStats,
    TriggerInfo,
    parse_show_flags,
)
from .output import OutputSink
from .program_emitter import ProgramEmitter
from .schema_emitter import SchemaEmitter, add_if_not_exists, extract_foreign_keys, rewrite_view
from .selector import matches_entry, select_objects
from .table_dumper import TableDumper, escape_string
from .utils import format_elapsed, print_dry_run_info, setup_logging

__version__ = "1.0.0"

__all__ = [
    # Main entry point
    "main",
    # Core classes
    "ConfigLoader",
    "ConsistencyLock",
    "DatabaseBackup",
    "DatabaseConnection",
    "OutputSink",
    "ProgramEmitter",
    "SchemaEmitter",
    "TableDumper",
    # Models
    "BackupJob",
    "BackupStats",
    "CatalogObject",
    "ConnectionSettings",
    "ObjectKind",
    "RoutineKind",
    "ShowFlag",
    "TableFilter",
    "TableStats",
    "TriggerInfo",
    "parse_show_flags",
    # SQL rewriting
    "add_if_not_exists",
    "escape_string",
    "extract_foreign_keys",
    "rewrite_view",
    # Selection
    "matches_entry",
    "select_objects",
    # Utilities
    "format_elapsed",
    "print_dry_run_info",
    "setup_logging",
    "zip_backup",
]
