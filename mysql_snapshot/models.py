"""
Data models and enums for MySQL Snapshot.
"""

import tempfile
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union


class ObjectKind(Enum):
    """Kinds of catalog objects returned by SHOW FULL TABLES."""
    TABLE = "TABLE"
    VIEW = "VIEW"

    @classmethod
    def from_table_type(cls, table_type: str) -> "ObjectKind":
        return cls.VIEW if 'VIEW' in table_type.upper() else cls.TABLE


class RoutineKind(Enum):
    """Stored program kinds."""
    PROCEDURE = "PROCEDURE"
    FUNCTION = "FUNCTION"

    @property
    def create_column(self) -> str:
        """Column holding the DDL in SHOW CREATE PROCEDURE/FUNCTION."""
        return f"Create {self.value.capitalize()}"


class ShowFlag(Enum):
    """Categories of objects a backup can include."""
    DATABASE = "DATABASE"
    TABLES = "TABLES"
    VIEWS = "VIEWS"
    PROGRAMS = "PROGRAMS"
    TRIGGERS = "TRIGGERS"
    DATA = "DATA"


def _split_list(value: Union[str, list[str], None]) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        value = value.split(',')
    return [str(item).strip() for item in value if str(item).strip()]


def parse_show_flags(value: Union[str, list[str], None]) -> frozenset[ShowFlag]:
    """Parse show flags from a list or comma separated string.

    An empty value means every category.
    """
    names = _split_list(value)
    if not names:
        return frozenset(ShowFlag)

    flags = set()
    for name in names:
        try:
            flags.add(ShowFlag(name.upper()))
        except ValueError:
            valid = ', '.join(flag.value for flag in ShowFlag)
            raise ValueError(f"Unknown show flag '{name}' (expected one of: {valid})")
    return frozenset(flags)


@dataclass(frozen=True)
class CatalogObject:
    """A table or view as listed by the live catalog."""
    name: str
    kind: ObjectKind


@dataclass(frozen=True)
class TriggerInfo:
    """One row of SHOW TRIGGERS."""
    name: str
    timing: str
    event: str
    table: str
    statement: str

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "TriggerInfo":
        return cls(
            name=row['Trigger'],
            timing=row['Timing'],
            event=row['Event'],
            table=row['Table'],
            statement=row['Statement'],
        )


@dataclass
class TableFilter:
    """
    Table/view selection filter.

    Three modes, decided only by the first entry:
    - empty list: every object
    - first entry is the '*' sentinel: every object except the other entries
    - otherwise: only the listed entries

    Entries ending with '*' match by prefix, others match exactly.
    """
    SENTINEL = '*'
    WILDCARD = '*'

    entries: list[str] = field(default_factory=list)

    @classmethod
    def parse(cls, value: Union[str, list[str], None]) -> "TableFilter":
        return cls(entries=_split_list(value))

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def is_exclusion(self) -> bool:
        return bool(self.entries) and self.entries[0] == self.SENTINEL

    @property
    def patterns(self) -> list[str]:
        """Entries to match against, without the exclusion sentinel."""
        return self.entries[1:] if self.is_exclusion else list(self.entries)


@dataclass
class ConnectionSettings:
    """Connection descriptor for the source database."""
    DEFAULT_PORT = 3306

    host: str
    database: str
    user: str
    password: str = ""
    port: int = DEFAULT_PORT

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "ConnectionSettings":
        missing = [key for key in ('host', 'database', 'user') if not config.get(key)]
        if missing:
            raise ValueError(f"Connection settings missing: {', '.join(missing)}")
        return cls(
            host=config['host'],
            database=config['database'],
            user=config['user'],
            password=config.get('password') or "",
            port=int(config.get('port', cls.DEFAULT_PORT)),
        )


@dataclass
class BackupJob:
    """Everything a single backup run needs."""
    DEFAULT_PAGE_SIZE = 10000
    DEFAULT_BATCH_SIZE = 1000

    connection: ConnectionSettings
    table_filter: TableFilter = field(default_factory=TableFilter)
    show: frozenset[ShowFlag] = field(default_factory=lambda: frozenset(ShowFlag))
    name: str = ""
    folder: str = ""
    page_size: int = DEFAULT_PAGE_SIZE
    batch_size: int = DEFAULT_BATCH_SIZE
    compress: bool = False

    def __post_init__(self):
        if self.page_size <= 0:
            raise ValueError(f"page_size must be positive, got {self.page_size}")
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")

    @classmethod
    def from_config(
        cls,
        connection: dict[str, Any],
        tables: Union[str, list[str], None],
        show: Union[str, list[str], None],
        output: dict[str, Any]
    ) -> "BackupJob":
        """
        Build a job from the configuration sections.
        """
        return cls(
            connection=ConnectionSettings.from_config(connection),
            table_filter=TableFilter.parse(tables),
            show=parse_show_flags(show),
            name=output.get('name') or "",
            folder=output.get('folder') or "",
            page_size=int(output.get('page_size', cls.DEFAULT_PAGE_SIZE)),
            batch_size=int(output.get('batch_size', cls.DEFAULT_BATCH_SIZE)),
            compress=bool(output.get('compress', False)),
        )

    def shows(self, flag: ShowFlag) -> bool:
        return flag in self.show

    @property
    def output_folder(self) -> Path:
        return Path(self.folder) if self.folder else Path(tempfile.gettempdir())

    def output_path(self, now: Optional[datetime] = None) -> Path:
        """Path of the script file: <folder>/<name>_<timestamp>.sql[.gz]."""
        now = now or datetime.now()
        name = self.name or self.connection.database
        suffix = '.sql.gz' if self.compress else '.sql'
        return self.output_folder / f"{name}_{now.strftime('%Y-%m-%d_%H-%M-%S')}{suffix}"


@dataclass
class TableStats:
    """Statistics for a single table data dump."""
    table: str
    rows_dumped: int = 0
    pages: int = 0
    inserts: int = 0


@dataclass
class BackupStats:
    """Overall backup statistics."""
    path: Optional[str] = None
    tables: list[TableStats] = field(default_factory=list)
    views: list[str] = field(default_factory=list)
    routines: int = 0
    triggers: int = 0
    elapsed: float = 0.0

    @property
    def total_rows(self) -> int:
        return sum(table.rows_dumped for table in self.tables)
