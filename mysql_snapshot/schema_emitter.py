"""
DROP/CREATE statements for databases, tables and views.

Foreign keys are cut out of each CREATE TABLE and written afterwards as
ALTER TABLE statements, so a constraint never points at a table that the
script has not created yet.
"""

import logging
import re

from .connection import DatabaseConnection, quote_identifier
from .output import OutputSink

CREATE_TABLE_PATTERN = re.compile(r'^\s*CREATE\s+TABLE\s+', re.IGNORECASE)
VIEW_KEYWORD_PATTERN = re.compile(r'\bVIEW\b')
FOREIGN_KEY_MARKER = 'FOREIGN KEY'


def add_if_not_exists(create_sql: str) -> str:
    """Turn 'CREATE TABLE `t`' into 'CREATE TABLE IF NOT EXISTS `t`'."""
    return CREATE_TABLE_PATTERN.sub('CREATE TABLE IF NOT EXISTS ', create_sql, count=1)


def extract_foreign_keys(create_sql: str) -> tuple[str, list[str]]:
    """
    Split foreign key constraints out of a CREATE TABLE statement.

    Returns:
        The statement without its FOREIGN KEY lines, and one
        'ADD CONSTRAINT ... FOREIGN KEY ...' fragment per removed line.
    """
    body = []
    fragments = []
    for line in create_sql.split('\n'):
        if FOREIGN_KEY_MARKER in line:
            fragments.append('ADD ' + line.strip().rstrip(','))
        else:
            body.append(line)

    # The last column/key line may now end with a dangling comma
    if fragments and len(body) >= 2:
        body[-2] = body[-2].rstrip().rstrip(',')

    return '\n'.join(body), fragments


def rewrite_view(create_sql: str) -> str:
    """Replace everything before the VIEW keyword with CREATE OR REPLACE."""
    match = VIEW_KEYWORD_PATTERN.search(create_sql)
    if match is None:
        return create_sql
    return 'CREATE OR REPLACE ' + create_sql[match.start():]


class SchemaEmitter:
    """Writes schema statements for one backup run."""

    def __init__(self, connection: DatabaseConnection, sink: OutputSink):
        self.connection = connection
        self.sink = sink
        # table name -> ADD fragments, filled by write_create_tables
        self.foreign_keys: dict[str, list[str]] = {}

    def write_create_database(self, database: str, charset: str = 'utf8mb4') -> None:
        name = quote_identifier(database)
        self.sink.append(
            f"CREATE DATABASE IF NOT EXISTS {name}\n"
            f"\tCHARACTER SET {charset}\n"
            f"\tCOLLATE {charset}_general_ci;\n\n"
            f"USE {name};\n\n"
        )

    def write_drop_tables(self, tables: list[str]) -> None:
        for table in tables:
            self.sink.append(f"DROP TABLE IF EXISTS {quote_identifier(table)};\n")
        self.sink.append("\n")

    def write_create_tables(self, tables: list[str]) -> None:
        for table in tables:
            self.write_create_table(table)

    def write_create_table(self, table: str) -> None:
        create_sql = add_if_not_exists(self.connection.get_create_table(table))
        create_sql, fragments = extract_foreign_keys(create_sql)
        if fragments:
            self.foreign_keys.setdefault(table, []).extend(fragments)
            logging.debug(f"Table '{table}': deferred {len(fragments)} foreign key(s)")
        self.sink.append(f"{create_sql};\n\n")

    def write_foreign_keys(self, tables: list[str]) -> None:
        for table in tables:
            fragments = self.foreign_keys.get(table)
            if not fragments:
                continue
            self.sink.append(f"ALTER TABLE {quote_identifier(table)}\n ")
            self.sink.append(",\n ".join(fragments))
            self.sink.append(";\n\n")

    def write_views(self, views: list[str]) -> None:
        for view in views:
            create_sql = rewrite_view(self.connection.get_create_view(view))
            self.sink.append(f"{create_sql};\n\n")
