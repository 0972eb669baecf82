"""
Database connection management for MySQL Snapshot.
"""

import logging
from typing import Any, Optional

import mysql.connector
from mysql.connector import Error as MySQLError

from .models import CatalogObject, ConnectionSettings, ObjectKind, RoutineKind, TriggerInfo


def quote_identifier(name: str) -> str:
    """Quote a table/column name with backticks."""
    return '`' + name.replace('`', '``') + '`'


class DatabaseConnection:
    """Manages MySQL database connections with context manager support."""

    DEFAULT_CHARSET = 'utf8mb4'

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        database: Optional[str] = None
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.connection = None

    @classmethod
    def from_settings(cls, settings: ConnectionSettings) -> "DatabaseConnection":
        return cls(
            host=settings.host,
            port=settings.port,
            user=settings.user,
            password=settings.password,
            database=settings.database
        )

    def __enter__(self) -> "DatabaseConnection":
        """Context manager entry - establish connection."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close connection."""
        self.disconnect()

    def connect(self) -> None:
        """Establish database connection."""
        try:
            self.connection = mysql.connector.connect(
                host=self.host,
                port=self.port,
                user=self.user,
                password=self.password,
                database=self.database,
                charset=self.DEFAULT_CHARSET,
                use_unicode=True
            )
            logging.info(f"Connected to {self.host}:{self.port}/{self.database or 'N/A'}")
        except MySQLError as e:
            logging.error(f"Failed to connect to database: {e}")
            raise

    def disconnect(self) -> None:
        """Close database connection."""
        if self.connection and self.connection.is_connected():
            self.connection.close()
            logging.debug("Database connection closed")

    def execute(self, statement: str) -> None:
        """Execute a statement that returns no rows."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(statement)
        finally:
            cursor.close()

    def execute_query(self, query: str, params: Optional[tuple] = None) -> list[tuple]:
        """Execute a query and return results."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(query, params)
            return cursor.fetchall()
        finally:
            cursor.close()

    def execute_dict_query(self, query: str, params: Optional[tuple] = None) -> list[dict[str, Any]]:
        """Execute a query and return rows keyed by column name."""
        cursor = self.connection.cursor(dictionary=True)
        try:
            cursor.execute(query, params)
            return cursor.fetchall()
        finally:
            cursor.close()

    def get_catalog(self) -> list[CatalogObject]:
        """Get all tables and views of the current database, in catalog order."""
        results = self.execute_query("SHOW FULL TABLES")
        return [
            CatalogObject(name=row[0], kind=ObjectKind.from_table_type(row[1]))
            for row in results
        ]

    def get_create_table(self, table: str) -> str:
        """Get CREATE TABLE statement."""
        results = self.execute_query(f"SHOW CREATE TABLE {quote_identifier(table)}")
        return results[0][1]

    def get_create_view(self, view: str) -> str:
        """Get CREATE VIEW statement."""
        results = self.execute_query(f"SHOW CREATE VIEW {quote_identifier(view)}")
        return results[0][1]

    def get_routine_names(self, kind: RoutineKind, database: str) -> list[str]:
        """Get names of the stored procedures or functions of a database."""
        rows = self.execute_dict_query(
            f"SHOW {kind.value} STATUS WHERE Db = %s AND Type = %s",
            (database, kind.value)
        )
        return [row['Name'] for row in rows]

    def get_create_routine(self, kind: RoutineKind, database: str, name: str) -> Optional[str]:
        """Get CREATE PROCEDURE/FUNCTION statement.

        Returns None when the server hides the body (missing privileges).
        """
        rows = self.execute_dict_query(
            f"SHOW CREATE {kind.value} {quote_identifier(database)}.{quote_identifier(name)}"
        )
        return rows[0].get(kind.create_column) if rows else None

    def get_triggers(self, database: str) -> list[TriggerInfo]:
        """Get every trigger defined in a database."""
        rows = self.execute_dict_query(f"SHOW TRIGGERS FROM {quote_identifier(database)}")
        return [TriggerInfo.from_row(row) for row in rows]

    def fetch_page(self, table: str, offset: int, limit: int) -> tuple[list[str], list[tuple]]:
        """Fetch one page of rows.

        Returns:
            Column names and the rows of the page (empty when past the end).
        """
        cursor = self.connection.cursor()
        try:
            cursor.execute(f"SELECT * FROM {quote_identifier(table)} LIMIT {offset}, {limit}")
            rows = cursor.fetchall()
            return list(cursor.column_names), rows
        finally:
            cursor.close()

    def lock_tables(self, names: list[str]) -> None:
        """Acquire a READ lock on the given tables and views."""
        targets = ', '.join(f"{quote_identifier(name)} READ" for name in names)
        self.execute(f"LOCK TABLES {targets}")

    def unlock_tables(self) -> None:
        """Release every table lock held by this session."""
        self.execute("UNLOCK TABLES")
