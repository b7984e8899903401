"""
Database connection management for superdump.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import mysql.connector
from mysql.connector import Error as MySQLError


class DatabaseConnection:
    """Manages a MySQL database connection with context manager support."""

    DEFAULT_PORT = 3306
    DEFAULT_CHARSET = 'utf8mb4'

    def __init__(
        self,
        host: str,
        port: int,
        user: str,
        password: str,
        database: Optional[str] = None,
        charset: str = DEFAULT_CHARSET
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.database = database
        self.charset = charset
        self.connection = None

    def __enter__(self) -> "DatabaseConnection":
        """Context manager entry - establish connection."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close connection."""
        self.disconnect()

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> "DatabaseConnection":
        """Build a connection from the ``connection`` config section."""
        return cls(
            host=settings.get('host', 'localhost'),
            port=int(settings.get('port', cls.DEFAULT_PORT)),
            user=settings.get('user', ''),
            password=settings.get('password', ''),
            database=settings.get('database'),
            charset=settings.get('charset', cls.DEFAULT_CHARSET)
        )

    def connect(self) -> None:
        """Establish database connection."""
        try:
            # consume_results lets a streaming cursor be closed before all rows are read
            self.connection = mysql.connector.connect(
                host=self.host,
                port=self.port,
                user=self.user,
                password=self.password,
                database=self.database,
                charset=self.charset,
                use_unicode=True,
                consume_results=True
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

    def execute(self, statement: str) -> int:
        """Execute a statement that returns no rows and return the affected row count."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(statement)
            return cursor.rowcount
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

    @contextmanager
    def stream(self, query: str) -> Iterator[tuple[list[str], Any]]:
        """Stream a result set row by row without converting values.

        Yields ``(column_names, cursor)``. The cursor is unbuffered and raw, so
        every value arrives as the bytes sent by the server, or None for NULL.
        The cursor is closed when the block exits, however it exits.
        """
        cursor = self.connection.cursor(buffered=False, raw=True)
        try:
            cursor.execute(query)
            yield list(cursor.column_names), cursor
        finally:
            cursor.close()
