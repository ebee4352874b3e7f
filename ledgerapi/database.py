"""Opening the application database and preparing its schema and data."""

from __future__ import annotations

import logging
import os
import sqlite3
from pathlib import Path
from urllib.parse import unquote, urlsplit

from ledgerapi.repository_base import migrate
from ledgerapi.seed import Seeder

log = logging.getLogger(__name__)

CONNECTION_ENV = "CONNECTION_STRINGS_DEFAULT"
MEMORY = ":memory:"


class DatabaseError(Exception):
    """Raised when the database cannot be opened or prepared."""


def _database_path(dsn: str) -> str:
    parts = urlsplit(dsn)
    if parts.scheme not in ("", "sqlite"):
        raise DatabaseError(f"Unsupported database scheme {parts.scheme!r} in {CONNECTION_ENV}.")
    path = unquote(parts.path)
    if parts.scheme and path.startswith("/"):
        path = path[1:]
    return path


def open_database(connection_string: str = "") -> sqlite3.Connection:
    """Open the database named by ``connection_string``.

    An empty string falls back to the CONNECTION_STRINGS_DEFAULT environment
    variable. Accepts ``sqlite:///relative.db``, ``sqlite:////absolute.db``,
    ``sqlite:///:memory:`` or a bare file path. The file is created if missing.
    """
    dsn = connection_string or os.environ.get(CONNECTION_ENV, "")
    if not dsn:
        raise DatabaseError(f"{CONNECTION_ENV} environment variable is not set.")

    path = _database_path(dsn)
    if not path:
        raise DatabaseError(f"Database name not found in {CONNECTION_ENV} DSN path.")

    existed = path != MEMORY and Path(path).exists()
    if existed:
        log.info("Database '%s' already exists. Skipping creation.", path)

    log.info("Attempting to connect to application database '%s'...", path)
    try:
        connection = sqlite3.connect(path)
        connection.execute("PRAGMA foreign_keys = ON")
    except sqlite3.Error as exc:
        raise DatabaseError(f"Failed to connect to application database '{path}': {exc}") from exc

    if not existed:
        log.info("Database '%s' created successfully.", path)
    log.info("Successfully connected to application database.")
    return connection


class DatabaseInitializer:
    """Owns the connection and prepares schema and sample data on it."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self.connection = connection

    def init(self) -> None:
        """Create the tables; raises DatabaseError on failure."""
        try:
            migrate(self.connection)
        except sqlite3.Error as exc:
            raise DatabaseError("Failed to run auto migration.") from exc

    def seed(self) -> None:
        """Insert sample data into an empty database."""
        Seeder(self.connection).seed_data()

    def close(self) -> None:
        self.connection.close()

    def __enter__(self) -> DatabaseInitializer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def create_db_initializer(connection_string: str = "") -> DatabaseInitializer:
    """Open the database and wrap it in an initializer."""
    return DatabaseInitializer(open_database(connection_string))