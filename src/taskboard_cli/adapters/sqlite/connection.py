"""Database connection management for SQLite local vault.

This module provides a singleton connection manager for the local SQLite database,
ensuring proper connection lifecycle, WAL mode, and foreign key enforcement.
"""

from __future__ import annotations

import atexit
import logging
import os
import sqlite3
from pathlib import Path

from platformdirs import user_data_dir

from taskboard_cli.adapters.sqlite.migrations.m001_initial_schema import initial_migration
from taskboard_cli.adapters.sqlite.migrations.runner import MigrationRunner

logger = logging.getLogger(__name__)

MIGRATIONS = [
    initial_migration,
]


class DatabaseConnection:
    """Singleton connection manager for local SQLite vault.

    Provides:
    - Single connection per process (connection reuse)
    - WAL mode for better concurrency
    - Foreign key constraint enforcement
    - Automatic directory creation
    - Owner-only file permissions
    """

    _instance: DatabaseConnection | None = None
    _connection: sqlite3.Connection | None = None
    _db_path: Path | None = None
    _cleanup_registered: bool = False

    def __new__(cls) -> DatabaseConnection:
        """Ensure singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def get_connection(cls, db_path: str | Path | None = None) -> sqlite3.Connection:
        """Get or create database connection.

        Args:
            db_path: Path to database file. If None, uses default location.

        Returns:
            sqlite3.Connection object configured for Taskboard usage
        """
        instance = cls()

        if db_path is None:
            db_path = Path(user_data_dir("taskboard_cli")) / "taskboard.db"
        else:
            db_path = Path(db_path)

        if instance._connection is not None and instance._db_path == db_path:
            return instance._connection

        # Close existing connection if path changed
        if instance._connection is not None:
            instance._connection.close()

        db_path.parent.mkdir(parents=True, exist_ok=True)
        is_new_database = not db_path.exists()

        connection = sqlite3.connect(
            str(db_path),
            check_same_thread=False,
            timeout=30.0,
        )
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON")
        connection.execute("PRAGMA journal_mode = WAL")

        if is_new_database:
            os.chmod(db_path, 0o600)
            logger.info("Created local vault at %s", db_path)

        MigrationRunner(connection).run_migrations(MIGRATIONS)

        instance._connection = connection
        instance._db_path = db_path

        if not cls._cleanup_registered:
            atexit.register(cls.close_connection)
            cls._cleanup_registered = True

        return connection

    @classmethod
    def close_connection(cls) -> None:
        """Commit pending work and close the connection."""
        instance = cls()
        if instance._connection is None:
            return
        try:
            instance._connection.commit()
            instance._connection.close()
        except sqlite3.Error as e:
            logger.warning("Error while closing local vault: %s", e)
        finally:
            instance._connection = None
            instance._db_path = None

    @classmethod
    def get_db_path(cls) -> Path | None:
        """Get current database path."""
        return cls()._db_path


def get_connection(db_path: str | Path | None = None) -> sqlite3.Connection:
    """Helper function to get database connection."""
    return DatabaseConnection.get_connection(db_path)
