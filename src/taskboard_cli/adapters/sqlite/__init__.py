"""SQLite adapter module - Local database storage implementation."""

from taskboard_cli.adapters.sqlite.task_repository import SqliteTaskRepository
from taskboard_cli.adapters.sqlite.user_repository import (
    SqliteUserRepository,
    get_system_timezone,
)

__all__ = [
    "SqliteTaskRepository",
    "SqliteUserRepository",
    "get_system_timezone",
]
