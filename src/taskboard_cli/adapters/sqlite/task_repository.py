"""SQLite implementation of TaskRepository."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable

from taskboard_cli.adapters.sqlite.connection import get_connection
from taskboard_cli.adapters.sqlite.user_repository import SqliteUserRepository
from taskboard_cli.adapters.sqlite.utils import (
    build_update_clause,
    generate_uuid,
    now_iso,
    row_to_dict,
)
from taskboard_cli.models import Task, TaskCreate, TaskUpdate
from taskboard_cli.models.exceptions import NotFoundError, ValidationError
from taskboard_cli.repositories import TaskRepository

logger = logging.getLogger(__name__)


class SqliteTaskRepository(TaskRepository):
    """SQLite implementation of task repository.

    The caller is identified by the bearer token returned from
    ``token_provider``; every query is filtered on the resolved user id.
    """

    def __init__(
        self,
        db_path: str | None = None,
        token_provider: Callable[[], str | None] | None = None,
        user_repository: SqliteUserRepository | None = None,
    ):
        """Initialize SQLite task repository.

        Args:
            db_path: Optional database file path. If None, uses default location.
            token_provider: Callable returning the current bearer token.
            user_repository: Auth gateway used to resolve the token.
        """
        self.db_path = db_path
        self.token_provider = token_provider or (lambda: None)
        self.users = user_repository or SqliteUserRepository(db_path=db_path)
        self._connection: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._connection is None:
            self._connection = get_connection(self.db_path)
        return self._connection

    async def _get_user_id(self) -> str:
        """Resolve the caller; raises AuthError before any data is touched."""
        user = await self.users.resolve(self.token_provider())
        return user.id

    def _row_to_task(self, row: sqlite3.Row) -> Task:
        task_dict = row_to_dict(row)
        task_dict["owner_id"] = task_dict.pop("user_id")
        task_dict.pop("version", None)
        return Task(**task_dict)

    def _fetch(self, task_id: str, user_id: str) -> Task:
        cursor = self.connection.execute(
            "SELECT * FROM tasks WHERE id = ? AND user_id = ?",
            (task_id, user_id),
        )
        row = cursor.fetchone()
        if not row:
            raise NotFoundError("Task not found")
        return self._row_to_task(row)

    async def list_all(self) -> list[Task]:
        """List all tasks owned by the caller, oldest first."""
        user_id = await self._get_user_id()
        cursor = self.connection.execute(
            "SELECT * FROM tasks WHERE user_id = ? ORDER BY created_at ASC, rowid ASC",
            (user_id,),
        )
        return [self._row_to_task(row) for row in cursor.fetchall()]

    async def get(self, task_id: str) -> Task:
        user_id = await self._get_user_id()
        return self._fetch(task_id, user_id)

    async def add(self, task_data: TaskCreate) -> Task:
        """Create a new task."""
        user_id = await self._get_user_id()
        task_id = generate_uuid()
        now = now_iso()

        try:
            self.connection.execute(
                """INSERT INTO tasks (
                    id, title, description, status, user_id,
                    created_at, updated_at, version
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    task_id,
                    task_data.title,
                    task_data.description or "",
                    task_data.status,
                    user_id,
                    now,
                    now,
                    1,
                ),
            )
        except sqlite3.IntegrityError as e:
            self.connection.rollback()
            raise ValidationError(f"Invalid task: {e}") from e
        self.connection.commit()

        logger.debug("Created task %s for user %s", task_id, user_id)
        return self._fetch(task_id, user_id)

    async def update(self, task_id: str, updates: TaskUpdate) -> Task:
        """Update an existing task, applying only the supplied fields."""
        user_id = await self._get_user_id()
        # Ownership check first so foreign ids report "not found"
        self._fetch(task_id, user_id)

        set_clause, params = build_update_clause(updates.model_dump(exclude_none=True))
        if not set_clause:
            return self._fetch(task_id, user_id)

        query = (
            f"UPDATE tasks SET {set_clause}, updated_at = ?, version = version + 1 "
            "WHERE id = ? AND user_id = ?"
        )
        params.extend([now_iso(), task_id, user_id])

        try:
            self.connection.execute(query, params)
        except sqlite3.IntegrityError as e:
            self.connection.rollback()
            raise ValidationError(f"Invalid task: {e}") from e
        self.connection.commit()

        return self._fetch(task_id, user_id)

    async def delete(self, task_id: str) -> bool:
        """Delete a task (hard delete)."""
        user_id = await self._get_user_id()
        cursor = self.connection.execute(
            "DELETE FROM tasks WHERE id = ? AND user_id = ?",
            (task_id, user_id),
        )
        self.connection.commit()
        if cursor.rowcount == 0:
            raise NotFoundError("Task not found")
        return True
