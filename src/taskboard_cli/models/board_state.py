"""Client-side board state.

BoardStore is the single source of truth the rendering layer reads. It holds
the task list (keyed by identifier, insertion ordered), the search query, the
status filter and the editing draft. Every mutation goes through one of its
methods and notifies the registered listeners afterwards.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field

from .core import STATUS_FILTERS, STATUSES, StatusFilter, Task, TaskStatus

Listener = Callable[["BoardStore"], None]


class EditingDraft(BaseModel):
    """Scratch copy of the mutable fields of the task being edited."""

    task_id: str
    title: str
    description: str = ""
    status: TaskStatus

    @classmethod
    def from_task(cls, task: Task) -> EditingDraft:
        return cls(
            task_id=task.id,
            title=task.title,
            description=task.description,
            status=task.status,
        )

    def changes(self) -> dict[str, str]:
        return {
            "title": self.title,
            "description": self.description,
            "status": self.status,
        }


class Notification(BaseModel):
    """User-visible message produced at the controller boundary."""

    level: Literal["error", "warning", "info"] = "error"
    message: str
    requires_login: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class BoardLocation(BaseModel):
    """Position of a card: a column and an index within the visible column."""

    status: TaskStatus
    index: int = Field(ge=0)


def matches_query(task: Task, query: str) -> bool:
    """Case-insensitive containment of query in title or description."""
    q = query.strip().lower()
    if not q:
        return True
    return q in task.title.lower() or q in (task.description or "").lower()


def filter_tasks(
    tasks: Iterable[Task], query: str = "", status_filter: str = "All"
) -> list[Task]:
    """Return tasks matching both the status filter and the search query."""
    return [
        task
        for task in tasks
        if (status_filter == "All" or task.status == status_filter)
        and matches_query(task, query)
    ]


def group_by_status(tasks: Iterable[Task]) -> dict[str, list[Task]]:
    """Group tasks into board columns, keeping their relative order."""
    columns: dict[str, list[Task]] = {status: [] for status in STATUSES}
    for task in tasks:
        columns[task.status].append(task)
    return columns


class BoardStore:
    """State store for the board with explicit mutation entry points."""

    def __init__(self, tasks: Iterable[Task] | None = None):
        self._tasks: dict[str, Task] = {}
        self.query: str = ""
        self.status_filter: StatusFilter = "All"
        self.editing: EditingDraft | None = None
        self.loading: bool = False
        self._listeners: list[Listener] = []
        for task in tasks or []:
            self._tasks[task.id] = task

    # -- reads --------------------------------------------------------------

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks.values())

    def get(self, task_id: str) -> Task | None:
        return self._tasks.get(task_id)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    @property
    def visible_tasks(self) -> list[Task]:
        return filter_tasks(self._tasks.values(), self.query, self.status_filter)

    @property
    def columns(self) -> dict[str, list[Task]]:
        return group_by_status(self.visible_tasks)

    def snapshot(self) -> dict[str, Task]:
        """Copy of the task mapping, for comparisons in tests and logs."""
        return dict(self._tasks)

    # -- listeners ----------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called after every mutation; returns an unsubscribe."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # -- task list mutations ------------------------------------------------

    def replace_all(self, tasks: Iterable[Task]) -> None:
        self._tasks = {}
        for task in tasks:
            self._tasks[task.id] = task
        self._changed()

    def insert(self, task: Task) -> bool:
        """Insert a task unless its identifier is already present."""
        if task.id in self._tasks:
            return False
        self._tasks[task.id] = task
        self._changed()
        return True

    def upsert(self, task: Task) -> None:
        """Insert or overwrite, keeping the original position when present."""
        self._tasks[task.id] = task
        self._changed()

    def replace(self, task: Task) -> bool:
        """Overwrite an existing entry; unknown identifiers are ignored."""
        if task.id not in self._tasks:
            return False
        self._tasks[task.id] = task
        self._changed()
        return True

    def remove(self, task_id: str) -> bool:
        if self._tasks.pop(task_id, None) is None:
            return False
        if self.editing is not None and self.editing.task_id == task_id:
            self.editing = None
        self._changed()
        return True

    def set_status(self, task_id: str, status: TaskStatus) -> Task | None:
        """Change only the status of an entry, returning the new snapshot."""
        task = self._tasks.get(task_id)
        if task is None:
            return None
        updated = task.model_copy(update={"status": status})
        self._tasks[task_id] = updated
        self._changed()
        return updated

    # -- view state ---------------------------------------------------------

    def set_query(self, query: str) -> None:
        self.query = query
        self._changed()

    def set_status_filter(self, status_filter: str) -> None:
        if status_filter not in STATUS_FILTERS:
            raise ValueError(
                f"Invalid status filter: {status_filter}. "
                f"Expected one of: {', '.join(STATUS_FILTERS)}"
            )
        self.status_filter = status_filter  # type: ignore[assignment]
        self._changed()

    def set_loading(self, loading: bool) -> None:
        self.loading = loading
        self._changed()

    def set_editing(self, draft: EditingDraft | None) -> None:
        self.editing = draft
        self._changed()
