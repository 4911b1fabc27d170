"""Taskboard CLI domain models.

This package contains Pydantic models that represent the core domain entities
of the Taskboard application: tasks, users, realtime events and the
client-side board state.
"""

from .board_state import (
    BoardLocation,
    BoardStore,
    EditingDraft,
    Notification,
    filter_tasks,
    group_by_status,
)
from .config_models import AppConfig, Context
from .core import (
    DEFAULT_STATUS,
    STATUS_FILTERS,
    STATUSES,
    AuthSession,
    StatusFilter,
    Task,
    TaskCreate,
    TaskStatus,
    TaskUpdate,
    User,
    UserCreate,
)
from .realtime import RealtimeEvent

__all__ = [
    # Task models
    "Task",
    "TaskCreate",
    "TaskUpdate",
    "TaskStatus",
    "StatusFilter",
    "STATUSES",
    "STATUS_FILTERS",
    "DEFAULT_STATUS",
    # User models
    "User",
    "UserCreate",
    "AuthSession",
    # Board state
    "BoardStore",
    "BoardLocation",
    "EditingDraft",
    "Notification",
    "filter_tasks",
    "group_by_status",
    # Realtime
    "RealtimeEvent",
    # Config models
    "AppConfig",
    "Context",
]
