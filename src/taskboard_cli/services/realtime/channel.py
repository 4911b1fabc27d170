"""Realtime channel port."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from taskboard_cli.models import RealtimeEvent, TaskStatus
from taskboard_cli.models.exceptions import TaskboardError

EventHandler = Callable[[RealtimeEvent], "Awaitable[None] | None"]


class RealtimeChannel(ABC):
    """Bidirectional push channel for task-change events.

    Inbound events (``task:created``, ``task:updated``, ``task:deleted``) are
    delivered to the handler given to :meth:`connect`. The only outbound
    message is the ``task:moved`` advisory.

    Attributes:
        on_exhausted: Called once when the channel gives up reconnecting
        on_error: Called with the error that stopped the channel for good
    """

    def __init__(self) -> None:
        self.on_exhausted: Callable[[], None] | None = None
        self.on_error: Callable[[TaskboardError], None] | None = None

    @abstractmethod
    async def connect(self, handler: EventHandler) -> None:
        """Start delivering events to ``handler``."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Stop delivering events and release the connection."""

    @abstractmethod
    async def emit_moved(self, task_id: str, status: TaskStatus) -> None:
        """Send the ``task:moved`` advisory to peers."""

    @property
    @abstractmethod
    def connected(self) -> bool:
        """Whether events are currently being received."""

    def _report_exhausted(self) -> None:
        if self.on_exhausted is not None:
            self.on_exhausted()

    def _report_error(self, error: TaskboardError) -> None:
        if self.on_error is not None:
            self.on_error(error)
