"""In-process realtime hub for the local SQLite context.

Task mutations made through :class:`~taskboard_cli.services.task_service.TaskService`
are published here and fanned out to every board subscribed for the task's
owner. Boards of other users never see them.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import defaultdict
from collections.abc import Callable
from functools import lru_cache

from taskboard_cli.models import RealtimeEvent, TaskStatus
from taskboard_cli.models.exceptions import AuthError

from .channel import EventHandler, RealtimeChannel

logger = logging.getLogger(__name__)

Subscriber = Callable[[RealtimeEvent], None]


class LocalRealtimeHub:
    """Per-owner publish/subscribe registry."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Subscriber]] = defaultdict(list)

    def subscribe(self, owner_id: str, subscriber: Subscriber) -> Callable[[], None]:
        """Register ``subscriber`` for events about ``owner_id``'s tasks."""
        self._subscribers[owner_id].append(subscriber)

        def unsubscribe() -> None:
            subscribers = self._subscribers.get(owner_id, [])
            if subscriber in subscribers:
                subscribers.remove(subscriber)
            if not subscribers:
                self._subscribers.pop(owner_id, None)

        return unsubscribe

    def publish(
        self,
        owner_id: str | None,
        event: RealtimeEvent,
        *,
        exclude: Subscriber | None = None,
    ) -> int:
        """Deliver an event to the owner's subscribers; returns the delivery count."""
        if owner_id is None:
            logger.warning("Dropping %s event without owner", event.wire_name)
            return 0

        delivered = 0
        for subscriber in list(self._subscribers.get(owner_id, [])):
            if exclude is not None and subscriber == exclude:
                continue
            subscriber(event)
            delivered += 1
        logger.debug(
            "Published %s for %s to %d subscriber(s)",
            event.wire_name,
            event.target_id,
            delivered,
        )
        return delivered

    def subscriber_count(self, owner_id: str) -> int:
        return len(self._subscribers.get(owner_id, []))


@lru_cache(maxsize=1)
def get_local_hub() -> LocalRealtimeHub:
    """Get the process-wide hub."""
    return LocalRealtimeHub()


class LocalRealtimeChannel(RealtimeChannel):
    """Realtime channel bound to the in-process hub for one user."""

    def __init__(self, hub: LocalRealtimeHub, owner_id: str | None):
        super().__init__()
        self.hub = hub
        self.owner_id = owner_id
        self._handler: EventHandler | None = None
        self._unsubscribe: Callable[[], None] | None = None
        self._pending: set[asyncio.Task] = set()

    @property
    def connected(self) -> bool:
        return self._unsubscribe is not None

    def _deliver(self, event: RealtimeEvent) -> None:
        if self._handler is None:
            return
        result = self._handler(event)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    async def connect(self, handler: EventHandler) -> None:
        if self.owner_id is None:
            raise AuthError("Not authorized, no token")
        if self._unsubscribe is not None:
            self._unsubscribe()
        self._handler = handler
        self._unsubscribe = self.hub.subscribe(self.owner_id, self._deliver)
        logger.info("Local realtime channel connected for %s", self.owner_id)

    async def disconnect(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._handler = None
        for task in list(self._pending):
            task.cancel()

    async def emit_moved(self, task_id: str, status: TaskStatus) -> None:
        self.hub.publish(
            self.owner_id, RealtimeEvent.moved(task_id, status), exclude=self._deliver
        )
