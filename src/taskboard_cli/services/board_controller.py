"""Board state controller.

Owns the client-side view of the caller's tasks and keeps it consistent
with the Task Service and the realtime channel:

- moves are applied to the store immediately and rolled back if the
  service rejects them;
- create, edit and delete wait for the service before touching the store;
- realtime events are merged idempotently, in any order.

Service errors, expected or not, never escape the mutation entry points. They are turned into
:class:`~taskboard_cli.models.Notification` objects that the rendering layer
reads from :attr:`BoardController.notifications` or receives through
:meth:`BoardController.subscribe_notifications`.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from taskboard_cli.models import (
    STATUS_FILTERS,
    STATUSES,
    BoardLocation,
    BoardStore,
    EditingDraft,
    Notification,
    RealtimeEvent,
    Task,
)
from taskboard_cli.models.exceptions import (
    AuthError,
    NotFoundError,
    TaskboardError,
)
from taskboard_cli.services.realtime.channel import RealtimeChannel
from taskboard_cli.services.task_service import TaskService
from taskboard_cli.utils.debounce import Debouncer

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], "bool | Awaitable[bool]"]
NotificationListener = Callable[[Notification], None]

DRAFT_FIELDS = ("title", "description", "status")


class BoardController:
    """Mediates between the board UI, the Task Service and the realtime channel."""

    def __init__(
        self,
        service: TaskService,
        channel: RealtimeChannel | None = None,
        *,
        store: BoardStore | None = None,
        confirm: ConfirmCallback | None = None,
        current_user_id: str | None = None,
        search_debounce_ms: int = 300,
    ):
        """
        Args:
            service: Task Service used for every mutation
            channel: Realtime channel; None disables live updates
            store: State store (a fresh one by default)
            confirm: Asked before deleting; sync or async, returns True to proceed
            current_user_id: Owner of the board; ``created`` events for other
                owners are ignored when set
            search_debounce_ms: Delay applied by :meth:`set_query_debounced`
        """
        self.service = service
        self.channel = channel
        self.store = store or BoardStore()
        self.confirm = confirm
        self.current_user_id = current_user_id
        self.notifications: list[Notification] = []
        self._notification_listeners: list[NotificationListener] = []
        self._in_flight: set[str] = set()
        self._search = Debouncer(search_debounce_ms / 1000, self.set_query)

    # -- notifications ------------------------------------------------------

    def subscribe_notifications(self, listener: NotificationListener) -> None:
        self._notification_listeners.append(listener)

    def drain_notifications(self) -> list[Notification]:
        """Return and forget the notifications collected so far."""
        notifications, self.notifications = self.notifications, []
        return notifications

    def _notify(
        self, message: str, level: str = "error", requires_login: bool = False
    ) -> Notification:
        notification = Notification(
            level=level, message=message, requires_login=requires_login
        )
        self.notifications.append(notification)
        for listener in list(self._notification_listeners):
            listener(notification)
        return notification

    def _notify_error(self, action: str, error: Exception) -> Notification:
        if not isinstance(error, TaskboardError):
            logger.error("%s: unexpected error", action, exc_info=error)
            return self._notify(f"{action}: unexpected error ({type(error).__name__}: {error})")
        if isinstance(error, AuthError):
            logger.warning("%s: not authorized (%s)", action, error)
            return self._notify(
                f"{action}: please log in again ({error})", requires_login=True
            )
        if isinstance(error, NotFoundError):
            # Covers AuthorizationError: foreign tasks look absent
            logger.warning("%s: task not found (%s)", action, error)
            return self._notify(f"{action}: task not found")
        logger.error("%s: %s", action, error)
        return self._notify(f"{action}: {error}")

    # -- lifecycle ----------------------------------------------------------

    async def start(self) -> None:
        """Load the caller's tasks, then subscribe to realtime events."""
        await self.reload()

        if self.channel is None:
            return
        self.channel.on_exhausted = self._on_channel_exhausted
        self.channel.on_error = lambda error: self._notify_error("Live updates", error)
        try:
            await self.channel.connect(self.handle_event)
        except Exception as e:
            self._notify_error("Live updates unavailable", e)

    async def reload(self) -> bool:
        """Replace the task list with the service's current view."""
        self.store.set_loading(True)
        try:
            tasks = await self.service.list_tasks()
        except Exception as e:
            self._notify_error("Could not load tasks", e)
            return False
        finally:
            self.store.set_loading(False)
        self.store.replace_all(tasks)
        logger.debug("Loaded %d task(s)", len(tasks))
        return True

    async def stop(self) -> None:
        self._search.cancel()
        if self.channel is not None:
            await self.channel.disconnect()

    def _on_channel_exhausted(self) -> None:
        self._notify(
            "Live updates stopped after repeated connection failures; reload to refresh",
            level="warning",
        )

    # -- confirm-first mutations --------------------------------------------

    async def create_task(
        self, title: str, description: str = "", status: str | None = None
    ) -> Task | None:
        try:
            task = await self.service.create_task(title, description, status)
        except Exception as e:
            self._notify_error("Could not create task", e)
            return None
        # A created event for this id may have arrived first
        self.store.upsert(task)
        return task

    async def update_task(self, task_id: str, **fields: Any) -> Task | None:
        try:
            task = await self.service.update_task(task_id, **fields)
        except Exception as e:
            self._notify_error("Could not update task", e)
            return None
        self.store.replace(task)
        return task

    async def delete_task(self, task_id: str) -> bool:
        """Delete after confirmation; declining leaves everything untouched."""
        if self.confirm is not None:
            task = self.store.get(task_id)
            label = task.title if task is not None else task_id
            answer = self.confirm(f"Delete task '{label}'?")
            if inspect.isawaitable(answer):
                answer = await answer
            if not answer:
                return False

        try:
            await self.service.delete_task(task_id)
        except Exception as e:
            self._notify_error("Could not delete task", e)
            return False
        self.store.remove(task_id)
        return True

    # -- editing draft ------------------------------------------------------

    def begin_edit(self, task_id: str) -> bool:
        task = self.store.get(task_id)
        if task is None:
            return False
        self.store.set_editing(EditingDraft.from_task(task))
        return True

    def update_draft(self, **fields: Any) -> bool:
        draft = self.store.editing
        if draft is None:
            return False
        unknown = set(fields) - set(DRAFT_FIELDS)
        if unknown:
            logger.warning("Ignoring unknown draft fields: %s", ", ".join(sorted(unknown)))
        changes = {k: v for k, v in fields.items() if k in DRAFT_FIELDS}
        self.store.set_editing(draft.model_copy(update=changes))
        return True

    def cancel_edit(self) -> None:
        self.store.set_editing(None)

    async def save_edit(self) -> Task | None:
        """Commit the draft; on failure the draft stays open for another try."""
        draft = self.store.editing
        if draft is None:
            return None
        try:
            task = await self.service.update_task(draft.task_id, **draft.changes())
        except Exception as e:
            self._notify_error("Could not save task", e)
            return None
        self.store.replace(task)
        if self.store.editing is not None and self.store.editing.task_id == draft.task_id:
            self.store.set_editing(None)
        return task

    # -- optimistic move ----------------------------------------------------

    async def move_task(
        self, source: BoardLocation | None, destination: BoardLocation | None
    ) -> bool:
        """Handle a drag gesture between columns.

        Reordering within a column is not persisted, so only column changes
        do anything. Returns True when the move was confirmed by the service.
        """
        if source is None or destination is None:
            return False
        if source.status == destination.status:
            return False

        column = self.store.columns[source.status]
        if source.index >= len(column):
            logger.debug("No card at %s[%d]", source.status, source.index)
            return False
        return await self._move(column[source.index].id, destination.status)

    async def move_task_to(self, task_id: str, status: str) -> bool:
        """Move a task to another column by id."""
        if status not in STATUSES:
            self._notify(f"Invalid status: {status}")
            return False
        task = self.store.get(task_id)
        if task is None:
            self._notify("Could not move task: task not found")
            return False
        if task.status == status:
            return False
        return await self._move(task_id, status)

    async def _move(self, task_id: str, status: str) -> bool:
        if task_id in self._in_flight:
            logger.info("Move of %s already in flight, ignoring", task_id)
            return False

        previous_status = self.store.get(task_id).status
        self._in_flight.add(task_id)
        try:
            moved = self.store.set_status(task_id, status)
            updated = await self.service.update_task(
                task_id,
                status=status,
                title=moved.title,
                description=moved.description,
            )
        except Exception as e:
            # Only this entry reverts; it may have been deleted meanwhile
            if task_id in self.store:
                self.store.set_status(task_id, previous_status)
            self._notify_error("Could not move task", e)
            return False
        finally:
            self._in_flight.discard(task_id)

        self.store.replace(updated)
        if self.channel is not None:
            try:
                await self.channel.emit_moved(task_id, status)
            except Exception as e:
                logger.warning("Could not broadcast move of %s: %s", task_id, e)
        return True

    @property
    def moves_in_flight(self) -> frozenset[str]:
        return frozenset(self._in_flight)

    # -- realtime -----------------------------------------------------------

    def handle_event(self, event: RealtimeEvent) -> None:
        """Merge a realtime event; replays and reorderings are harmless."""
        if event.type == "created":
            task = event.task
            if (
                self.current_user_id is not None
                and task.owner_id is not None
                and task.owner_id != self.current_user_id
            ):
                logger.warning("Ignoring created event for foreign task %s", task.id)
                return
            if not self.store.insert(task):
                logger.debug("Task %s already present, created event ignored", task.id)
        elif event.type == "updated":
            if not self.store.replace(event.task):
                logger.warning("Updated event for unknown task %s ignored", event.task.id)
        elif event.type == "deleted":
            self.store.remove(event.target_id)
        else:
            logger.debug("Task %s moved to %s by a peer", event.task_id, event.status)

    # -- derived view and filters -------------------------------------------

    @property
    def visible_tasks(self) -> list[Task]:
        return self.store.visible_tasks

    @property
    def columns(self) -> dict[str, list[Task]]:
        return self.store.columns

    def set_query(self, text: str) -> None:
        self._search.cancel()
        self.store.set_query(text)

    def set_query_debounced(self, text: str) -> None:
        """Commit ``text`` as the query once typing pauses."""
        self._search.call(text)

    def flush_query(self) -> None:
        self._search.flush()

    @property
    def query_pending(self) -> bool:
        return self._search.pending

    def set_status_filter(self, status_filter: str) -> bool:
        if status_filter not in STATUS_FILTERS:
            self._notify(
                f"Invalid status filter: {status_filter}. "
                f"Expected one of: {', '.join(STATUS_FILTERS)}"
            )
            return False
        self.store.set_status_filter(status_filter)
        return True
