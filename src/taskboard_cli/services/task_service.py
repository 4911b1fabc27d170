"""Task service - Business logic for task operations.

This service layer sits between callers (commands, the board controller) and
repositories. It validates input, delegates persistence to the repository and
publishes change events to the in-process hub when one is wired.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from taskboard_cli.models import (
    DEFAULT_STATUS,
    STATUSES,
    RealtimeEvent,
    Task,
    TaskCreate,
    TaskUpdate,
)
from taskboard_cli.models.exceptions import ValidationError
from taskboard_cli.repositories import TaskRepository

if TYPE_CHECKING:
    from taskboard_cli.services.realtime.local import LocalRealtimeHub

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "description", "status")


def validate_title(title: Any) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Title is required")
    return title.strip()


def validate_status(status: Any) -> str:
    if status not in STATUSES:
        raise ValidationError(
            f"Invalid status: {status}. Expected one of: {', '.join(STATUSES)}"
        )
    return status


class TaskService:
    """Service for task business logic.

    This service encapsulates business rules and orchestrates task operations
    using the task repository. Ownership scoping is the repository's job.
    """

    def __init__(
        self,
        task_repository: TaskRepository,
        publisher: LocalRealtimeHub | None = None,
    ):
        """Initialize the task service.

        Args:
            task_repository: TaskRepository implementation for data access
            publisher: Optional hub receiving created/updated/deleted events
        """
        self.repository = task_repository
        self.publisher = publisher

    def _publish(self, owner_id: str | None, event: RealtimeEvent) -> None:
        if self.publisher is not None:
            self.publisher.publish(owner_id, event)

    async def list_tasks(self) -> list[Task]:
        """List all tasks owned by the caller."""
        return await self.repository.list_all()

    async def get_task(self, task_id: str) -> Task:
        """Get a specific task by ID.

        Raises:
            NotFoundError: If the task is absent or owned by someone else
        """
        return await self.repository.get(task_id)

    async def create_task(
        self,
        title: str,
        description: str | None = "",
        status: str | None = None,
    ) -> Task:
        """Create a new task.

        Args:
            title: Task title (required, non-blank)
            description: Optional description
            status: Initial column; defaults to "To Do"

        Returns:
            Created Task object

        Raises:
            ValidationError: If the title is blank or the status unknown
        """
        task_data = TaskCreate(
            title=validate_title(title),
            description=description or "",
            status=validate_status(status) if status is not None else DEFAULT_STATUS,
        )
        task = await self.repository.add(task_data)
        logger.info("Created task %s", task.id)
        self._publish(task.owner_id, RealtimeEvent.created(task))
        return task

    async def update_task(self, task_id: str, **changes: Any) -> Task:
        """Update a task, applying only the supplied fields.

        Args:
            task_id: Task ID
            **changes: Any of title, description, status

        Returns:
            The full updated Task

        Raises:
            ValidationError: On unknown fields, a blank title or an unknown status
            NotFoundError: If the task is absent or owned by someone else
        """
        unknown = set(changes) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown task fields: {', '.join(sorted(unknown))}")

        if "title" in changes:
            changes["title"] = validate_title(changes["title"])
        if "status" in changes:
            changes["status"] = validate_status(changes["status"])
        if "description" in changes and changes["description"] is None:
            changes["description"] = ""

        task = await self.repository.update(task_id, TaskUpdate(**changes))
        logger.info("Updated task %s (%s)", task.id, ", ".join(sorted(changes)) or "no changes")
        self._publish(task.owner_id, RealtimeEvent.updated(task))
        return task

    async def move_task(self, task_id: str, status: str) -> Task:
        """Change only the status of a task."""
        return await self.update_task(task_id, status=status)

    async def delete_task(self, task_id: str) -> bool:
        """Delete a task.

        Raises:
            NotFoundError: If the task is absent or owned by someone else
        """
        owner_id = None
        if self.publisher is not None:
            owner_id = (await self.repository.get(task_id)).owner_id
        result = await self.repository.delete(task_id)
        logger.info("Deleted task %s", task_id)
        self._publish(owner_id, RealtimeEvent.deleted(task_id))
        return result


def get_task_service() -> TaskService:
    """Build a TaskService for the active context."""
    from taskboard_cli.services.config_service import get_storage_strategy_context

    strategy_context = get_storage_strategy_context()
    return TaskService(
        strategy_context.task_repository,
        publisher=strategy_context.event_publisher,
    )
