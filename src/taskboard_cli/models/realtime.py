"""Realtime event models and their wire names."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel

from .core import Task, TaskStatus

EventType = Literal["created", "updated", "deleted", "moved"]

WIRE_PREFIX = "task:"


class RealtimeEvent(BaseModel):
    """A task-change notification pushed over the realtime channel.

    ``created`` and ``updated`` carry the full task, ``deleted`` carries only
    the identifier and ``moved`` (advisory) carries identifier and status.
    """

    type: EventType
    task: Task | None = None
    task_id: str | None = None
    status: TaskStatus | None = None

    @property
    def wire_name(self) -> str:
        return f"{WIRE_PREFIX}{self.type}"

    @property
    def target_id(self) -> str | None:
        """Identifier of the task this event is about."""
        if self.task is not None:
            return self.task.id
        return self.task_id

    @classmethod
    def created(cls, task: Task) -> RealtimeEvent:
        return cls(type="created", task=task, task_id=task.id)

    @classmethod
    def updated(cls, task: Task) -> RealtimeEvent:
        return cls(type="updated", task=task, task_id=task.id)

    @classmethod
    def deleted(cls, task_id: str) -> RealtimeEvent:
        return cls(type="deleted", task_id=task_id)

    @classmethod
    def moved(cls, task_id: str, status: TaskStatus) -> RealtimeEvent:
        return cls(type="moved", task_id=task_id, status=status)

    @classmethod
    def from_wire(cls, name: str, data: Any) -> RealtimeEvent:
        """Build an event from its wire name (``task:created``) and JSON payload.

        Raises:
            ValueError: If the event name is unknown or the payload malformed
        """
        if not name.startswith(WIRE_PREFIX):
            raise ValueError(f"Unknown realtime event: {name}")
        kind = name[len(WIRE_PREFIX) :]

        if kind in ("created", "updated"):
            return cls(type=kind, task=Task.model_validate(data))
        if kind == "deleted":
            # Payload is either the bare identifier or an object holding it
            task_id = _payload_id(data) if isinstance(data, dict) else data
            valid = isinstance(task_id, (str, int)) and not isinstance(task_id, bool)
            if not valid or task_id == "":
                raise ValueError(f"{name} payload has no task id")
            return cls.deleted(str(task_id))
        if kind == "moved":
            if not isinstance(data, dict):
                raise ValueError(f"{name} payload must be an object")
            task_id = _payload_id(data)
            if task_id is None or "status" not in data:
                raise ValueError(f"{name} payload needs id and status")
            return cls.moved(str(task_id), data["status"])
        raise ValueError(f"Unknown realtime event: {name}")

    def to_wire(self) -> dict[str, Any]:
        """Serialize to ``{"event": name, "data": payload}``."""
        if self.type in ("created", "updated"):
            if self.task is None:
                raise ValueError(f"{self.wire_name} event has no task")
            data: Any = self.task.model_dump(mode="json")
        elif self.type == "deleted":
            data = self.task_id
        else:
            data = {"id": self.task_id, "status": self.status}
        return {"event": self.wire_name, "data": data}


def _payload_id(data: dict) -> Any:
    return data.get("id") or data.get("_id")
