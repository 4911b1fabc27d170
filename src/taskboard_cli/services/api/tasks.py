"""Tasks API endpoints."""

from typing import Any

from taskboard_cli.services.api.client import APIClient, response_json


class TasksAPI:
    """Tasks API client."""

    def __init__(self, client: APIClient):
        self.client = client

    async def list_tasks(self) -> list[dict]:
        """List the caller's tasks."""
        response = await self.client.get("/tasks")
        data = response_json(response)
        # Some deployments wrap the array
        if isinstance(data, dict):
            return data.get("tasks", [])
        return data

    async def get_task(self, task_id: str) -> dict:
        """Get a specific task by ID."""
        response = await self.client.get(f"/tasks/{task_id}")
        return response_json(response)

    async def create_task(
        self,
        title: str,
        *,
        description: str = "",
        status: str | None = None,
    ) -> dict:
        """Create a new task."""
        data: dict[str, Any] = {"title": title, "description": description}
        if status:
            data["status"] = status

        response = await self.client.post("/tasks", json=data)
        return response_json(response)

    async def update_task(self, task_id: str, **updates: Any) -> dict:
        """Update a task with the supplied fields only."""
        response = await self.client.put(f"/tasks/{task_id}", json=updates)
        return response_json(response)

    async def delete_task(self, task_id: str) -> None:
        """Delete a task."""
        await self.client.delete(f"/tasks/{task_id}")

    async def publish_event(self, event: dict) -> None:
        """Post a client event (``{"event": ..., "data": ...}``) to the stream."""
        await self.client.post("/tasks/events", json=event)
