"""Unit tests for TaskService."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from taskboard_cli.models import Task, TaskCreate, TaskUpdate
from taskboard_cli.models.exceptions import NotFoundError, ValidationError
from taskboard_cli.services.realtime.local import LocalRealtimeHub
from taskboard_cli.services.task_service import TaskService, get_task_service


def _task(task_id: str = "t1", title: str = "Task", status: str = "To Do") -> Task:
    return Task(id=task_id, title=title, status=status, owner_id="u1")


@pytest.fixture
def repository():
    repo = MagicMock()
    repo.list_all = AsyncMock(return_value=[_task()])
    repo.get = AsyncMock(return_value=_task())
    repo.add = AsyncMock(return_value=_task())
    repo.update = AsyncMock(return_value=_task(status="Done"))
    repo.delete = AsyncMock(return_value=True)
    return repo


@pytest.fixture
def hub():
    return LocalRealtimeHub()


@pytest.fixture
def events(hub):
    received = []
    hub.subscribe("u1", received.append)
    return received


class TestCreateTask:
    @pytest.mark.asyncio
    async def test_defaults_to_todo(self, repository):
        await TaskService(repository).create_task("  Buy milk  ")
        repository.add.assert_awaited_once_with(
            TaskCreate(title="Buy milk", description="", status="To Do")
        )

    @pytest.mark.asyncio
    async def test_explicit_status(self, repository):
        await TaskService(repository).create_task("Buy milk", "2 litres", "In Progress")
        created = repository.add.await_args.args[0]
        assert created.status == "In Progress"
        assert created.description == "2 litres"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("title", ["", "   ", None])
    async def test_blank_title_rejected_before_repository(self, repository, title):
        with pytest.raises(ValidationError, match="Title is required"):
            await TaskService(repository).create_task(title)
        repository.add.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_status_rejected(self, repository):
        with pytest.raises(ValidationError, match="Invalid status"):
            await TaskService(repository).create_task("Buy milk", status="Blocked")

    @pytest.mark.asyncio
    async def test_publishes_created(self, repository, hub, events):
        await TaskService(repository, publisher=hub).create_task("Task")
        assert [e.wire_name for e in events] == ["task:created"]


class TestUpdateTask:
    @pytest.mark.asyncio
    async def test_passes_only_supplied_fields(self, repository):
        await TaskService(repository).update_task("t1", status="Done")
        repository.update.assert_awaited_once_with("t1", TaskUpdate(status="Done"))

    @pytest.mark.asyncio
    async def test_none_description_clears_it(self, repository):
        await TaskService(repository).update_task("t1", description=None)
        update = repository.update.await_args.args[1]
        assert update.description == ""

    @pytest.mark.asyncio
    async def test_unknown_field_rejected(self, repository):
        with pytest.raises(ValidationError, match="Unknown task fields: owner_id"):
            await TaskService(repository).update_task("t1", owner_id="u2")

    @pytest.mark.asyncio
    async def test_blank_title_rejected(self, repository):
        with pytest.raises(ValidationError):
            await TaskService(repository).update_task("t1", title=" ")
        repository.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_not_found_propagates(self, repository):
        repository.update.side_effect = NotFoundError("Task not found")
        with pytest.raises(NotFoundError):
            await TaskService(repository).update_task("t1", status="Done")

    @pytest.mark.asyncio
    async def test_move_task_changes_status_only(self, repository, hub, events):
        await TaskService(repository, publisher=hub).move_task("t1", "Done")
        repository.update.assert_awaited_once_with("t1", TaskUpdate(status="Done"))
        assert events[0].type == "updated"
        assert events[0].task.status == "Done"


class TestDeleteTask:
    @pytest.mark.asyncio
    async def test_delete(self, repository):
        assert await TaskService(repository).delete_task("t1") is True
        repository.delete.assert_awaited_once_with("t1")
        repository.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_publishes_deleted_to_owner(self, repository, hub, events):
        await TaskService(repository, publisher=hub).delete_task("t1")
        assert events[0].type == "deleted"
        assert events[0].target_id == "t1"

    @pytest.mark.asyncio
    async def test_missing_task_publishes_nothing(self, repository, hub, events):
        repository.get.side_effect = NotFoundError("Task not found")
        with pytest.raises(NotFoundError):
            await TaskService(repository, publisher=hub).delete_task("t1")
        repository.delete.assert_not_awaited()
        assert events == []


class TestReads:
    @pytest.mark.asyncio
    async def test_list_and_get(self, repository):
        service = TaskService(repository)
        assert [t.id for t in await service.list_tasks()] == ["t1"]
        assert (await service.get_task("t1")).id == "t1"


def test_get_task_service_uses_active_context(config_service):
    service = get_task_service()
    strategy_context = config_service.storage_strategy_context
    assert service.repository is strategy_context.task_repository
    assert service.publisher is strategy_context.event_publisher
