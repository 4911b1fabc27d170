"""Unit tests for REST API adapter implementations.

All API calls are mocked via AsyncMock so no real HTTP traffic is made.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from taskboard_cli.adapters.rest_api import RestApiTaskRepository, RestApiUserRepository
from taskboard_cli.models import Task, TaskCreate, TaskUpdate, UserCreate
from taskboard_cli.models.exceptions import AuthError, NetworkError, NotFoundError


def _task_dict(**kwargs) -> dict:
    base = {
        "_id": "task-001",
        "title": "Test task",
        "description": "",
        "status": "To Do",
        "user": "user-001",
        "createdAt": "2024-06-15T09:00:00.000Z",
        "updatedAt": "2024-06-15T09:00:00.000Z",
    }
    base.update(kwargs)
    return base


def _user_dict(**kwargs) -> dict:
    base = {"_id": "user-001", "name": "Ada", "email": "ada@example.com"}
    base.update(kwargs)
    return base


@pytest.fixture
def task_repo():
    repo = RestApiTaskRepository(client=MagicMock())
    api = MagicMock()
    api.list_tasks = AsyncMock(return_value=[_task_dict()])
    api.get_task = AsyncMock(return_value=_task_dict())
    api.create_task = AsyncMock(return_value=_task_dict(title="New"))
    api.update_task = AsyncMock(return_value=_task_dict(status="Done"))
    api.delete_task = AsyncMock(return_value=None)
    repo._tasks_api = api
    return repo


class TestRestApiTaskRepository:
    @pytest.mark.asyncio
    async def test_list_all_returns_task_objects(self, task_repo):
        tasks = await task_repo.list_all()
        assert len(tasks) == 1
        assert isinstance(tasks[0], Task)
        assert tasks[0].owner_id == "user-001"

    @pytest.mark.asyncio
    async def test_get(self, task_repo):
        task = await task_repo.get("task-001")
        assert task.id == "task-001"
        task_repo._tasks_api.get_task.assert_awaited_once_with("task-001")

    @pytest.mark.asyncio
    async def test_get_not_found_propagates(self, task_repo):
        task_repo._tasks_api.get_task.side_effect = NotFoundError("Task not found")
        with pytest.raises(NotFoundError):
            await task_repo.get("missing")

    @pytest.mark.asyncio
    async def test_add(self, task_repo):
        task = await task_repo.add(TaskCreate(title="New", description="d", status="Done"))
        assert task.title == "New"
        task_repo._tasks_api.create_task.assert_awaited_once_with(
            "New", description="d", status="Done"
        )

    @pytest.mark.asyncio
    async def test_update_sends_only_set_fields(self, task_repo):
        task = await task_repo.update("task-001", TaskUpdate(status="Done"))
        assert task.status == "Done"
        task_repo._tasks_api.update_task.assert_awaited_once_with("task-001", status="Done")

    @pytest.mark.asyncio
    async def test_delete(self, task_repo):
        assert await task_repo.delete("task-001") is True

    @pytest.mark.asyncio
    async def test_malformed_task_becomes_network_error(self, task_repo):
        task_repo._tasks_api.update_task.return_value = {"status": "Done"}
        with pytest.raises(NetworkError, match="Malformed task"):
            await task_repo.update("task-001", TaskUpdate(status="Done"))


class TestRestApiUserRepository:
    def _make_repo(self, credentials=None):
        client = MagicMock()
        client.config_manager.load_credentials.return_value = credentials
        repo = RestApiUserRepository(client=client)
        repo._auth_api = MagicMock()
        repo._auth_api.signup = AsyncMock()
        repo._auth_api.login = AsyncMock()
        return repo

    @pytest.mark.asyncio
    async def test_login_returns_session(self):
        repo = self._make_repo()
        repo.auth_api.login.return_value = {"token": "jwt", "user": _user_dict()}
        session = await repo.login("ada@example.com", "secret")
        assert session.token == "jwt"
        assert session.user.id == "user-001"

    @pytest.mark.asyncio
    async def test_login_accepts_flat_user_document(self):
        repo = self._make_repo()
        repo.auth_api.login.return_value = {"token": "jwt", **_user_dict()}
        session = await repo.login("ada@example.com", "secret")
        assert session.user.email == "ada@example.com"

    @pytest.mark.asyncio
    async def test_login_without_token_fails(self):
        repo = self._make_repo()
        repo.auth_api.login.return_value = {"user": _user_dict()}
        with pytest.raises(AuthError):
            await repo.login("ada@example.com", "secret")

    @pytest.mark.asyncio
    async def test_signup_without_token_logs_in(self):
        repo = self._make_repo()
        repo.auth_api.signup.return_value = {"user": _user_dict()}
        repo.auth_api.login.return_value = {"token": "jwt", "user": _user_dict()}

        session = await repo.signup(
            UserCreate(name="Ada", email="ada@example.com", password="secret")
        )

        assert session.token == "jwt"
        repo.auth_api.login.assert_awaited_once_with("ada@example.com", "secret")

    @pytest.mark.asyncio
    async def test_resolve_uses_cached_profile(self):
        repo = self._make_repo({"token": "jwt", "user": _user_dict()})
        user = await repo.resolve("jwt")
        assert user.id == "user-001"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, ""])
    async def test_resolve_without_token(self, token):
        repo = self._make_repo({"token": "jwt", "user": _user_dict()})
        with pytest.raises(AuthError, match="no token"):
            await repo.resolve(token)

    @pytest.mark.asyncio
    async def test_resolve_unknown_token(self):
        repo = self._make_repo({"token": "other", "user": _user_dict()})
        with pytest.raises(AuthError):
            await repo.resolve("jwt")
