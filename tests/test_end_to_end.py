"""End-to-end flows over the local context: auth, persistence, board and live updates."""

from __future__ import annotations

import asyncio

import pytest

from taskboard_cli.models.exceptions import NetworkError, NotFoundError
from taskboard_cli.services.auth_service import get_auth_service
from taskboard_cli.services.board_controller import BoardController
from taskboard_cli.services.config_service import get_storage_strategy_context
from taskboard_cli.services.task_service import get_task_service


async def _until(predicate, attempts: int = 50) -> None:
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


async def _login_as(name: str, email: str) -> str:
    auth = get_auth_service()
    auth.config_service.clear_credentials()
    session = await auth.signup(name, email, "secret1")
    return session.user.id


def _board_for(user_id: str) -> BoardController:
    strategy_context = get_storage_strategy_context()
    return BoardController(
        get_task_service(),
        strategy_context.create_realtime_channel(user_id),
        current_user_id=user_id,
    )


@pytest.mark.asyncio
async def test_signup_create_and_list(config_service):
    await _login_as("Ada", "ada@example.com")
    service = get_task_service()

    created = await service.create_task("Write report", "Q3 numbers")
    tasks = await service.list_tasks()

    assert [task.id for task in tasks] == [created.id]
    assert tasks[0].status == "To Do"
    assert tasks[0].description == "Q3 numbers"


@pytest.mark.asyncio
async def test_users_are_isolated(config_service):
    await _login_as("Ada", "ada@example.com")
    ada_task = await get_task_service().create_task("Ada's task")

    await _login_as("Bob", "bob@example.com")
    bob_service = get_task_service()

    assert await bob_service.list_tasks() == []
    with pytest.raises(NotFoundError):
        await bob_service.update_task(ada_task.id, title="Mine now")
    with pytest.raises(NotFoundError):
        await bob_service.delete_task(ada_task.id)


@pytest.mark.asyncio
async def test_board_move_persists(config_service):
    user_id = await _login_as("Ada", "ada@example.com")
    task = await get_task_service().create_task("Write report")

    board = _board_for(user_id)
    await board.start()
    assert await board.move_task_to(task.id, "Done")
    await board.stop()

    stored = await get_task_service().get_task(task.id)
    assert stored.status == "Done"


@pytest.mark.asyncio
async def test_board_rolls_back_rejected_move(config_service, mocker):
    user_id = await _login_as("Ada", "ada@example.com")
    service = get_task_service()
    task = await service.create_task("Write report")

    board = BoardController(service, None, current_user_id=user_id)
    await board.start()
    mocker.patch.object(
        service.repository, "update", side_effect=NetworkError("Cannot reach server")
    )

    assert not await board.move_task_to(task.id, "Done")

    assert board.store.get(task.id).status == "To Do"
    notes = board.drain_notifications()
    assert notes and "Cannot reach server" in notes[-1].message


@pytest.mark.asyncio
async def test_second_board_sees_changes_live(config_service):
    user_id = await _login_as("Ada", "ada@example.com")
    watcher = _board_for(user_id)
    await watcher.start()

    service = get_task_service()
    task = await service.create_task("Write report")
    await _until(lambda: task.id in watcher.store)

    await service.update_task(task.id, status="In Progress")
    await _until(lambda: watcher.store.get(task.id).status == "In Progress")

    await service.delete_task(task.id)
    await _until(lambda: task.id not in watcher.store)
    await watcher.stop()


@pytest.mark.asyncio
async def test_live_updates_do_not_cross_users(config_service):
    ada_id = await _login_as("Ada", "ada@example.com")
    ada_board = _board_for(ada_id)
    await ada_board.start()

    await _login_as("Bob", "bob@example.com")
    await get_task_service().create_task("Bob's task")
    for _ in range(10):
        await asyncio.sleep(0)

    assert len(ada_board.store) == 0
    await ada_board.stop()
