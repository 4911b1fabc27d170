"""Tests for the Textual board app, driven through the pilot."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from taskboard_cli.models import Task
from taskboard_cli.services.board_controller import BoardController
from taskboard_cli.utils.ui.board_view import BoardViewApp, ConfirmScreen


def _task(task_id: str, title: str, status: str = "To Do") -> Task:
    return Task(id=task_id, title=title, status=status, owner_id="u1")


@pytest.fixture
def service():
    svc = MagicMock()
    svc.list_tasks = AsyncMock(
        return_value=[
            _task("1", "Write report"),
            _task("2", "Review PR", "In Progress"),
            _task("3", "Fix login"),
        ]
    )
    svc.create_task = AsyncMock(side_effect=lambda title, description, status: _task(
        "9", title, status
    ))
    svc.update_task = AsyncMock(side_effect=lambda task_id, **changes: _task(
        task_id, changes.get("title", "Write report"), changes.get("status", "To Do")
    ))
    svc.delete_task = AsyncMock(return_value=True)
    return svc


@pytest.fixture
def controller(service):
    return BoardController(service, None, current_user_id="u1", search_debounce_ms=10)


async def _settle(app, pilot) -> None:
    await pilot.pause()
    await app.workers.wait_for_complete()
    await pilot.pause()


class TestBoardViewApp:
    def test_init_installs_modal_confirm(self, controller):
        app = BoardViewApp(controller, subtitle="local (local)")
        assert controller.confirm == app.confirm
        assert app.sub_title == "local (local)"

    def test_confirm_delete_disabled(self, controller):
        BoardViewApp(controller, confirm_delete=False)
        assert controller.confirm is None

    @pytest.mark.asyncio
    async def test_loads_and_navigates(self, controller):
        app = BoardViewApp(controller)
        async with app.run_test() as pilot:
            await _settle(app, pilot)
            assert app.selected_task().id == "1"

            await pilot.press("j")
            assert app.selected_task().id == "3"

            await pilot.press("l")
            assert app.current_status == "In Progress"
            assert app.selected_task().id == "2"

            await pilot.press("3")
            assert app.current_status == "Done"
            assert app.selected_task() is None

    @pytest.mark.asyncio
    async def test_move_right(self, controller, service):
        app = BoardViewApp(controller)
        async with app.run_test() as pilot:
            await _settle(app, pilot)
            await pilot.press("L")
            await _settle(app, pilot)

        service.update_task.assert_awaited_once_with(
            "1", status="In Progress", title="Write report", description=""
        )
        assert controller.store.get("1").status == "In Progress"

    @pytest.mark.asyncio
    async def test_cycle_filter(self, controller):
        app = BoardViewApp(controller)
        async with app.run_test() as pilot:
            await _settle(app, pilot)
            await pilot.press("f")
            assert controller.store.status_filter == "To Do"
            await pilot.press("f", "f", "f")
            assert controller.store.status_filter == "All"

    @pytest.mark.asyncio
    async def test_search_submit(self, controller):
        app = BoardViewApp(controller)
        async with app.run_test() as pilot:
            await _settle(app, pilot)
            await pilot.press("slash", "f", "i", "x", "enter")
            await pilot.pause()

            assert controller.store.query == "fix"
            assert [task.id for task in controller.visible_tasks] == ["3"]
            assert app.prompt_mode is None

    @pytest.mark.asyncio
    async def test_add_in_current_column(self, controller, service):
        app = BoardViewApp(controller)
        async with app.run_test() as pilot:
            await _settle(app, pilot)
            await pilot.press("l", "a", "N", "e", "w", "enter")
            await _settle(app, pilot)

        service.create_task.assert_awaited_once_with("New", "", "In Progress")
        assert controller.store.get("9").status == "In Progress"

    @pytest.mark.asyncio
    async def test_delete_confirmed(self, controller, service):
        app = BoardViewApp(controller)
        async with app.run_test() as pilot:
            await _settle(app, pilot)
            await pilot.press("x")
            await pilot.pause(0.1)
            assert isinstance(app.screen, ConfirmScreen)

            await pilot.press("y")
            await _settle(app, pilot)

        service.delete_task.assert_awaited_once_with("1")
        assert "1" not in controller.store

    @pytest.mark.asyncio
    async def test_delete_declined(self, controller, service):
        app = BoardViewApp(controller)
        async with app.run_test() as pilot:
            await _settle(app, pilot)
            await pilot.press("x")
            await pilot.pause(0.1)
            await pilot.press("n")
            await _settle(app, pilot)

        service.delete_task.assert_not_awaited()
        assert "1" in controller.store
