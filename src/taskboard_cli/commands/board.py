"""Kanban board command."""

import asyncio

import typer

from taskboard_cli.models import STATUS_FILTERS, filter_tasks, group_by_status
from taskboard_cli.models.exceptions import ValidationError
from taskboard_cli.services.auth_service import get_auth_service
from taskboard_cli.services.board_controller import BoardController
from taskboard_cli.services.config_service import get_config_service
from taskboard_cli.services.task_service import get_task_service
from taskboard_cli.utils.ui.formatters import format_board

from .decorators import command_wrapper


def build_board_controller() -> BoardController:
    """Wire a controller for the active context and logged-in user."""
    config_service = get_config_service()
    config = config_service.config
    user = asyncio.run(get_auth_service().current_user())

    channel = None
    if config.realtime.enabled:
        channel = config_service.storage_strategy_context.create_realtime_channel(
            user.id, config.realtime
        )

    return BoardController(
        get_task_service(),
        channel,
        current_user_id=user.id,
        search_debounce_ms=config.board.search_debounce_ms,
    )


@command_wrapper
def board(
    status: str = typer.Option("All", "--status", "-s", help="Status filter"),
    search: str = typer.Option("", "--search", help="Search text"),
    interactive: bool = typer.Option(
        False, "--interactive", "-i", help="Open the live interactive board"
    ),
) -> None:
    """Show tasks as a kanban board."""
    if status not in STATUS_FILTERS:
        raise ValidationError(
            f"Invalid status filter: {status}. Expected one of: {', '.join(STATUS_FILTERS)}"
        )

    if not interactive:
        tasks = asyncio.run(get_task_service().list_tasks())
        format_board(group_by_status(filter_tasks(tasks, search, status)))
        return

    from taskboard_cli.utils.ui.board_view import run_board_view

    controller = build_board_controller()
    controller.store.set_status_filter(status)
    controller.store.set_query(search)
    context = get_config_service().get_current_context()
    run_board_view(
        controller,
        subtitle=f"{context.name} ({context.type})",
        confirm_delete=get_config_service().config.board.confirm_delete,
    )
