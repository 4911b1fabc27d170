"""Task management commands."""

import typer

from taskboard_cli.models import STATUS_FILTERS, STATUSES, Task, filter_tasks
from taskboard_cli.models.exceptions import NotFoundError, ValidationError
from taskboard_cli.services.config_service import get_config_service
from taskboard_cli.services.task_service import TaskService, get_task_service
from taskboard_cli.utils.typer_helpers import SuggestingGroup
from taskboard_cli.utils.ui.console import get_console
from taskboard_cli.utils.ui.formatters import (
    format_info,
    format_output,
    format_success,
    short_id,
)

from .decorators import command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Task management commands")
console = get_console()


def default_output_format() -> str:
    return get_config_service().config.output.format


async def resolve_task(service: TaskService, ref: str) -> Task:
    """Find a task by full id or by a unique id prefix."""
    tasks = await service.list_tasks()
    for task in tasks:
        if task.id == ref:
            return task

    matches = [task for task in tasks if task.id.startswith(ref)]
    if not matches:
        raise NotFoundError(f"Task not found: {ref}")
    if len(matches) > 1:
        candidates = ", ".join(short_id(task.id, len(ref) + 4) for task in matches)
        raise ValidationError(f"Task id '{ref}' is ambiguous: {candidates}")
    return matches[0]


def _check_status(status: str | None, allowed: tuple[str, ...] = STATUSES) -> None:
    if status is not None and status not in allowed:
        raise ValidationError(
            f"Invalid status: {status}. Expected one of: {', '.join(allowed)}"
        )


@app.command("list")
@command_wrapper
async def list_tasks(
    status: str | None = typer.Option(
        None, "--status", "-s", help="Filter by status (All, To Do, In Progress, Done)"
    ),
    search: str | None = typer.Option(
        None, "--search", help="Only tasks whose title or description contains this"
    ),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """List your tasks."""
    _check_status(status, STATUS_FILTERS)
    tasks = await get_task_service().list_tasks()
    tasks = filter_tasks(tasks, search or "", status or "All")
    format_output(tasks, output or default_output_format())


@app.command("add")
@command_wrapper
async def add_task(
    title: str = typer.Argument(..., help="Task title"),
    description: str = typer.Option("", "--description", "-d", help="Description"),
    status: str | None = typer.Option(None, "--status", "-s", help="Initial column"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Create a task."""
    task = await get_task_service().create_task(title, description, status)
    fmt = output or default_output_format()
    if fmt == "pretty":
        format_success(f"Created task: {task.title} [{short_id(task.id)}]")
    else:
        format_output(task, fmt)


@app.command("show")
@command_wrapper
async def show_task(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output format"),
) -> None:
    """Show one task."""
    service = get_task_service()
    task = await resolve_task(service, task_id)
    format_output(task, output or default_output_format())


@app.command("edit")
@command_wrapper
async def edit_task(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    title: str | None = typer.Option(None, "--title", "-t", help="New title"),
    description: str | None = typer.Option(
        None, "--description", "-d", help="New description"
    ),
    status: str | None = typer.Option(None, "--status", "-s", help="New column"),
) -> None:
    """Change the title, description or status of a task."""
    changes = {
        key: value
        for key, value in (
            ("title", title),
            ("description", description),
            ("status", status),
        )
        if value is not None
    }
    if not changes:
        raise ValidationError("Nothing to change: pass --title, --description or --status")

    service = get_task_service()
    task = await resolve_task(service, task_id)
    task = await service.update_task(task.id, **changes)
    format_success(f"Updated task: {task.title} [{short_id(task.id)}]")


@app.command("move")
@command_wrapper
async def move_task(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    status: str = typer.Argument(..., help="Target column (To Do, In Progress, Done)"),
) -> None:
    """Move a task to another column."""
    _check_status(status)
    service = get_task_service()
    task = await resolve_task(service, task_id)
    if task.status == status:
        format_info(f"Task is already in '{status}'")
        return
    task = await service.move_task(task.id, status)
    format_success(f"Moved '{task.title}' to {task.status}")


@app.command("delete")
@command_wrapper
async def delete_task(
    task_id: str = typer.Argument(..., help="Task ID or prefix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a task."""
    service = get_task_service()
    task = await resolve_task(service, task_id)
    if not yes and not typer.confirm(f"Delete task '{task.title}'?"):
        format_info("Cancelled")
        return
    await service.delete_task(task.id)
    format_success(f"Deleted task: {task.title}")
