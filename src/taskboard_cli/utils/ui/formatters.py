"""Output formatters for different formats."""

import json
from typing import Any

import yaml
from rich.columns import Columns
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from taskboard_cli.models import STATUSES, Task
from taskboard_cli.utils.ui.console import get_console

console = get_console()

OUTPUT_FORMATS = ("pretty", "table", "json", "yaml")

STATUS_STYLES = {
    "To Do": "yellow",
    "In Progress": "cyan",
    "Done": "green",
}

STATUS_ICONS = {
    "To Do": "○",
    "In Progress": "◐",
    "Done": "●",
}


def short_id(task_id: str, length: int = 8) -> str:
    return task_id[:length]


def task_to_dict(task: Task) -> dict[str, Any]:
    return task.model_dump(mode="json")


def format_output(data: Any, output_format: str = "pretty") -> None:
    """Format and display output based on format."""
    if isinstance(data, Task):
        data = task_to_dict(data)
    elif isinstance(data, list) and data and isinstance(data[0], Task):
        data = [task_to_dict(task) for task in data]

    if output_format == "json":
        print(json.dumps(data, indent=2, default=str))
    elif output_format == "yaml":
        print(yaml.dump(data, default_flow_style=False, sort_keys=False))
    elif output_format == "table":
        format_table(data)
    else:
        format_pretty(data)


def format_table(data: Any) -> None:
    """Format data as a table."""
    if not data:
        console.print("[yellow]No items found[/yellow]")
        return

    if isinstance(data, dict):
        format_single_item(data)
        return

    columns = list(data[0].keys())
    table = Table(show_header=True, header_style="bold magenta")
    for col in columns:
        table.add_column(col.replace("_", " ").title())

    for item in data:
        table.add_row(*(_format_value(item.get(col)) for col in columns))

    console.print(table)


def format_single_item(item: dict) -> None:
    """Format a single item as key-value pairs."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    for key, value in item.items():
        table.add_row(key.replace("_", " ").title(), _format_value(value))

    console.print(table)


def _format_value(value: Any) -> str:
    if value is None or value == "":
        return "-"
    if isinstance(value, bool):
        return "✓" if value else "✗"
    return str(value)


def format_pretty(data: Any) -> None:
    """Human-oriented listing: one line per task, or details for one task."""
    if isinstance(data, dict):
        format_task_detail(data)
        return
    if not data:
        console.print("[dim]No tasks found[/dim]")
        return
    for item in data:
        console.print(format_task_line(item))


def format_task_line(task: dict) -> Text:
    status = task.get("status", "To Do")
    line = Text()
    line.append(f"{STATUS_ICONS.get(status, '?')} ", style=STATUS_STYLES.get(status))
    line.append(task["title"], style="bold")
    line.append(f"  [{short_id(task['id'])}]", style="dim")
    if task.get("description"):
        line.append(f"\n    {task['description']}", style="dim")
    return line


def format_task_detail(task: dict) -> None:
    status = task.get("status", "To Do")
    body = Text()
    body.append(f"{STATUS_ICONS.get(status, '?')} {status}\n", style=STATUS_STYLES.get(status))
    if task.get("description"):
        body.append(f"\n{task['description']}\n")
    body.append(f"\nID: {task['id']}", style="dim")
    if task.get("created_at"):
        body.append(f"\nCreated: {task['created_at']}", style="dim")
    if task.get("updated_at"):
        body.append(f"\nUpdated: {task['updated_at']}", style="dim")
    console.print(Panel(body, title=f"[bold]{task['title']}[/bold]", expand=False))


def format_board(columns: dict[str, list[Task]]) -> None:
    """Render the board as side-by-side columns."""
    panels = []
    for status in STATUSES:
        tasks = columns.get(status, [])
        body = Text()
        for task in tasks:
            body.append(f"• {task.title}", style="bold")
            body.append(f" [{short_id(task.id)}]\n", style="dim")
        if not tasks:
            body.append("(empty)", style="dim")
        panels.append(
            Panel(
                body,
                title=f"[{STATUS_STYLES[status]}]{status}[/] ({len(tasks)})",
                width=36,
            )
        )
    console.print(Columns(panels))


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[bold blue]Info:[/bold blue] {message}")
