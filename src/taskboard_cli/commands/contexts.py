"""Context management commands.

Provides kubectl-style switching between a local SQLite vault and a remote
task API.
"""

import typer
from rich.table import Table

from taskboard_cli.models.config_models import Context
from taskboard_cli.models.exceptions import ValidationError
from taskboard_cli.services.config_service import get_config_service
from taskboard_cli.utils.typer_helpers import SuggestingGroup
from taskboard_cli.utils.ui.console import get_console
from taskboard_cli.utils.ui.formatters import format_output, format_success

from .decorators import command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Manage storage contexts (local/remote)")
console = get_console()


@app.command("list")
@command_wrapper(auth_required=False)
def list_contexts(
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """List configured contexts."""
    service = get_config_service()
    current = service.config.current_context_name
    contexts = service.list_contexts()

    if output != "table":
        format_output(
            [
                {**ctx.model_dump(), "current": ctx.name == current}
                for ctx in contexts
            ],
            output,
        )
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("", width=1)
    table.add_column("Name", style="cyan")
    table.add_column("Type")
    table.add_column("Source")
    table.add_column("Logged in", justify="center")
    for ctx in contexts:
        logged_in = service.load_context_credentials(ctx.name) is not None
        table.add_row(
            "*" if ctx.name == current else "",
            ctx.name,
            ctx.type,
            ctx.source,
            "✓" if logged_in else "-",
        )
    console.print(table)


@app.command("use")
@command_wrapper(auth_required=False)
def use_context(name: str = typer.Argument(..., help="Context name")) -> None:
    """Switch the active context."""
    try:
        context = get_config_service().use_context(name)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    format_success(f"Switched to context '{context.name}' ({context.type})")


@app.command("add")
@command_wrapper(auth_required=False)
def add_context(
    name: str = typer.Argument(..., help="Context name"),
    source: str = typer.Argument(..., help="Database path or API URL"),
    context_type: str = typer.Option(
        "remote", "--type", "-t", help="Context type (local or remote)"
    ),
    description: str = typer.Option("", "--description", "-d", help="Description"),
    use: bool = typer.Option(False, "--use", help="Switch to the new context"),
) -> None:
    """Add a context."""
    service = get_config_service()
    try:
        context = Context(
            name=name, type=context_type, source=source, description=description
        )
        service.add_context(context)
        if use:
            service.use_context(name)
    except ValueError as e:
        # pydantic's ValidationError is a ValueError too
        raise ValidationError(str(e)) from e
    format_success(f"Added context '{name}'" + (" and switched to it" if use else ""))


@app.command("remove")
@command_wrapper(auth_required=False)
def remove_context(
    name: str = typer.Argument(..., help="Context name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Remove a context and its stored credential."""
    if not yes and not typer.confirm(f"Remove context '{name}'?"):
        console.print("[yellow]Cancelled.[/yellow]")
        return
    try:
        get_config_service().remove_context(name)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    format_success(f"Removed context '{name}'")
