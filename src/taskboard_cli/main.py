"""Main entry point for Taskboard CLI."""

import typer

from taskboard_cli import __version__
from taskboard_cli.commands import auth, board, contexts, tasks
from taskboard_cli.services.config_service import get_config_service
from taskboard_cli.utils.typer_helpers import SuggestingGroup
from taskboard_cli.utils.ui.console import get_console

# Create main app with custom group class
app = typer.Typer(
    name="taskboard",
    cls=SuggestingGroup,
    help="Collaborative kanban task tracking from the terminal",
    no_args_is_help=True,
)

console = get_console()


# Add subcommands
app.add_typer(auth.app, name="auth", help="Authentication commands")
app.add_typer(tasks.app, name="tasks", help="Task management commands")
app.add_typer(contexts.app, name="contexts", help="Context management (local/remote)")

# Top-level shortcuts
app.command("signup")(auth.signup)
app.command("login")(auth.login)
app.command("logout")(auth.logout)
app.command("whoami")(auth.whoami)
app.command("board")(board.board)


@app.command()
def version() -> None:
    """Show version and active context."""
    console.print(f"[bold]Taskboard CLI[/bold] version [cyan]{__version__}[/cyan]")
    try:
        context = get_config_service().get_current_context()
    except ValueError:
        console.print("[yellow]No active context configured[/yellow]")
        return
    console.print(f"[dim]Context: {context.name} ({context.type}) {context.source}[/dim]")


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
