"""Authentication commands."""

import typer
from rich.prompt import Prompt

from taskboard_cli.services.auth_service import get_auth_service
from taskboard_cli.services.config_service import get_config_service
from taskboard_cli.utils.typer_helpers import SuggestingGroup
from taskboard_cli.utils.ui.console import get_console
from taskboard_cli.utils.ui.formatters import format_info, format_output, format_success

from .decorators import command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Authentication commands")
console = get_console()


@app.command()
@command_wrapper(auth_required=False)
async def signup(
    name: str | None = typer.Option(None, "--name", help="Display name"),
    email: str | None = typer.Option(None, "--email", help="Email address"),
    password: str | None = typer.Option(None, "--password", help="Password"),
) -> None:
    """Create an account and log in."""
    if not name:
        name = Prompt.ask("Name")
    if not email:
        email = Prompt.ask("Email")
    if not password:
        password = Prompt.ask("Password", password=True)

    session = await get_auth_service().signup(name, email, password)
    context = get_config_service().get_current_context()
    format_success(f"Signed up as {session.user.email} (context: {context.name})")


@app.command()
@command_wrapper(auth_required=False)
async def login(
    email: str | None = typer.Option(None, "--email", help="Email address"),
    password: str | None = typer.Option(None, "--password", help="Password"),
) -> None:
    """Log in to the active context."""
    if not email:
        email = Prompt.ask("Email")
    if not password:
        password = Prompt.ask("Password", password=True)

    session = await get_auth_service().login(email, password)
    context = get_config_service().get_current_context()
    format_success(f"Logged in as {session.user.email} (context: {context.name})")


@app.command()
@command_wrapper(auth_required=False)
async def logout() -> None:
    """Log out and forget the stored credential."""
    auth_service = get_auth_service()
    if not auth_service.is_authenticated():
        format_info("Not logged in")
        return
    await auth_service.logout()
    format_success("Logged out")


@app.command()
@command_wrapper
async def whoami(
    output: str = typer.Option("pretty", "--output", "-o", help="Output format"),
) -> None:
    """Show the logged-in user."""
    user = await get_auth_service().current_user()
    if output == "pretty":
        context = get_config_service().get_current_context()
        console.print(f"[bold]{user.name}[/bold] <{user.email}>")
        console.print(f"[dim]Context: {context.name} ({context.type})[/dim]")
        return
    format_output(user.model_dump(mode="json"), output)
