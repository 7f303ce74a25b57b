"""Authentication commands."""

from typing import Optional

import typer

from pomodoro_cli.services.auth_service import AuthService
from pomodoro_cli.utils.ui.console import get_console
from pomodoro_cli.utils.ui.formatters import format_info, format_success

from .decorators import AppError, command_wrapper

console = get_console()
app = typer.Typer(help="Authentication commands")


@app.command("login")
@command_wrapper
async def login(
    cookie: Optional[str] = typer.Option(
        None, "--cookie", help="Session cookie value copied from the browser"
    ),
):
    """Sign in through the browser and store the session cookie."""
    auth = AuthService()
    if cookie is None:
        console.print(
            f"Open [cyan]{auth.login_url()}[/cyan] in your browser to sign in,"
        )
        console.print("then copy the session cookie value set for the site.\n")
        cookie = typer.prompt("Session cookie", hide_input=True)

    try:
        auth.login(cookie)
    except ValueError as e:
        raise AppError(str(e)) from e

    user = await auth.resolve_identity()
    if user is None:
        auth.config_service.clear_credentials()
        raise AppError("The backend did not accept that session cookie.")
    format_success(f"Signed in as {user.name}")


@app.command("logout")
@command_wrapper
async def logout():
    """Sign out and forget the stored session cookie."""
    auth = AuthService()
    if not auth.is_authenticated():
        format_info("Not signed in")
        return
    message = await auth.logout()
    format_success(message)


@app.command("whoami")
@command_wrapper(auth_required=True)
async def whoami():
    """Show the signed-in user."""
    user = await AuthService().resolve_identity()
    if user is None:
        raise AppError("Session expired or backend unreachable. Sign in again.")
    console.print(f"[bold]{user.name}[/bold] (id {user.id})")
    if user.email:
        console.print(user.email)
