"""Main entry point for Pomodoro CLI."""

import typer

from pomodoro_cli import __version__
from pomodoro_cli.commands import auth, settings, timer
from pomodoro_cli.services.config_service import get_config_service
from pomodoro_cli.utils.ui.console import get_console

app = typer.Typer(
    name="pomodoro",
    help="Pomodoro focus timer with session tasks and synced preferences",
    no_args_is_help=True,
)

console = get_console()

app.add_typer(timer.app, name="timer", help="Pomodoro timer for focus sessions")
app.add_typer(settings.app, name="settings", help="Preferences and session history")
app.add_typer(auth.app, name="auth", help="Sign in to sync settings")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]Pomodoro CLI[/bold] version [cyan]{__version__}[/cyan]")
    console.print(f"API endpoint: {get_config_service().get_api_endpoint()}")


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
