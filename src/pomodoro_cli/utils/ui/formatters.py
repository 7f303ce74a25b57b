"""Output formatters for Pomodoro CLI messages and settings views."""

from rich.color import Color, ColorParseError
from rich.markup import escape
from rich.table import Table

from pomodoro_cli.models.settings import Settings

from .console import get_console

console = get_console()


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[bold blue]Info:[/bold blue] {message}")


def safe_color(color: str, fallback: str = "white") -> str:
    """Return *color* if rich can render it, otherwise *fallback*."""
    try:
        Color.parse(color)
    except ColorParseError:
        return fallback
    return color


def _swatch(color: str) -> str:
    return f"[{safe_color(color)}]■[/] {escape(color)}"


def settings_table(settings: Settings) -> Table:
    """Build a two-column table describing a Settings aggregate."""
    table = Table(title="Settings", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Focus", f"{settings.times.pomodoro} min")
    table.add_row("Short break", f"{settings.times.short_break} min")
    table.add_row("Long break", f"{settings.times.long_break} min")
    table.add_row("Focus color", _swatch(settings.pomodoro_color))
    table.add_row("Short break color", _swatch(settings.short_break_color))
    table.add_row("Long break color", _swatch(settings.long_break_color))
    table.add_row("Theme", settings.global_theme)
    table.add_row("Auto-start breaks", "yes" if settings.auto_start_breaks else "no")
    table.add_row(
        "Auto-delete completed tasks",
        "yes" if settings.auto_delete_completed_tasks else "no",
    )
    table.add_row("Logged days", str(len(settings.sessions)))
    return table
