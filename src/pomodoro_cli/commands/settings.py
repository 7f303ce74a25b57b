"""Settings commands: view, edit and reset preferences, and show history."""

from typing import Any, Optional

import typer
from pydantic import ValidationError
from rich.table import Table

from pomodoro_cli.models.focus.history import SessionLog
from pomodoro_cli.services.bootstrap import bootstrap
from pomodoro_cli.services.settings_service import SettingsStore, SettingsSyncError
from pomodoro_cli.utils.ui.console import get_console
from pomodoro_cli.utils.ui.formatters import (
    format_info,
    format_success,
    safe_color,
    settings_table,
)

from .decorators import AppError, command_wrapper

console = get_console()
app = typer.Typer(help="User preferences and session history")

_BAR_WIDTH = 30


def _validation_message(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        where = ".".join(str(p) for p in item["loc"])
        parts.append(f"{where}: {item['msg']}")
    return "Invalid settings - " + "; ".join(parts)


async def _save(store: SettingsStore, partial: dict[str, Any]) -> None:
    try:
        await store.update(partial)
    except ValidationError as e:
        raise AppError(_validation_message(e)) from e
    except SettingsSyncError as e:
        raise AppError(str(e)) from e


@app.command("show")
@command_wrapper
async def show_settings():
    """Show current settings."""
    services = await bootstrap()
    console.print(settings_table(services.store.settings))
    if services.user is None:
        format_info("Not signed in - settings are stored on this machine only.")


@app.command("set")
@command_wrapper
async def set_settings(
    focus: Optional[int] = typer.Option(None, "--focus", help="Focus minutes (1-60)"),
    short_break: Optional[int] = typer.Option(
        None, "--short-break", help="Short break minutes (1-60)"
    ),
    long_break: Optional[int] = typer.Option(
        None, "--long-break", help="Long break minutes (1-60)"
    ),
    pomodoro_color: Optional[str] = typer.Option(None, "--focus-color"),
    short_break_color: Optional[str] = typer.Option(None, "--short-break-color"),
    long_break_color: Optional[str] = typer.Option(None, "--long-break-color"),
    theme: Optional[str] = typer.Option(None, "--theme", help="light, dark or system"),
    auto_start_breaks: Optional[bool] = typer.Option(
        None, "--auto-start-breaks/--no-auto-start-breaks"
    ),
    auto_delete_completed_tasks: Optional[bool] = typer.Option(
        None, "--auto-delete-completed-tasks/--no-auto-delete-completed-tasks"
    ),
):
    """Change one or more settings."""
    partial: dict[str, Any] = {}

    durations = {
        "pomodoro": focus,
        "short_break": short_break,
        "long_break": long_break,
    }
    durations = {k: v for k, v in durations.items() if v is not None}

    fields = {
        "pomodoro_color": pomodoro_color,
        "short_break_color": short_break_color,
        "long_break_color": long_break_color,
        "global_theme": theme,
        "auto_start_breaks": auto_start_breaks,
        "auto_delete_completed_tasks": auto_delete_completed_tasks,
    }
    partial.update({k: v for k, v in fields.items() if v is not None})

    if not durations and not partial:
        raise AppError("Nothing to change. See 'pomodoro settings set --help'.")

    services = await bootstrap()
    store = services.store
    if durations:
        times = store.settings.times.model_dump()
        times.update(durations)
        partial["times"] = times

    await _save(store, partial)
    format_success("Settings saved")
    console.print(settings_table(store.settings))


@app.command("reset")
@command_wrapper
async def reset_settings(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Restore default preferences. Session history is kept."""
    if not yes and not typer.confirm("Reset all preferences to defaults?"):
        raise typer.Exit(0)

    services = await bootstrap()
    try:
        await services.store.reset()
    except SettingsSyncError as e:
        raise AppError(str(e)) from e
    format_success("Settings reset to defaults")


@app.command("history")
@command_wrapper
async def show_history(
    days: int = typer.Option(
        0, "--days", "-n", min=0, help="Only the last N logged days"
    ),
):
    """Show completed focus intervals per day."""
    services = await bootstrap()
    log = SessionLog(services.store.settings.sessions)
    entries = log.chronological()
    if days:
        entries = entries[-days:]

    if not entries:
        console.print("[yellow]No focus intervals logged yet[/yellow]")
        return

    peak = max(entry.count for entry in entries) or 1
    color = safe_color(services.store.settings.pomodoro_color)

    table = Table(title="Pomodoro Sessions History", show_header=True)
    table.add_column("Date", style="cyan")
    table.add_column("Sessions", justify="right")
    table.add_column("")
    for entry in entries:
        length = round(_BAR_WIDTH * entry.count / peak)
        bar = "█" * max(1 if entry.count else 0, length)
        table.add_row(
            entry.date.isoformat(), str(entry.count), f"[{color}]{bar}[/{color}]"
        )

    console.print(table)
    console.print(
        f"Total: [bold]{log.total()}[/bold] focus intervals over {len(log)} days"
    )
