"""Pomodoro timer commands."""

import time

import typer
from rich.progress import Progress, SpinnerColumn, TextColumn

from pomodoro_cli.models.focus.scheduler import PollingScheduler
from pomodoro_cli.models.focus.timer import format_time
from pomodoro_cli.models.focus.ui import TimerDisplay, show_summary
from pomodoro_cli.models.mode import Mode
from pomodoro_cli.services.bootstrap import bootstrap
from pomodoro_cli.services.focus_service import FocusSession
from pomodoro_cli.utils.ui.console import get_console

from .decorators import AppError, command_wrapper

console = get_console()
app = typer.Typer(help="Pomodoro timer for focus sessions")


@app.command("start")
@command_wrapper
async def start_timer(
    mode: str = typer.Option("focus", "--mode", "-m", help="focus, short or long"),
    task: list[str] = typer.Option(
        None, "--task", "-t", help="Task to work on (repeatable, in order)"
    ),
    autostart: bool = typer.Option(
        False, "--now", help="Start counting down immediately"
    ),
):
    """Run the fullscreen Pomodoro timer."""
    try:
        selected = Mode.parse(mode)
    except ValueError as e:
        raise AppError(str(e)) from e

    console.print("[dim]Loading settings...[/dim]")
    services = await bootstrap()
    config = services.config_service.config.timer
    scheduler = PollingScheduler()

    session = FocusSession(
        services.store,
        scheduler,
        config=config,
        cue=console.bell if config.sound else None,
    )
    for text in task or []:
        session.tasks.add(text)

    if selected is not Mode.FOCUS:
        session.engine.select_mode(selected)
    if autostart:
        session.engine.start()

    await TimerDisplay(console).run_timer(session, scheduler)
    show_summary(session, console)


@app.command("quick")
@command_wrapper
def quick_timer(
    minutes: int = typer.Argument(25, min=1, help="Timer duration in minutes"),
):
    """Quick countdown timer (no settings, tasks or history)."""
    console.print(f"\n[bold]⏱️  {minutes}-minute timer started[/bold]\n")

    total_seconds = minutes * 60
    start_time = time.monotonic()

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Focus time...", total=total_seconds)

            while (elapsed := int(time.monotonic() - start_time)) < total_seconds:
                remaining = total_seconds - elapsed
                progress.update(
                    task, description=f"⏱️  {format_time(remaining)} remaining"
                )
                time.sleep(1)

        console.print("\n[bold green]🎉 Time's up![/bold green]\n")
        console.bell()

    except KeyboardInterrupt:
        console.print("\n[yellow]Timer stopped[/yellow]\n")
