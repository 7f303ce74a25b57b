"""Full-screen timer UI for focus mode."""

from __future__ import annotations

import asyncio

from rich.align import Align
from rich.console import Console, Group
from rich.layout import Layout
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from pomodoro_cli.models.mode import Mode
from pomodoro_cli.utils.ui.formatters import safe_color

from .keyboard import KeyAction, KeyboardHandler
from .timer import TimerStatus

_MODE_ACTIONS = {
    KeyAction.FOCUS: Mode.FOCUS,
    KeyAction.SHORT_BREAK: Mode.SHORT_BREAK,
    KeyAction.LONG_BREAK: Mode.LONG_BREAK,
}


class TimerDisplay:
    """Renders a FocusSession and runs its interactive loop."""

    def __init__(self, console: Console | None = None, refresh_seconds: float = 0.1):
        self.console = console or Console()
        self.refresh_seconds = refresh_seconds

    def create_layout(self, session) -> Layout:
        """Create the timer layout with all components."""
        engine = session.engine
        color = safe_color(session.settings.color_for(engine.mode))

        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=3),
        )

        tabs = Text(justify="center")
        for mode in Mode:
            style = f"bold reverse {color}" if mode is engine.mode else "dim"
            tabs.append(f" {mode.label} ", style=style)
            tabs.append("  ")
        layout["header"].update(Align.center(tabs, vertical="middle"))

        layout["body"].update(
            Align.center(self._create_body_content(session), vertical="middle")
        )
        layout["footer"].update(
            Align.center(self._create_footer_text(engine.status), vertical="middle")
        )
        return layout

    def _create_body_content(self, session) -> Group:
        """Create the main body: countdown, progress, tasks, notifications."""
        engine = session.engine
        color = safe_color(session.settings.color_for(engine.mode))
        components = []

        timer_text = Text(engine.display_time(), style=f"bold {color}", justify="center")
        components.append(timer_text)

        if engine.status is TimerStatus.EXPIRED:
            components.append(Text("Time's up!", style="bold green", justify="center"))
        elif not engine.running:
            components.append(Text("PAUSED", style="yellow", justify="center"))
        components.append(Text(""))

        progress_pct = int(engine.progress() * 100)
        bar_width = 40
        filled = int(bar_width * progress_pct / 100)
        progress_text = Text(justify="center")
        progress_text.append("▓" * filled + "░" * (bar_width - filled), style=color)
        progress_text.append(f"  {progress_pct}%", style="dim")
        components.append(progress_text)
        components.append(Text(""))

        components.append(self._create_task_panel(session))

        today = session.session_log.count_for(session.today())
        components.append(
            Text(f"Focus intervals today: {today}", style="dim", justify="center")
        )

        for message in session.notifications:
            components.append(
                Text(f"⚠ {message}  (d to dismiss)", style="red", justify="center")
            )

        return Group(*components)

    def _create_task_panel(self, session) -> Panel:
        tasks = session.tasks.tasks
        if not tasks:
            body = Text("Time to focus!", style="dim", justify="center")
        else:
            body = Text()
            for i, task in enumerate(tasks):
                if i:
                    body.append("\n")
                if task.completed:
                    body.append(f"✓ {task.text}", style="strike dim")
                else:
                    body.append(f"○ {task.text}")
        return Panel(body, title="Tasks", border_style="dim", width=50)

    def _create_footer_text(self, status: TimerStatus) -> Text:
        """Create footer with keyboard hints."""
        if status is TimerStatus.RUNNING:
            toggle = "space pause"
        elif status is TimerStatus.EXPIRED:
            toggle = "space restart"
        else:
            toggle = "space start"
        hints = f"{toggle}  •  1/2/3 mode  •  c complete task  •  x delete done  •  q quit"
        return Text(hints, style="dim", justify="center")

    def handle_action(self, session, action: KeyAction) -> bool:
        """Apply a key action. Returns False when the loop should stop."""
        if action is KeyAction.QUIT:
            return False
        if action is KeyAction.TOGGLE:
            session.engine.toggle()
        elif action in _MODE_ACTIONS:
            session.engine.select_mode(_MODE_ACTIONS[action])
        elif action is KeyAction.COMPLETE_TASK:
            task = session.tasks.first_incomplete()
            if task is not None:
                session.tasks.toggle(task.id)
        elif action is KeyAction.DELETE_TASK:
            task = session.tasks.first_completed()
            if task is not None:
                session.tasks.delete(task.id)
        elif action is KeyAction.DISMISS:
            session.dismiss_notification()
        return True

    async def run_timer(
        self, session, scheduler, keyboard: KeyboardHandler | None = None
    ) -> int:
        """Run the fullscreen timer until the user quits.

        Returns the number of focus intervals completed during the run.
        """
        keyboard = keyboard or KeyboardHandler()
        saves: set[asyncio.Task] = set()

        try:
            with Live(
                self.create_layout(session),
                console=self.console,
                refresh_per_second=4,
                screen=True,
            ) as live:
                while True:
                    action = keyboard.get_action()
                    if action is not None and not self.handle_action(session, action):
                        break

                    scheduler.run_pending()

                    if session.needs_save:
                        save = asyncio.create_task(session.save_session_log())
                        saves.add(save)
                        save.add_done_callback(saves.discard)

                    live.update(self.create_layout(session))
                    await asyncio.sleep(self.refresh_seconds)
        except asyncio.CancelledError:
            # Ctrl-C under asyncio.run cancels the main task; end the run normally.
            current = asyncio.current_task()
            if current is not None:
                current.uncancel()
        except KeyboardInterrupt:
            pass
        finally:
            keyboard.stop()
            if session.engine.running:
                session.engine.pause()
            if saves:
                await asyncio.gather(*saves)
            await session.save_session_log()

        return session.completed_intervals


def show_summary(session, console: Console | None = None) -> None:
    """Show what the run accomplished after the fullscreen timer closes."""
    console = console or Console()

    done = [task.text for task in session.tasks if task.completed]
    open_tasks = [task.text for task in session.tasks if not task.completed]
    today = session.session_log.count_for(session.today())

    lines = [
        "[bold green]🍅 Focus run finished[/bold green]",
        "",
        f"Focus intervals completed: {session.completed_intervals}",
        f"Total today: {today}",
    ]
    if done:
        lines.append(f"Completed tasks: {escape(', '.join(done))}")
    if open_tasks:
        lines.append(f"Open tasks: {escape(', '.join(open_tasks))}")
    for message in session.notifications:
        lines.append(f"[red]{escape(message)}[/red]")

    console.print(Panel("\n".join(lines), border_style="green", padding=(1, 2)))
