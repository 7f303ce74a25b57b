"""Focus session: the timer wired to tasks, the session log and settings."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date

from pomodoro_cli.models.config_models import TimerConfig
from pomodoro_cli.models.focus.history import SessionLog
from pomodoro_cli.models.focus.scheduler import Scheduler
from pomodoro_cli.models.focus.tasks import TaskList
from pomodoro_cli.models.focus.timer import TimerEngine
from pomodoro_cli.models.mode import Mode
from pomodoro_cli.models.settings import Settings
from pomodoro_cli.services.settings_service import SettingsStore, SettingsSyncError
from pomodoro_cli.utils.logger import get_logger


class FocusSession:
    """One interactive run of the timer.

    Focus expiries complete a task and count toward today's session log
    (both handled by the engine). This class adds what sits around that:
    the completion cue, saving the session log, auto-started breaks, and
    user-facing notifications for failed saves.
    """

    def __init__(
        self,
        store: SettingsStore,
        scheduler: Scheduler,
        *,
        config: TimerConfig | None = None,
        today: Callable[[], date] = date.today,
        cue: Callable[[], None] | None = None,
    ):
        self.store = store
        self.config = config or TimerConfig()
        self._today = today
        self._cue = cue
        settings = store.settings

        self.session_log = SessionLog(settings.sessions)
        self.tasks = TaskList(
            scheduler,
            auto_delete_completed=settings.auto_delete_completed_tasks,
            grace_ms=self.config.auto_delete_grace_ms,
        )
        self.engine = TimerEngine(
            settings.times,
            scheduler,
            tasks=self.tasks,
            session_log=self.session_log,
            today=today,
            tick_ms=self.config.tick_ms,
        )
        self.engine.on_expire(self._on_expire)
        store.subscribe(self.apply_settings)

        self.notifications: list[str] = []
        self.completed_intervals = 0
        self._unsaved = False
        self._logger = get_logger("focus")

    @property
    def settings(self) -> Settings:
        return self.store.settings

    def today(self) -> date:
        return self._today()

    @property
    def needs_save(self) -> bool:
        """A focus interval completed since the session log was last saved."""
        return self._unsaved

    def next_break(self) -> Mode:
        """Break that follows the focus interval just completed."""
        count = self.session_log.count_for(self._today())
        if count and count % self.config.long_break_interval == 0:
            return Mode.LONG_BREAK
        return Mode.SHORT_BREAK

    def _on_expire(self, mode: Mode) -> None:
        if self._cue is not None:
            self._cue()
        if mode is not Mode.FOCUS:
            return

        self.completed_intervals += 1
        self._unsaved = True
        if self.settings.auto_start_breaks:
            next_mode = self.next_break()
            self._logger.info("auto-starting %s", next_mode.value)
            self.engine.select_mode(next_mode)
            self.engine.start()

    async def save_session_log(self) -> None:
        """Persist the session log through the settings store.

        Backend failures become a notification; the log is already cached
        locally by then.
        """
        if not self._unsaved:
            return
        self._unsaved = False
        try:
            await self.store.update({"sessions": self.session_log.entries})
        except SettingsSyncError as e:
            self._logger.warning("session log not synced: %s", e)
            self.notifications.append(str(e))

    def dismiss_notification(self) -> None:
        """Drop the oldest notification."""
        if self.notifications:
            self.notifications.pop(0)

    def apply_settings(self, settings: Settings) -> None:
        """Push changed durations and task policy into the running session."""
        self.engine.apply_durations(settings.times)
        self.tasks.auto_delete_completed = settings.auto_delete_completed_tasks
