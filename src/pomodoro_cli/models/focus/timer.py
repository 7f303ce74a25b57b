"""Countdown state machine behind the focus timer.

States:

* ``IDLE``: not running, ``remaining`` somewhere in ``(0, total]``.
* ``RUNNING``: a tick is scheduled every ``tick_ms``.
* ``EXPIRED``: not running and ``remaining == 0``.

Expiry fires once per countdown, from inside the tick that reached zero.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from enum import Enum

from pomodoro_cli.models.mode import Mode
from pomodoro_cli.models.settings import Times
from pomodoro_cli.utils.logger import get_logger

from .history import SessionLog
from .scheduler import Handle, Scheduler
from .tasks import TaskList

ExpireListener = Callable[[Mode], None]


class TimerStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    EXPIRED = "expired"


@dataclass
class TimerState:
    """Snapshot of the timer."""

    mode: Mode
    remaining_seconds: int
    running: bool = False

    @property
    def status(self) -> TimerStatus:
        if self.running:
            return TimerStatus.RUNNING
        if self.remaining_seconds == 0:
            return TimerStatus.EXPIRED
        return TimerStatus.IDLE


def format_time(seconds: int) -> str:
    """Render seconds as ``MM:SS``. Minutes do not wrap at 60."""
    mins, secs = divmod(max(0, seconds), 60)
    return f"{mins:02d}:{secs:02d}"


def progress_fraction(total: int, remaining: int) -> float:
    """Elapsed share of the countdown, clamped to ``[0, 1]``."""
    if total <= 0:
        return 0.0
    return min(1.0, max(0.0, (total - remaining) / total))


class TimerEngine:
    """Focus/break countdown driven by a scheduler tick."""

    def __init__(
        self,
        times: Times,
        scheduler: Scheduler,
        *,
        tasks: TaskList | None = None,
        session_log: SessionLog | None = None,
        today: Callable[[], date] = date.today,
        tick_ms: int = 1000,
        mode: Mode = Mode.FOCUS,
    ):
        self._times = times
        self._scheduler = scheduler
        self.tasks = tasks if tasks is not None else TaskList(scheduler)
        self.session_log = session_log if session_log is not None else SessionLog()
        self._today = today
        self._tick_ms = tick_ms
        self._handle: Handle | None = None
        self._listeners: list[ExpireListener] = []
        self._state = TimerState(mode=mode, remaining_seconds=times.seconds(mode))
        self._logger = get_logger("timer")

    @property
    def state(self) -> TimerState:
        return TimerState(
            mode=self._state.mode,
            remaining_seconds=self._state.remaining_seconds,
            running=self._state.running,
        )

    @property
    def mode(self) -> Mode:
        return self._state.mode

    @property
    def remaining_seconds(self) -> int:
        return self._state.remaining_seconds

    @property
    def running(self) -> bool:
        return self._state.running

    @property
    def status(self) -> TimerStatus:
        return self._state.status

    @property
    def times(self) -> Times:
        return self._times

    @property
    def total_seconds(self) -> int:
        return self._times.seconds(self._state.mode)

    @property
    def tick_handle(self) -> Handle | None:
        """Outstanding tick handle, ``None`` unless running."""
        return self._handle

    def display_time(self) -> str:
        return format_time(self._state.remaining_seconds)

    def progress(self) -> float:
        return progress_fraction(self.total_seconds, self._state.remaining_seconds)

    def on_expire(self, listener: ExpireListener) -> None:
        """Register a callback invoked with the mode whenever a countdown expires."""
        self._listeners.append(listener)

    def select_mode(self, mode: Mode) -> None:
        """Switch mode, stop and reset to the mode's full duration."""
        self._stop_ticking()
        self._state = TimerState(mode=mode, remaining_seconds=self._times.seconds(mode))

    def start(self) -> None:
        """Start counting down. A finished countdown restarts from full."""
        if self._state.running:
            raise ValueError("Timer is already running")
        if self._state.remaining_seconds == 0:
            self._state.remaining_seconds = self.total_seconds
        # Never leave a previous trigger behind
        self._stop_ticking()
        self._state.running = True
        self._handle = self._scheduler.schedule(self.tick, self._tick_ms)

    def pause(self) -> None:
        """Stop counting down, keeping the remaining time."""
        if not self._state.running:
            raise ValueError("Can only pause a running timer")
        self._stop_ticking()

    def toggle(self) -> None:
        """Start when stopped, pause when running."""
        if self._state.running:
            self.pause()
        else:
            self.start()

    def tick(self) -> None:
        """Advance the countdown by one second."""
        if not self._state.running:
            raise ValueError("Can only tick a running timer")
        remaining = self._state.remaining_seconds - 1
        if remaining > 0:
            self._state.remaining_seconds = remaining
            return
        self._state.remaining_seconds = 0
        self._stop_ticking()
        self._expire(self._state.mode)

    def apply_durations(self, times: Times) -> None:
        """Adopt new durations.

        When the active mode's duration changed, a stopped timer is reset to
        the new duration and a running one is clamped to it.
        """
        previous = self.total_seconds
        self._times = times
        total = self.total_seconds
        if total == previous:
            return
        if self._state.running:
            self._state.remaining_seconds = min(self._state.remaining_seconds, total)
        else:
            self._state.remaining_seconds = total

    def _stop_ticking(self) -> None:
        self._scheduler.cancel(self._handle)
        self._handle = None
        self._state.running = False

    def _expire(self, mode: Mode) -> None:
        self._logger.info("%s interval expired", mode.value)
        if mode is Mode.FOCUS:
            task = self.tasks.complete_first_incomplete()
            if task is not None:
                self._logger.debug("completed task %s", task.id)
            self.session_log.record_completion(self._today())
        for listener in list(self._listeners):
            listener(mode)
