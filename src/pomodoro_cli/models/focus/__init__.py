"""Focus mode - Pomodoro timer, session tasks and session log."""

from .history import SessionLog
from .keyboard import KeyAction, KeyboardHandler
from .scheduler import PollingScheduler, Scheduler
from .tasks import Task, TaskList
from .timer import (
    TimerEngine,
    TimerState,
    TimerStatus,
    format_time,
    progress_fraction,
)
from .ui import TimerDisplay, show_summary

__all__ = [
    "KeyAction",
    "KeyboardHandler",
    "PollingScheduler",
    "Scheduler",
    "SessionLog",
    "Task",
    "TaskList",
    "TimerDisplay",
    "TimerEngine",
    "TimerState",
    "TimerStatus",
    "format_time",
    "progress_fraction",
    "show_summary",
]
