"""Cooperative scheduler used to drive the timer tick.

Everything runs on the caller's thread: the display loop calls
``run_pending()`` and due callbacks fire from there. Tests drive the same
scheduler with a fake clock.
"""

from __future__ import annotations

import itertools
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

Handle = int


class Scheduler(Protocol):
    """Minimal scheduling interface the timer and task list depend on."""

    def schedule(
        self, callback: Callable[[], None], interval_ms: int, *, repeat: bool = True
    ) -> Handle: ...

    def cancel(self, handle: Handle | None) -> None: ...


@dataclass
class _ScheduledCall:
    handle: Handle
    callback: Callable[[], None]
    interval: float
    due: float
    repeat: bool
    cancelled: bool = False


class PollingScheduler:
    """Scheduler whose callbacks fire when ``run_pending`` is polled."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._calls: dict[Handle, _ScheduledCall] = {}
        self._handles = itertools.count(1)

    def schedule(
        self, callback: Callable[[], None], interval_ms: int, *, repeat: bool = True
    ) -> Handle:
        """Schedule *callback* every *interval_ms* (or once if ``repeat=False``)."""
        if interval_ms < 0:
            raise ValueError("interval_ms must not be negative")
        if repeat and interval_ms == 0:
            raise ValueError("repeating calls need a positive interval")

        interval = interval_ms / 1000
        handle = next(self._handles)
        self._calls[handle] = _ScheduledCall(
            handle=handle,
            callback=callback,
            interval=interval,
            due=self._clock() + interval,
            repeat=repeat,
        )
        return handle

    def cancel(self, handle: Handle | None) -> None:
        """Cancel a scheduled call. Unknown or ``None`` handles are ignored."""
        if handle is None:
            return
        call = self._calls.pop(handle, None)
        if call is not None:
            call.cancelled = True

    def is_scheduled(self, handle: Handle | None) -> bool:
        """Whether *handle* is still outstanding."""
        return handle is not None and handle in self._calls

    @property
    def pending(self) -> int:
        """Number of outstanding calls."""
        return len(self._calls)

    def run_pending(self) -> int:
        """Fire every call that is due, catching up on missed intervals.

        Returns the number of callbacks fired.
        """
        now = self._clock()
        fired = 0
        for call in sorted(self._calls.values(), key=lambda c: c.due):
            while not call.cancelled and call.due <= now:
                if call.repeat:
                    call.due += call.interval
                else:
                    self.cancel(call.handle)
                call.callback()
                fired += 1
        return fired
