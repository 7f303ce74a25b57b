"""Per-day log of completed focus intervals."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from pomodoro_cli.models.settings import SessionEntry


class SessionLog:
    """Keeps one entry per calendar day, counting completed focus intervals.

    Entries are stored inside the user's settings; this class only enforces
    the one-entry-per-day rule and the display order.
    """

    def __init__(self, entries: Iterable[SessionEntry] = ()):
        self._entries: list[SessionEntry] = []
        for entry in entries:
            existing = self._find(entry.date)
            if existing is None:
                self._entries.append(entry.model_copy())
            else:
                # Collapse duplicate days from older payloads
                existing.count += entry.count

    def _find(self, day: date) -> SessionEntry | None:
        for entry in self._entries:
            if entry.date == day:
                return entry
        return None

    @property
    def entries(self) -> list[SessionEntry]:
        """Copies of the entries in storage order."""
        return [entry.model_copy() for entry in self._entries]

    def record_completion(self, day: date) -> SessionEntry:
        """Count one completed focus interval on *day*."""
        entry = self._find(day)
        if entry is None:
            entry = SessionEntry(date=day, count=1)
            self._entries.append(entry)
        else:
            entry.count += 1
        return entry.model_copy()

    def count_for(self, day: date) -> int:
        entry = self._find(day)
        return entry.count if entry else 0

    def chronological(self) -> list[SessionEntry]:
        """Entries sorted by date, oldest first."""
        return sorted(self.entries, key=lambda e: e.date)

    def total(self) -> int:
        return sum(entry.count for entry in self._entries)

    def __len__(self) -> int:
        return len(self._entries)
