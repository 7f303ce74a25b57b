"""User settings aggregate and its remote wire mapping.

In memory the aggregate uses Python field names; the local cache stores the
camelCase aliases and the settings backend speaks snake_case. The two
serialized forms are bridged by ``to_remote`` and ``from_remote``.
"""

from __future__ import annotations

import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .mode import Mode

Theme = Literal["light", "dark", "system"]

MIN_DURATION = 1
MAX_DURATION = 60

DEFAULT_POMODORO_COLOR = "#ef4444"
DEFAULT_SHORT_BREAK_COLOR = "#0B7A75"
DEFAULT_LONG_BREAK_COLOR = "#3b82f6"

# remote (snake_case) field -> cached/in-memory (camelCase) key
REMOTE_FIELD_MAP: dict[str, str] = {
    "global_theme": "globalTheme",
    "pomodoro_color": "pomodoroColor",
    "short_break_color": "shortBreakColor",
    "long_break_color": "longBreakColor",
    "times": "times",
    "sessions": "sessions",
    "auto_start_breaks": "autoStartBreaks",
    "auto_delete_completed_tasks": "autoDeleteCompletedTasks",
}
LOCAL_FIELD_MAP: dict[str, str] = {v: k for k, v in REMOTE_FIELD_MAP.items()}


class Times(BaseModel):
    """Duration configuration in minutes, one value per mode."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    pomodoro: int = Field(default=25, ge=MIN_DURATION, le=MAX_DURATION)
    short_break: int = Field(default=5, ge=MIN_DURATION, le=MAX_DURATION)
    long_break: int = Field(default=15, ge=MIN_DURATION, le=MAX_DURATION)

    def minutes(self, mode: Mode) -> int:
        """Duration in minutes for *mode*."""
        if mode is Mode.FOCUS:
            return self.pomodoro
        if mode is Mode.SHORT_BREAK:
            return self.short_break
        return self.long_break

    def seconds(self, mode: Mode) -> int:
        """Duration in seconds for *mode*."""
        return self.minutes(mode) * 60


class SessionEntry(BaseModel):
    """Completed focus intervals on one calendar day."""

    date: datetime.date
    count: int = Field(default=0, ge=0)


class Settings(BaseModel):
    """User preferences, including the session log."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = ""
    user_id: str = Field(default="", alias="user_id")
    global_theme: Theme = "dark"
    pomodoro_color: str = DEFAULT_POMODORO_COLOR
    short_break_color: str = DEFAULT_SHORT_BREAK_COLOR
    long_break_color: str = DEFAULT_LONG_BREAK_COLOR
    times: Times = Field(default_factory=Times)
    sessions: list[SessionEntry] = Field(default_factory=list)
    auto_start_breaks: bool = False
    auto_delete_completed_tasks: bool = False

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def _coerce_identifier(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v)

    def color_for(self, mode: Mode) -> str:
        """Display color for *mode*."""
        if mode is Mode.FOCUS:
            return self.pomodoro_color
        if mode is Mode.SHORT_BREAK:
            return self.short_break_color
        return self.long_break_color

    def apply(self, partial: dict[str, Any]) -> Settings:
        """Return a copy with *partial* shallow-merged in.

        Keys may be field names or their camelCase aliases. The result is
        fully validated, so an out-of-range duration raises a
        ``pydantic.ValidationError``.
        """
        data = self.model_dump()
        for key, value in partial.items():
            name = _field_name(key)
            if isinstance(value, BaseModel):
                value = value.model_dump()
            elif isinstance(value, list):
                value = [
                    item.model_dump() if isinstance(item, BaseModel) else item
                    for item in value
                ]
            data[name] = value
        return Settings.model_validate(data)

    def to_cache(self) -> str:
        """Serialize for the local cache (camelCase keys)."""
        return self.model_dump_json(by_alias=True)


def _field_name(key: str) -> str:
    if key in Settings.model_fields:
        return key
    for name, field in Settings.model_fields.items():
        if field.alias == key:
            return name
    raise ValueError(f"Unknown setting '{key}'")


def to_remote(settings: Settings) -> dict[str, Any]:
    """Convert settings to the backend's snake_case payload."""
    cached = settings.model_dump(mode="json", by_alias=True)
    return {remote: cached[local] for remote, local in REMOTE_FIELD_MAP.items()}


def from_remote(row: dict[str, Any]) -> dict[str, Any]:
    """Extract the camelCase fields present in a backend settings row.

    Fields the row does not carry (or carries as null) are left out so the
    caller can keep its own value for them.
    """
    return {
        local: row[remote]
        for remote, local in REMOTE_FIELD_MAP.items()
        if row.get(remote) is not None
    }
