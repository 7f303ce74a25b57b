"""Timer modes."""

from enum import Enum


class Mode(str, Enum):
    """Timer mode. Values double as the keys of the ``times`` mapping."""

    FOCUS = "pomodoro"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"

    @property
    def label(self) -> str:
        """Human readable mode name."""
        return _LABELS[self]

    @classmethod
    def parse(cls, value: str) -> "Mode":
        """Resolve a mode from its value or a CLI shorthand (focus, short, long)."""
        key = value.strip().lower().replace("-", "_")
        for mode in cls:
            if key in (mode.value.lower(), mode.name.lower()):
                return mode
        if key in _SHORTHANDS:
            return _SHORTHANDS[key]
        raise ValueError(f"Unknown mode '{value}'. Use focus, short or long.")


_LABELS = {
    Mode.FOCUS: "Pomodoro",
    Mode.SHORT_BREAK: "Short Break",
    Mode.LONG_BREAK: "Long Break",
}

_SHORTHANDS = {
    "focus": Mode.FOCUS,
    "work": Mode.FOCUS,
    "short": Mode.SHORT_BREAK,
    "long": Mode.LONG_BREAK,
}
