"""Data models for Pomodoro CLI."""

from .mode import Mode
from .settings import SessionEntry, Settings, Times
from .user import User

__all__ = ["Mode", "SessionEntry", "Settings", "Times", "User"]
