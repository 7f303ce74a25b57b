"""Pomodoro CLI - focus timer, session tasks and synced preferences."""

__version__ = "0.3.0"
