"""Non-blocking keyboard input for the fullscreen timer."""

import select
import sys
import termios
import tty
from enum import Enum
from typing import Optional


class KeyAction(str, Enum):
    TOGGLE = "toggle"
    FOCUS = "focus"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"
    COMPLETE_TASK = "complete_task"
    DELETE_TASK = "delete_task"
    DISMISS = "dismiss"
    QUIT = "quit"


KEY_BINDINGS: dict[str, KeyAction] = {
    " ": KeyAction.TOGGLE,
    "s": KeyAction.TOGGLE,
    "1": KeyAction.FOCUS,
    "2": KeyAction.SHORT_BREAK,
    "3": KeyAction.LONG_BREAK,
    "c": KeyAction.COMPLETE_TASK,
    "x": KeyAction.DELETE_TASK,
    "d": KeyAction.DISMISS,
    "q": KeyAction.QUIT,
}


class KeyboardHandler:
    """Reads single keypresses from a cbreak-mode terminal."""

    def __init__(self):
        self.fd = sys.stdin.fileno()
        self.old_settings = None
        self._setup()

    def _setup(self):
        """Put the terminal in cbreak mode, remembering the old settings."""
        try:
            self.old_settings = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd)
        except termios.error:
            # Not a TTY (piped input, CI)
            self.old_settings = None

    def get_key(self) -> Optional[str]:
        """Return the pressed key lowercased, or None if nothing is waiting."""
        try:
            if select.select([sys.stdin], [], [], 0)[0]:
                return sys.stdin.read(1).lower()
        except (OSError, ValueError):
            return None
        return None

    def get_action(self) -> Optional[KeyAction]:
        """Return the action bound to the pressed key, if any."""
        key = self.get_key()
        if key is None:
            return None
        return KEY_BINDINGS.get(key)

    def stop(self):
        """Restore terminal settings."""
        if self.old_settings:
            try:
                termios.tcsetattr(self.fd, termios.TCSADRAIN, self.old_settings)
            except termios.error:
                pass
