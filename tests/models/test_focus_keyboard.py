"""Unit tests for KeyboardHandler.

All terminal calls are mocked so tests run in any CI environment without
requiring a real TTY.
"""

from __future__ import annotations

import sys
import termios

import pytest

from pomodoro_cli.models.focus.keyboard import KEY_BINDINGS, KeyAction, KeyboardHandler


def _make_keyboard_handler(mocker, old_settings=None):
    """Create a KeyboardHandler with all terminal calls patched."""
    mocker.patch("sys.stdin.fileno", return_value=0)
    mocker.patch("termios.tcgetattr", return_value=old_settings or ["saved"])
    mocker.patch("tty.setcbreak")
    return KeyboardHandler()


# ---------------------------------------------------------------------------
# Setup & teardown
# ---------------------------------------------------------------------------


class TestKeyboardHandlerSetup:
    def test_init_saves_old_settings(self, mocker):
        sentinel = ["saved_settings"]
        handler = _make_keyboard_handler(mocker, old_settings=sentinel)
        assert handler.fd == 0
        assert handler.old_settings == sentinel

    def test_not_a_tty(self, mocker):
        mocker.patch("sys.stdin.fileno", return_value=0)
        mocker.patch("termios.tcgetattr", side_effect=termios.error("no tty"))
        mocker.patch("tty.setcbreak")

        handler = KeyboardHandler()
        assert handler.old_settings is None

    def test_stop_restores_settings(self, mocker):
        handler = _make_keyboard_handler(mocker)
        restore = mocker.patch("termios.tcsetattr")
        handler.stop()
        restore.assert_called_once_with(0, termios.TCSADRAIN, ["saved"])

    def test_stop_without_settings_is_noop(self, mocker):
        handler = _make_keyboard_handler(mocker)
        handler.old_settings = None
        restore = mocker.patch("termios.tcsetattr")
        handler.stop()
        restore.assert_not_called()


# ---------------------------------------------------------------------------
# Reading keys
# ---------------------------------------------------------------------------


class TestGetKey:
    def test_returns_lowercased_key(self, mocker):
        handler = _make_keyboard_handler(mocker)
        mocker.patch("select.select", return_value=([sys.stdin], [], []))
        mocker.patch.object(sys.stdin, "read", return_value="Q")
        assert handler.get_key() == "q"

    def test_returns_none_when_no_input(self, mocker):
        handler = _make_keyboard_handler(mocker)
        mocker.patch("select.select", return_value=([], [], []))
        assert handler.get_key() is None

    def test_select_error_returns_none(self, mocker):
        handler = _make_keyboard_handler(mocker)
        mocker.patch("select.select", side_effect=OSError("closed"))
        assert handler.get_key() is None


class TestGetAction:
    @pytest.mark.parametrize(
        "key, action",
        [
            (" ", KeyAction.TOGGLE),
            ("s", KeyAction.TOGGLE),
            ("1", KeyAction.FOCUS),
            ("2", KeyAction.SHORT_BREAK),
            ("3", KeyAction.LONG_BREAK),
            ("c", KeyAction.COMPLETE_TASK),
            ("x", KeyAction.DELETE_TASK),
            ("d", KeyAction.DISMISS),
            ("q", KeyAction.QUIT),
        ],
    )
    def test_bound_keys(self, mocker, key, action):
        handler = _make_keyboard_handler(mocker)
        mocker.patch.object(handler, "get_key", return_value=key)
        assert handler.get_action() is action

    def test_unbound_key(self, mocker):
        handler = _make_keyboard_handler(mocker)
        mocker.patch.object(handler, "get_key", return_value="z")
        assert handler.get_action() is None

    def test_no_key(self, mocker):
        handler = _make_keyboard_handler(mocker)
        mocker.patch.object(handler, "get_key", return_value=None)
        assert handler.get_action() is None

    def test_every_action_has_a_key(self):
        assert set(KEY_BINDINGS.values()) == set(KeyAction)
