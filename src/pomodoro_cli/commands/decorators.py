"""Decorators for command functions."""

import asyncio
import functools
import time
import traceback
from collections.abc import Callable

import typer

from pomodoro_cli.services.config_service import get_config_service
from pomodoro_cli.utils.logger import get_logger
from pomodoro_cli.utils.ui.formatters import format_error

# Conventional exit status for SIGINT
INTERRUPTED_EXIT_CODE = 130


def _require_auth() -> None:
    """Require a stored session cookie."""
    if get_config_service().load_credentials() is None:
        format_error("Not signed in. Use 'pomodoro auth login' to sign in.")
        raise typer.Exit(1)


class AppError(Exception):
    """Error shown to the user, with the exit code the command ends with."""

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


def _call(func: Callable, args, kwargs):
    """Run *func*, driving coroutine functions to completion."""
    if asyncio.iscoroutinefunction(func):
        return asyncio.run(func(*args, **kwargs))
    return func(*args, **kwargs)


def command_wrapper(_func: Callable | None = None, *, auth_required: bool = False):
    """Wrap a command: optional sign-in check, async support, logging, errors.

    ``AppError`` is shown as a formatted error and becomes its exit code.
    Anything else unexpected is logged with its traceback and exits 1.
    """

    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger("commands")
            cmd = func.__name__
            start = time.monotonic()

            def elapsed() -> float:
                return time.monotonic() - start

            logger.info("command started: %s", cmd)
            try:
                if auth_required:
                    _require_auth()
                result = _call(func, args, kwargs)
            except typer.Exit:
                raise
            except AppError as e:
                logger.error("command failed: %s (%.3fs) - %s", cmd, elapsed(), e)
                format_error(str(e))
                raise typer.Exit(code=e.exit_code) from e
            except KeyboardInterrupt as e:
                logger.info("command interrupted: %s (%.3fs)", cmd, elapsed())
                raise typer.Exit(code=INTERRUPTED_EXIT_CODE) from e
            except Exception as e:
                logger.error(
                    "command failed: %s (%.3fs) - %s\n%s",
                    cmd,
                    elapsed(),
                    e,
                    traceback.format_exc(),
                )
                format_error(f"An unexpected error occurred: {e}")
                raise typer.Exit(code=1) from e

            logger.info("command completed: %s (%.3fs)", cmd, elapsed())
            return result

        return wrapper

    if _func is None:
        return decorator
    return decorator(_func)
