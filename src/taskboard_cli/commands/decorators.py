"""Decorators for command functions."""

import asyncio
import inspect
import functools
import time
import traceback
from collections.abc import Callable

import typer

from taskboard_cli.models.exceptions import AuthError, TaskboardError
from taskboard_cli.services.config_service import get_config_service
from taskboard_cli.utils.exit_codes import ERROR_GENERAL, exit_code_for
from taskboard_cli.utils.logger import get_logger
from taskboard_cli.utils.ui.formatters import format_error


def _require_auth() -> None:
    """Require a stored credential for the active context."""
    if get_config_service().load_token() is None:
        raise AuthError("Not logged in. Use 'taskboard login' to authenticate.")


def command_wrapper(_func: Callable | None = None, *, auth_required: bool = True):
    """Decorator to wrap command functions with common functionality.

    Runs coroutine functions on a fresh event loop, logs start and finish with
    timing, and turns Taskboard errors into an error line plus the matching
    exit code.
    """

    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger()
            cmd = func.__name__
            start = time.monotonic()
            logger.info("command started: %s", cmd)
            try:
                if auth_required:
                    _require_auth()

                if inspect.iscoroutinefunction(func):
                    result = asyncio.run(func(*args, **kwargs))
                else:
                    result = func(*args, **kwargs)

                elapsed = time.monotonic() - start
                logger.info("command completed: %s (%.3fs)", cmd, elapsed)
                return result

            except TaskboardError as e:
                elapsed = time.monotonic() - start
                code = exit_code_for(e)
                logger.error(
                    "command failed: %s (%.3fs) - %s: %s",
                    cmd,
                    elapsed,
                    type(e).__name__,
                    e,
                )
                format_error(str(e))
                raise typer.Exit(code=code) from e

            except typer.Exit:
                # Re-raise Typer's own exits (like --help or explicit Exit(0))
                raise

            except Exception as e:
                elapsed = time.monotonic() - start
                logger.error(
                    "command failed: %s (%.3fs) - %s\n%s",
                    cmd,
                    elapsed,
                    str(e),
                    traceback.format_exc(),
                )
                format_error(f"An unexpected error occurred: {str(e)}")
                raise typer.Exit(code=ERROR_GENERAL) from e

        return wrapper

    if _func is None:
        return decorator
    return decorator(_func)
