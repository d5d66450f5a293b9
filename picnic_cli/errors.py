"""CLI error types and the uniform command error handler."""

from __future__ import annotations

import functools
import logging

import typer
from rich.console import Console

from .picnic.client import PicnicAPIError

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 2


class CliError(Exception):
    """Raised for user-facing failures; carries the process exit code."""

    def __init__(self, message: str, exit_code: int = EXIT_FAILURE):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


class ConfigError(CliError):
    """Raised when the stored configuration cannot be read or updated."""


def _error_console(ctx: typer.Context | None) -> Console:
    state = getattr(ctx, "obj", None)
    if state is not None and hasattr(state, "err_console"):
        return state.err_console
    return Console(stderr=True)


def handle_errors(func):
    """Wrap a command so failures become a red message and an exit code.

    The wrapped command must take the typer context as its first argument.
    """

    @functools.wraps(func)
    def wrapper(ctx: typer.Context, *args, **kwargs):
        try:
            return func(ctx, *args, **kwargs)
        except (typer.Exit, typer.Abort):
            raise
        except CliError as e:
            _error_console(ctx).print(f"Error: {e.message}", style="red", markup=False, highlight=False)
            raise typer.Exit(code=e.exit_code) from e
        except PicnicAPIError as e:
            message = f"API Error [{e.code}]: {e}" if e.code else f"Error: {e}"
            _error_console(ctx).print(message, style="red", markup=False, highlight=False)
            raise typer.Exit(code=EXIT_FAILURE) from e
        except Exception as e:
            logger.debug("Command %s failed", func.__name__, exc_info=True)
            _error_console(ctx).print(f"Error: {e}", style="red", markup=False, highlight=False)
            raise typer.Exit(code=EXIT_FAILURE) from e

    return wrapper
