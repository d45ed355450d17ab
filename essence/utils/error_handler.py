"""Centralized error handler for Essence commands."""

from collections.abc import Callable
from functools import wraps
from typing import Any

import click

from essence.exceptions import SchemaError
from essence.utils.exit_codes import ExitCodes
from essence.utils.logging import logger


def handle_exceptions(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator that turns compilation failures into click errors.

    Known ``SchemaError`` failures are reported with their message and a
    dedicated exit code. Anything else is logged with its traceback.
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        """Inner wrapper that implements the try-except logic."""
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except SchemaError as e:
            logger.debug("Command '{cmd}' aborted: {details}", cmd=func.__name__, details=e.details)
            error = click.ClickException(f"{type(e).__name__}: {e.message}")
            error.exit_code = ExitCodes.for_exception(e)
            raise error from e
        except Exception as e:
            logger.opt(exception=True).error(
                "Command '{cmd}' failed: {err}",
                cmd=func.__name__,
                err=str(e),
            )
            raise click.ClickException(f"{type(e).__name__}: {e}") from e

    return wrapper
