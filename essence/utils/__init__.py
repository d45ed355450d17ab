"""Essence utilities package."""

from .error_handler import handle_exceptions
from .exit_codes import ExitCodes
from .logging import configure_file_logging, logger

__all__ = ["ExitCodes", "configure_file_logging", "handle_exceptions", "logger"]
