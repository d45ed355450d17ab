"""Centralized logging configuration using Loguru.

Usage:
    from essence.utils.logging import logger
    logger.info("Message")
    logger.debug("Debug message")  # Only shows if ESSENCE_LOG_LEVEL=DEBUG

Environment Variables:
    ESSENCE_LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: INFO)
    ESSENCE_LOG_JSON: 0|1 (default: 0, human-readable)
    ESSENCE_LOG_FILE: path to log file (optional)
"""

import json
import os
import sys
from pathlib import Path

from loguru import logger

# Remove default handler
logger.remove()

# Numeric levels for NDJSON output
JSON_LEVELS = {
    "TRACE": 10,
    "DEBUG": 20,
    "INFO": 30,
    "SUCCESS": 35,
    "WARNING": 40,
    "ERROR": 50,
    "CRITICAL": 60,
}

_log_level = os.environ.get("ESSENCE_LOG_LEVEL", "INFO").upper()
_json_mode = os.environ.get("ESSENCE_LOG_JSON", "0") == "1"
_log_file = os.environ.get("ESSENCE_LOG_FILE")


def _to_json_line(record) -> str:
    """Render a loguru record as one NDJSON line."""
    entry = {
        "level": JSON_LEVELS.get(record["level"].name, 30),
        "time": int(record["time"].timestamp() * 1000),
        "msg": record["message"],
        "module": record["name"],
    }

    for key, value in record["extra"].items():
        entry[key] = value

    if record["exception"]:
        entry["err"] = {
            "type": record["exception"].type.__name__ if record["exception"].type else "Error",
            "message": str(record["exception"].value) if record["exception"].value else "",
        }

    return json.dumps(entry, default=str)


def json_sink(message):
    """Write log records to stderr as NDJSON.

    CRITICAL: Never call logger.* inside a sink - causes infinite recursion
    """
    sys.stderr.write(_to_json_line(message.record) + "\n")
    sys.stderr.flush()


# Human-readable format
_human_format = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}:{function}:{line}</cyan> - "
    "<level>{message}</level>"
)

logger.level("DEBUG", color="<blue>")
logger.level("INFO", color="<white>")
logger.level("WARNING", color="<yellow>")
logger.level("ERROR", color="<red>")
logger.level("CRITICAL", color="<red><bold>")


def _add_console_handler() -> int:
    if _json_mode:
        return logger.add(json_sink, level=_log_level, colorize=False)
    return logger.add(
        sys.stderr,
        level=_log_level,
        format=_human_format,
        colorize=None,  # Auto-detect: colors if TTY, plain if piped
    )


_console_handler_id = _add_console_handler()

if _log_file:

    def _file_json_sink(message):
        """Append NDJSON records to the configured log file."""
        with open(_log_file, "a", encoding="utf-8") as f:
            f.write(_to_json_line(message.record) + "\n")

    logger.add(_file_json_sink, level="DEBUG")


def configure_file_logging(log_dir: Path, level: str = "DEBUG") -> None:
    """Add rotating file handler for persistent logs.

    Args:
        log_dir: Directory for log files (e.g., Path("log"))
        level: Minimum log level for file output
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "essence.log"

    logger.add(
        log_file,
        rotation="10 MB",
        retention="7 days",
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
    )


def set_level(level: str) -> None:
    """Replace the console handler with one at ``level``.

    Used by the CLI ``--verbose``/``--quiet`` switches.
    """
    global _log_level, _console_handler_id

    _log_level = level.upper()
    logger.remove(_console_handler_id)
    _console_handler_id = _add_console_handler()


__all__ = ["logger", "configure_file_logging", "set_level"]
