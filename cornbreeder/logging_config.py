"""Logging setup for cornbreeder.

The engine modules only ever call ``logging.getLogger(__name__)``; this
module attaches a handler to the ``cornbreeder`` logger namespace when an
application (the CLI, a notebook, a UI) wants to see the output.

Environment variables:

- ``LOG_LEVEL``: DEBUG, INFO, WARNING, ERROR or CRITICAL. Default: INFO
- ``LOG_FORMAT``: ``text`` or ``json``. Default: text
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from typing import Any, ClassVar

_NAMESPACE = "cornbreeder"

# Attributes every LogRecord carries; anything else came in via ``extra=``.
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime"}

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for piping runs into analysis tools."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a record as a JSON line.

        Args:
            record: Log record to format.

        Returns:
            JSON string with timestamp, level, logger, message and any
            ``extra`` fields.
        """
        payload: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS
        }
        if extra:
            payload["extra"] = extra

        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable ``TIMESTAMP LEVEL [logger] message`` lines."""

    LEVEL_COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;31m",
    }
    RESET: ClassVar[str] = "\033[0m"

    def __init__(self, use_colors: bool = True) -> None:
        """Initialise the formatter.

        Args:
            use_colors: Colour the level name (only when stderr is a TTY).
        """
        super().__init__()
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format a record as a single text line.

        Args:
            record: Log record to format.

        Returns:
            The formatted line, with a traceback appended if present.
        """
        timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        level = f"{record.levelname:8s}"
        if self.use_colors:
            color = self.LEVEL_COLORS.get(record.levelname, "")
            level = f"{color}{level}{self.RESET}"

        name = record.name.removeprefix(f"{_NAMESPACE}.")
        line = f"{timestamp} {level} [{name}] {record.getMessage()}"
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


def get_log_level() -> int:
    """Read the log level from ``LOG_LEVEL`` (unknown values mean INFO)."""
    return _LEVELS.get(os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)


def get_log_format() -> str:
    """Read the output format from ``LOG_FORMAT`` (``text`` or ``json``)."""
    name = os.environ.get("LOG_FORMAT", "text").lower()
    return name if name in ("text", "json") else "text"


def configure_logging(
    level: int | None = None,
    format_type: str | None = None,
    use_colors: bool = True,
) -> None:
    """Attach a stderr handler to the ``cornbreeder`` logger.

    Safe to call more than once; earlier handlers are replaced.

    Args:
        level: Log level. If None, read from ``LOG_LEVEL``.
        format_type: ``text`` or ``json``. If None, read from ``LOG_FORMAT``.
        use_colors: Colour level names in text output.
    """
    if level is None:
        level = get_log_level()
    if format_type is None:
        format_type = get_log_format()

    handler = logging.StreamHandler(sys.stderr)
    if format_type == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter(use_colors=use_colors))

    root = logging.getLogger(_NAMESPACE)
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)
    root.propagate = False

    root.debug(
        "Logging configured: level=%s, format=%s",
        logging.getLevelName(level),
        format_type,
    )


def get_logger(name: str) -> logging.Logger:
    """Return a logger inside the ``cornbreeder`` namespace.

    Args:
        name: Module name (typically ``__name__``).

    Returns:
        Logger instance.
    """
    if not name.startswith(_NAMESPACE):
        name = f"{_NAMESPACE}.{name}"
    return logging.getLogger(name)
