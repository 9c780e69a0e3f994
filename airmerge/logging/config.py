"""Logging configuration for airmerge.

The parser reports its progress through loggers under the ``airmerge``
prefix instead of a ``verbose`` flag:

- DEBUG: header phases, ignored header lines, each variable read
- INFO: files opened and records built
- WARNING: recoverable surprises (header count mismatch, duplicate columns)

Nothing is configured on import; applications call ``configure_logging``
once at startup, libraries only call ``get_logger``.
"""

from __future__ import annotations

import logging
import os
import sys
from enum import Enum
from pathlib import Path

# Package-wide logger name prefix
LOGGER_PREFIX = "airmerge"

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class LogLevel(Enum):
    """Logging levels supported by airmerge."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def from_string(cls, level: str) -> "LogLevel":
        """Convert a (case-insensitive) level name to LogLevel.

        Raises
        ------
        ValueError
            If level name is not recognized.
        """
        try:
            return cls[level.upper()]
        except KeyError:
            valid = ", ".join(m.name for m in cls)
            raise ValueError(f"Invalid log level '{level}'. Valid levels: {valid}") from None


def _level_to_int(level: str | LogLevel | int) -> int:
    if isinstance(level, str):
        return LogLevel.from_string(level).value
    if isinstance(level, LogLevel):
        return level.value
    return level


class StructuredFormatter(logging.Formatter):
    """Formatter that appends ``extra`` fields as ``key=value`` pairs.

    The parser attaches context such as ``line`` or ``path`` through the
    ``extra`` argument of logging calls; this formatter makes it visible.
    """

    # Attributes every LogRecord has; anything else came from ``extra``
    STANDARD_FIELDS = frozenset(
        logging.LogRecord("", 0, "", 0, "", None, None).__dict__
    ) | {"message", "asctime", "taskName"}

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extra_fields = {
            k: v for k, v in record.__dict__.items() if k not in self.STANDARD_FIELDS
        }
        if extra_fields:
            extras = " ".join(f"{k}={v!r}" for k, v in sorted(extra_fields.items()))
            message = f"{message} [{extras}]"
        return message


class ColorFormatter(StructuredFormatter):
    """Structured formatter that colors the whole line by level."""

    COLORS = {
        logging.DEBUG: "\033[36m",  # Cyan
        logging.INFO: "\033[32m",  # Green
        logging.WARNING: "\033[33m",  # Yellow
        logging.ERROR: "\033[31m",  # Red
        logging.CRITICAL: "\033[1;31m",  # Bold Red
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = self.COLORS.get(record.levelno, "")
        if color:
            return f"{color}{message}{self.RESET}"
        return message


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger grouped under the airmerge prefix.

    Parameters
    ----------
    name
        Module name (typically __name__). If None, returns the
        root package logger.

    Examples
    --------
    >>> logger = get_logger(__name__)
    >>> logger.debug("Reading variables", extra={"line": 13})
    """
    if name is None:
        return logging.getLogger(LOGGER_PREFIX)
    if name.startswith(LOGGER_PREFIX):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_PREFIX}.{name}")


def set_log_level(level: str | LogLevel | int) -> None:
    """Set the log level for all airmerge loggers."""
    logging.getLogger(LOGGER_PREFIX).setLevel(_level_to_int(level))


def configure_logging(
    level: str | LogLevel | int = LogLevel.INFO,
    log_file: str | Path | None = None,
    log_format: str | None = None,
    date_format: str | None = None,
    use_color: bool = True,
    propagate: bool = False,
) -> logging.Logger:
    """Configure console (and optionally file) logging for airmerge.

    Parameters
    ----------
    level
        Minimum log level to capture.
    log_file
        Optional path to a log file written in addition to the console.
    log_format
        Custom log format string.
    date_format
        Custom date format string.
    use_color
        Whether to colorize console output. Only applies to terminals.
    propagate
        Whether to propagate logs to the root logger.

    Returns
    -------
    logging.Logger
        The configured package logger.

    Examples
    --------
    >>> configure_logging(level="DEBUG", log_file="airmerge.log")
    """
    level_int = _level_to_int(level)
    log_format = log_format or DEFAULT_FORMAT
    date_format = date_format or DEFAULT_DATE_FORMAT

    root_logger = logging.getLogger(LOGGER_PREFIX)
    root_logger.setLevel(level_int)
    root_logger.propagate = propagate

    # Remove existing handlers to avoid duplicates
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level_int)
    if use_color and _supports_color():
        console_formatter: logging.Formatter = ColorFormatter(log_format, date_format)
    else:
        console_formatter = StructuredFormatter(log_format, date_format)
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level_int)
        # File output never uses colors
        file_handler.setFormatter(StructuredFormatter(log_format, date_format))
        root_logger.addHandler(file_handler)

    return root_logger


def _supports_color() -> bool:
    """Check if stderr is a terminal that accepts ANSI colors."""
    if not hasattr(sys.stderr, "isatty") or not sys.stderr.isatty():
        return False
    if os.environ.get("NO_COLOR"):
        return False
    return os.environ.get("TERM") != "dumb"
