"""Structured logging for airmerge.

Usage:
    from airmerge.logging import get_logger, configure_logging

    logger = get_logger(__name__)
    configure_logging(level="DEBUG")
    logger.debug("Reading special comments", extra={"line": 14})
"""

from airmerge.logging.config import (
    LogLevel,
    configure_logging,
    get_logger,
    set_log_level,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "set_log_level",
    "LogLevel",
]
