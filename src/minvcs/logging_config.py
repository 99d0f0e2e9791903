"""Structured logging configuration.

Modules obtain loggers through get_logger and emit snake_case events with
keyword fields. The CLI calls configure_logging once at startup.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from .errors import ConfigError

LOG_FORMATS = ("console", "json")


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A lazily bound structlog logger.

    If nothing has configured structlog yet, output is set to warnings
    and above on stderr, so library use stays quiet.
    """
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)


def configure_logging(level: str = "WARNING", log_format: str = "console") -> None:
    """Configure structlog output on stderr.

    Args:
        level: Minimum level name, e.g. "INFO".
        log_format: "console" for human output or "json" for one JSON
            object per line.

    Raises:
        ConfigError: If the level or format is unknown.
    """
    level_number = logging.getLevelName(level.upper())
    if not isinstance(level_number, int):
        raise ConfigError("log level", level, "unknown level name")
    if log_format not in LOG_FORMATS:
        raise ConfigError("log format", log_format, f"expected one of {', '.join(LOG_FORMATS)}")

    renderer = (
        structlog.processors.JSONRenderer(sort_keys=True)
        if log_format == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_number),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )
