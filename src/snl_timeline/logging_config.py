"""Structured logging configuration using structlog.

Every module logs through ``get_logger(__name__)`` with event-style
messages and key/value context, for example::

    logger.info("timeline_entry_added", namespace="jane_example_com", key="...")

The library never calls configure_logging() on import; an application
embedding the timeline store decides how log output is rendered, either
explicitly or from LoggingSettings (``SNL_TIMELINE_LOG_*``).
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, TextIO

import structlog

if TYPE_CHECKING:
    from snl_timeline.config.settings import LoggingSettings

__all__ = ["configure_logging", "get_logger"]


def configure_logging(
    verbose: bool | None = None,
    json_output: bool | None = None,
    *,
    settings: LoggingSettings | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure structured logging for the application.

    Explicit arguments win over settings; settings default to
    get_settings().logging.

    Args:
        verbose: Enable debug output, including every SNL command header.
        json_output: If True, output JSON lines. Otherwise, pretty console format.
        settings: Logging settings to fall back on.
        stream: Where log lines are written. Defaults to stdout.

    """
    if settings is None and (verbose is None or json_output is None):
        from snl_timeline.config.settings import get_settings

        settings = get_settings().logging
    if verbose is None:
        verbose = settings.verbose
    if json_output is None:
        json_output = settings.json_output

    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stdout,
        level=logging.DEBUG if verbose else logging.INFO,
        force=True,
    )

    processors: list[structlog.types.Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=stream is None))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name, typically __name__ from the calling module.

    """
    return structlog.get_logger(name)
