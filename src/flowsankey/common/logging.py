"""Structured JSON logging using structlog.

Provides consistent logging configuration for the library and the CLI.
Supports both JSON (production) and console (development) formats.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from flowsankey.common.config import LoggingSettings, get_settings


def add_service_context(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add service context to log entries."""
    settings = get_settings()
    event_dict["service"] = settings.app_name
    event_dict["version"] = settings.app_version
    event_dict["environment"] = settings.environment
    return event_dict


def setup_logging(
    settings: LoggingSettings | None = None,
    stream: Any = None,
) -> None:
    """Configure structured logging for the application.

    Args:
        settings: Logging settings. Uses global settings if not provided.
        stream: Output stream for log records. Defaults to stderr so that
            DOT and JSON written to stdout stay clean.
    """
    if settings is None:
        settings = get_settings().logging

    # Shared processors for all log entries
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.include_timestamp:
        shared_processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if settings.include_caller:
        shared_processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ))

    shared_processors.append(add_service_context)

    if settings.format == "json":
        format_processors: list[Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        format_processors = [
            structlog.dev.ConsoleRenderer(colors=False),
        ]

    structlog.configure(
        processors=shared_processors + format_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stderr,
        level=getattr(logging, settings.level),
        force=True,
    )


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance.

    Args:
        name: Logger name (usually __name__).
        **initial_context: Initial context to bind to the logger.

    Returns:
        Configured structlog logger.

    Example:
        logger = get_logger(__name__, payload="flows.json")
        logger.info("Normalized graph", nodes=12)
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger

