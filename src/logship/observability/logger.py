"""Structured logging configuration using structlog.

Covers logship's own diagnostics and the structlog transport. The current
unit-of-work token is bound through structlog contextvars as ``process_id``.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.typing import EventDict, Processor

from logship.observability.constants import SERVICE_NAME

_service_name = SERVICE_NAME

# Host levels without a stdlib counterpart
_LEVEL_ALIASES = {
    "notice": "info",
    "warn": "warning",
    "alert": "critical",
    "emergency": "critical",
}


def add_service_name(
    logger: logging.Logger,  # noqa: ARG001
    method_name: str,  # noqa: ARG001
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor to add service name to log entries.

    Args:
        logger: The logger instance (unused but required by structlog).
        method_name: The log method name (unused but required by structlog).
        event_dict: The event dictionary being processed.

    Returns:
        The event dictionary with service name added.
    """
    event_dict.setdefault("service", _service_name)
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    service_name: str = SERVICE_NAME,
) -> None:
    """Configure structlog for the integration.

    Args:
        log_level: The log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Output format - "json" for production, "console" for development.
        service_name: Value of the ``service`` key on every entry.
    """
    global _service_name
    _service_name = service_name

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "console":
        processors: list[Processor] = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(default=str),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
        force=True,
    )

    # Shipping transport logs must not loop back through the bridge handler
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: The logger name (typically __name__).

    Returns:
        A bound structlog logger.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("field.resolve.failed", field="getUserId")
    """
    return structlog.get_logger(name)


def log_with_context(
    logger: Any,
    level: str,
    event: str,
    **context: Any,
) -> None:
    """Log at a level given by name.

    Args:
        logger: The logger instance.
        level: Log level (debug, info, warning, error, critical). Host
            levels without a stdlib counterpart (notice, alert, emergency)
            map to the nearest one.
        event: The event name.
        **context: Additional context to include in the log.
    """
    level = _LEVEL_ALIASES.get(level.lower(), level.lower())
    log_method = getattr(logger, level, logger.info)
    log_method(event, **context)
