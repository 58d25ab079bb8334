"""Observability layer for logship.

This module provides logship's own structured logging and the sanitizer
applied to shipped records.

Usage:
    from logship.observability import get_logger

    logger = get_logger(__name__)
    logger.info("record.shipped", level="error")

Note:
    Some items are not exported here to avoid circular imports:
    - UnitOfWorkMiddleware: import from logship.observability.middleware
    - LogshipHandler: import from logship.observability.handler
"""

from logship.observability.constants import PROCESS_ID_HEADER, LogEvents
from logship.observability.logger import configure_logging, get_logger, log_with_context
from logship.observability.sanitizer import sanitize

__all__ = [
    "PROCESS_ID_HEADER",
    "LogEvents",
    "configure_logging",
    "get_logger",
    "log_with_context",
    "sanitize",
]
