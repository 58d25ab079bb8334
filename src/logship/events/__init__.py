"""Event ingestion, version adaptation and classification."""

from logship.events.classifier import (
    Classification,
    EventClassifier,
    Outcome,
    ignore_levels,
)
from logship.events.dispatcher import EventDispatcher
from logship.events.messages import (
    ErrorRef,
    LogEvent,
    PlainMessage,
    QueryRecord,
    as_message,
    is_error_like,
    log_event,
)
from logship.events.versions import (
    EventFamily,
    ExtractionStrategy,
    HostVersion,
    VersionRange,
    select_all,
    select_strategy,
)

__all__ = [
    # Classification
    "Classification",
    "EventClassifier",
    "Outcome",
    "ignore_levels",
    # Dispatch
    "EventDispatcher",
    # Messages
    "ErrorRef",
    "LogEvent",
    "PlainMessage",
    "QueryRecord",
    "as_message",
    "is_error_like",
    "log_event",
    # Versions
    "EventFamily",
    "ExtractionStrategy",
    "HostVersion",
    "VersionRange",
    "select_all",
    "select_strategy",
]
