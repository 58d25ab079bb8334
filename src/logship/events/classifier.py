"""Routing of log events to the structured-event or error sink."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from logship.events.messages import EXCEPTION_KEY, ErrorRef, LogEvent, log_event, unwrap
from logship.events.versions import ERROR_CONTEXT_LEGACY, HostVersion
from logship.observability.constants import LogEvents
from logship.observability.logger import get_logger

logger = get_logger(__name__)

STRUCTURED_LEVELS = frozenset({"info", "debug"})

IgnorePredicate = Callable[[str, Any, Mapping[str, Any]], bool]


class Sink(Protocol):
    """Downstream consumer of classified events."""

    def accept(self, level: str, payload: Any, context: dict[str, Any]) -> None:
        """Take one classified event. Must not block the caller."""


class Outcome(str, Enum):
    """Terminal state of one classified event."""

    IGNORED = "ignored"
    STRUCTURED_EVENT = "structured_event"
    ERROR_EVENT = "error_event"


@dataclass(frozen=True)
class Classification:
    """Result of classifying one event, before it is forwarded."""

    outcome: Outcome
    level: str
    payload: Any = None
    context: dict[str, Any] = field(default_factory=dict)


def ignore_levels(levels: list[str] | frozenset[str]) -> IgnorePredicate:
    """Build an ignore predicate dropping every event at one of ``levels``."""
    ignored = frozenset(level.lower() for level in levels)

    def predicate(level: str, message: Any, context: Mapping[str, Any]) -> bool:  # noqa: ARG001
        return level.lower() in ignored

    return predicate


class EventClassifier:
    """Decides whether a log event is a structured event or an error.

    Newer host versions attach the raised error under ``context["exception"]``
    rather than passing it as the message. Both shapes end up in the same
    error sink contract: ``(level, error, context)``.
    """

    def __init__(
        self,
        host_version: HostVersion,
        event_sink: Sink,
        error_sink: Sink,
        should_ignore: IgnorePredicate | None = None,
    ):
        """Initialize the classifier.

        Args:
            host_version: Host framework version, detected at bootstrap.
            event_sink: Receives info/debug events with plain messages.
            error_sink: Receives everything else.
            should_ignore: Optional predicate; matching events are dropped.
        """
        self.host_version = host_version
        self.event_sink = event_sink
        self.error_sink = error_sink
        self.should_ignore = should_ignore
        self._reads_error_context = not host_version.in_range(ERROR_CONTEXT_LEGACY)

    def classify(self, event: LogEvent) -> Classification:
        """Classify ``event`` without forwarding it."""
        message = unwrap(event.message)
        context = dict(event.context)

        if self.should_ignore is not None and self.should_ignore(event.level, message, context):
            return Classification(Outcome.IGNORED, event.level)

        is_error_message = isinstance(event.message, ErrorRef)

        if event.level in STRUCTURED_LEVELS and not is_error_message:
            return Classification(Outcome.STRUCTURED_EVENT, event.level, message, context)

        if self._reads_error_context:
            side_channel = event.side_channel_error
            if side_channel is not None:
                context.pop(EXCEPTION_KEY)
                return Classification(Outcome.ERROR_EVENT, event.level, side_channel.error, context)

        return Classification(Outcome.ERROR_EVENT, event.level, message, context)

    def dispatch(self, event: LogEvent) -> Classification:
        """Classify ``event`` and forward it to the matching sink."""
        result = self.classify(event)

        if result.outcome is Outcome.IGNORED:
            logger.debug(LogEvents.EVENT_IGNORED, level=result.level)
        elif result.outcome is Outcome.STRUCTURED_EVENT:
            logger.debug(LogEvents.EVENT_STRUCTURED, level=result.level)
            self.event_sink.accept(result.level, result.payload, result.context)
        else:
            logger.debug(LogEvents.EVENT_ERROR, level=result.level)
            self.error_sink.accept(result.level, result.payload, result.context)

        return result

    def handle(self, level: Any, message: Any, context: Mapping[str, Any] | None = None) -> Classification:
        """Classify and forward a raw ``(level, message, context)`` triple."""
        return self.dispatch(log_event(level, message, context))
