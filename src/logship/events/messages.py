"""Normalized event shapes produced at the ingestion boundary.

Host events arrive in several shapes depending on the framework version.
Extraction strategies turn them into the records below, wrapping log
messages in a ``Message`` variant so the classifier can branch on the tag
instead of inspecting types itself.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

EXCEPTION_KEY = "exception"


def is_error_like(value: Any) -> bool:
    """True if ``value`` represents a raised error, whatever its hierarchy."""
    return isinstance(value, BaseException)


@dataclass(frozen=True)
class PlainMessage:
    """A string or structured log message."""

    value: Any


@dataclass(frozen=True)
class ErrorRef:
    """A reference to a raised error."""

    error: BaseException


Message = Union[PlainMessage, ErrorRef]


def as_message(value: Any) -> Message:
    """Wrap a raw message in its variant; existing variants pass through."""
    if isinstance(value, (PlainMessage, ErrorRef)):
        return value
    if is_error_like(value):
        return ErrorRef(value)
    return PlainMessage(value)


def unwrap(message: Message) -> Any:
    """Return the raw value carried by a message variant."""
    if isinstance(message, ErrorRef):
        return message.error
    return message.value


@dataclass(frozen=True)
class LogEvent:
    """One emitted log entry in the internal shape."""

    level: str
    message: Message
    context: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Raw messages are wrapped so every LogEvent carries a variant
        object.__setattr__(self, "message", as_message(self.message))
        object.__setattr__(self, "context", dict(self.context or {}))

    @property
    def side_channel_error(self) -> ErrorRef | None:
        """The error attached under ``context["exception"]``, if it is one."""
        candidate = self.context.get(EXCEPTION_KEY)
        if is_error_like(candidate):
            return ErrorRef(candidate)
        return None


def log_event(level: Any, message: Any, context: Mapping[str, Any] | None = None) -> LogEvent:
    """Build a ``LogEvent`` from raw host values."""
    return LogEvent(
        level=str(level).lower(),
        message=as_message(message),
        context=dict(context or {}),
    )


@dataclass(frozen=True)
class QueryRecord:
    """One executed SQL statement."""

    query: str
    bindings: Any
    time: Any

    def to_dict(self) -> dict[str, Any]:
        return {"query": self.query, "bindings": self.bindings, "time": self.time}
