"""Host-framework version adaptation.

Different host version ranges emit the same logical event under different
names and payload shapes. For each event family there are exactly two
extraction strategies, legacy and modern, chosen by whether the host version
falls in the family's legacy range. The choice is made once per process.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any

from logship.core.exceptions import UnknownEventFamilyError
from logship.events.messages import LogEvent, QueryRecord, log_event


class EventFamily(str, Enum):
    """Logical host events the integration listens to."""

    LOG_EMITTED = "log_emitted"
    QUEUE_JOB_LIFECYCLE = "queue_job_lifecycle"
    QUERY_EXECUTED = "query_executed"


@dataclass(frozen=True)
class VersionRange:
    """A set of version prefixes."""

    prefixes: frozenset[str]

    @classmethod
    def of(cls, *prefixes: str) -> VersionRange:
        return cls(frozenset(prefixes))

    def __contains__(self, version: object) -> bool:
        value = version.value if isinstance(version, HostVersion) else str(version)
        return any(value.startswith(prefix) for prefix in self.prefixes)


@dataclass(frozen=True)
class HostVersion:
    """The host framework version, detected once at bootstrap."""

    value: str

    def in_range(self, version_range: VersionRange) -> bool:
        return self in version_range

    def __str__(self) -> str:
        return self.value


# Before 5.4 logs were fired as `illuminate.log` with positional arguments
LOG_EMITTED_LEGACY = VersionRange.of("5.0", "5.1", "5.2", "5.3")
# Job event classes arrived in 5.2
QUEUE_JOB_LEGACY = VersionRange.of("5.0", "5.1")
# QueryExecuted arrived in 5.2
QUERY_EXECUTED_LEGACY = VersionRange.of("5.0", "5.1")
# From 5.5 errors travel in context["exception"] instead of the message
ERROR_CONTEXT_LEGACY = VersionRange.of("5.0", "5.1", "5.2", "5.3", "5.4")


@dataclass(frozen=True)
class ExtractionStrategy:
    """How to listen for one event family and read its payload."""

    family: EventFamily
    legacy: bool
    event_names: tuple[str, ...]
    extract: Callable[..., Any]


def _extract_positional_log(level: Any, message: Any, context: Any = None, *_: Any) -> LogEvent:
    return log_event(level, message, context)


def _extract_message_logged(event: Any) -> LogEvent:
    return log_event(event.level, event.message, getattr(event, "context", None))


def _extract_job_boundary(*_: Any, **__: Any) -> None:
    # Job events carry nothing the integration reads; only their timing matters
    return None


def _extract_positional_query(query: str, bindings: Any, time: Any, *_: Any) -> QueryRecord:
    return QueryRecord(query=query, bindings=bindings, time=time)


def _extract_query_executed(event: Any) -> QueryRecord:
    return QueryRecord(query=event.sql, bindings=event.bindings, time=event.time)


_STRATEGIES: dict[EventFamily, tuple[VersionRange, ExtractionStrategy, ExtractionStrategy]] = {
    EventFamily.LOG_EMITTED: (
        LOG_EMITTED_LEGACY,
        ExtractionStrategy(
            EventFamily.LOG_EMITTED, True, ("illuminate.log",), _extract_positional_log
        ),
        ExtractionStrategy(
            EventFamily.LOG_EMITTED,
            False,
            ("Illuminate\\Log\\Events\\MessageLogged",),
            _extract_message_logged,
        ),
    ),
    EventFamily.QUEUE_JOB_LIFECYCLE: (
        QUEUE_JOB_LEGACY,
        ExtractionStrategy(
            EventFamily.QUEUE_JOB_LIFECYCLE,
            True,
            ("illuminate.queue.after", "illuminate.queue.failed"),
            _extract_job_boundary,
        ),
        ExtractionStrategy(
            EventFamily.QUEUE_JOB_LIFECYCLE,
            False,
            ("Illuminate\\Queue\\Events\\JobProcessing",),
            _extract_job_boundary,
        ),
    ),
    EventFamily.QUERY_EXECUTED: (
        QUERY_EXECUTED_LEGACY,
        ExtractionStrategy(
            EventFamily.QUERY_EXECUTED, True, ("illuminate.query",), _extract_positional_query
        ),
        ExtractionStrategy(
            EventFamily.QUERY_EXECUTED,
            False,
            ("Illuminate\\Database\\Events\\QueryExecuted",),
            _extract_query_executed,
        ),
    ),
}


@lru_cache(maxsize=None)
def _select(family: EventFamily, version: str) -> ExtractionStrategy:
    legacy_range, legacy, modern = _STRATEGIES[family]
    return legacy if version in legacy_range else modern


def select_strategy(family: EventFamily | str, host_version: HostVersion | str) -> ExtractionStrategy:
    """Return the extraction strategy for ``family`` on ``host_version``.

    Args:
        family: The event family (enum member or its value).
        host_version: Detected host framework version.

    Returns:
        The legacy strategy if the version is in the family's legacy range,
        otherwise the modern one. Identical inputs return the identical
        strategy object.

    Raises:
        UnknownEventFamilyError: If ``family`` is not a known event family.
    """
    try:
        family = EventFamily(family)
    except ValueError:
        raise UnknownEventFamilyError(family) from None
    return _select(family, str(host_version))


def select_all(host_version: HostVersion | str) -> dict[EventFamily, ExtractionStrategy]:
    """Resolve the strategy for every family at once (done at bootstrap)."""
    return {family: select_strategy(family, host_version) for family in EventFamily}

