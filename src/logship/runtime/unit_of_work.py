"""Unit-of-work scoping for correlation tokens and collected data.

A unit of work is one HTTP request or one queued job. It owns the only
mutable state shared between log occurrences: the correlation token and the
data collector. The current unit is held in a ContextVar so concurrent
requests, threads or tasks never observe each other's state.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field

import structlog

from logship.observability.constants import LogEvents
from logship.observability.logger import get_logger
from logship.runtime.collector import DataCollector
from logship.runtime.request import EMPTY_CONTEXT, RequestContext
from logship.runtime.tokens import CorrelationTokenProvider

logger = get_logger(__name__)


@dataclass
class UnitOfWork:
    """Per request/job state handed to field resolvers."""

    tokens: CorrelationTokenProvider = field(default_factory=CorrelationTokenProvider)
    collector: DataCollector = field(default_factory=DataCollector)
    request: RequestContext = EMPTY_CONTEXT

    @property
    def token(self) -> str:
        return self.tokens.get_token()

    def reset(self) -> None:
        """Start a new unit on the same instance (queue worker loop)."""
        self.tokens.generate()
        self.collector.reset()
        self.request = EMPTY_CONTEXT
        structlog.contextvars.bind_contextvars(process_id=self.token)
        logger.debug(LogEvents.UNIT_RESET, process_id=self.token)


_current_unit: ContextVar[UnitOfWork | None] = ContextVar("logship_unit_of_work", default=None)


def get_unit_of_work() -> UnitOfWork:
    """Return the unit bound to the current context, creating one if needed."""
    unit = _current_unit.get()
    if unit is None:
        unit = UnitOfWork()
        _current_unit.set(unit)
    return unit


def get_optional_unit_of_work() -> UnitOfWork | None:
    """Return the bound unit without creating one."""
    return _current_unit.get()


def set_unit_of_work(unit: UnitOfWork | None) -> None:
    """Bind ``unit`` to the current context."""
    _current_unit.set(unit)


@contextmanager
def unit_of_work(request: RequestContext = EMPTY_CONTEXT) -> Iterator[UnitOfWork]:
    """Run a block inside a fresh unit of work.

    The previous binding is restored on exit, so units may nest (a job
    dispatched synchronously from a request) without leaking state.
    """
    unit = UnitOfWork(request=request)
    token = _current_unit.set(unit)
    try:
        with structlog.contextvars.bound_contextvars(process_id=unit.token):
            logger.debug(LogEvents.UNIT_STARTED)
            yield unit
    finally:
        _current_unit.reset(token)
