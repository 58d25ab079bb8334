"""Shared fixtures for logship tests."""

from __future__ import annotations

from typing import Any

import pytest
import structlog

from logship.core.config import Settings
from logship.fields.registry import FieldRegistry, LogOccurrence
from logship.runtime.request import (
    DictSession,
    NamedRoute,
    RequestContext,
    StaticRequest,
    StaticRouter,
)
from logship.runtime.unit_of_work import UnitOfWork, set_unit_of_work


class RecordingSink:
    """Sink collecting every accepted event."""

    def __init__(self) -> None:
        self.accepted: list[tuple[str, Any, dict[str, Any]]] = []

    def accept(self, level: str, payload: Any, context: dict[str, Any]) -> None:
        self.accepted.append((level, payload, context))


class RecordingTransport:
    """Transport collecting every shipped record."""

    def __init__(self) -> None:
        self.records: list[dict[str, Any]] = []

    def send(self, record: dict[str, Any]) -> None:
        self.records.append(record)


class StaticProbe:
    """Auth probe returning a fixed user id."""

    def __init__(self, user_id: Any) -> None:
        self.user_id = user_id
        self.calls = 0

    def current_user_id(self) -> Any:
        self.calls += 1
        return self.user_id


class FailingProbe:
    """Auth probe whose provider is not installed."""

    def current_user_id(self) -> Any:
        raise RuntimeError("auth provider not installed")


@pytest.fixture(autouse=True)
def isolated_unit_of_work():
    """Start and end every test without a bound unit of work."""
    set_unit_of_work(None)
    structlog.contextvars.clear_contextvars()
    yield
    set_unit_of_work(None)
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def registry() -> FieldRegistry:
    """Registry for a 5.8 host serving HTTP requests."""
    return FieldRegistry(environment="testing", host_version="5.8", argv=["artisan", "queue:work"])


@pytest.fixture
def request_context() -> RequestContext:
    """Request context with every facade present."""
    return RequestContext(
        session=DictSession("raw-session-id", {"user_id": 7, "locale": "en"}),
        router=StaticRouter(NamedRoute("users.index")),
        request=StaticRequest(
            request_path="users",
            request_method="POST",
            query="page=2",
            remote_addr="203.0.113.9",
            server={"SERVER_ADDR": "10.0.0.1", "HTTP_USER_AGENT": "pytest-agent"},
        ),
    )


@pytest.fixture
def unit(request_context: RequestContext) -> UnitOfWork:
    """Unit of work carrying the full request context."""
    return UnitOfWork(request=request_context)


@pytest.fixture
def occurrence(unit: UnitOfWork) -> LogOccurrence:
    """Error occurrence inside the full request context."""
    return LogOccurrence(
        level="error",
        message="boom",
        context={"class": "ValueError", "file": "app.py", "line": 10},
        unit=unit,
    )


@pytest.fixture
def bare_occurrence() -> LogOccurrence:
    """Occurrence with every ambient facade absent (console, no unit)."""
    return LogOccurrence(level="info", message="hello")


@pytest.fixture
def event_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def error_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def settings() -> Settings:
    """Settings independent of the process environment and .env files."""
    return Settings(_env_file=None)


@pytest.fixture
def make_probe():
    """Factory for auth probes returning a fixed user id."""
    return StaticProbe


@pytest.fixture
def failing_probe() -> FailingProbe:
    return FailingProbe()
