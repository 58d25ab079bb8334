"""Tests for record transports."""

from __future__ import annotations

import json
import time

import httpx
import pytest
import respx
import structlog.testing

from logship.core.exceptions import TransportError
from logship.observability.constants import REDACTED_VALUE, LogEvents
from logship.sinks.transport import HttpTransport, StructlogTransport

ENDPOINT = "https://collector.test/api/logs"


# =============================================================================
# StructlogTransport
# =============================================================================


class TestStructlogTransport:
    """Tests for StructlogTransport."""

    def test_emits_record_at_record_level(self):
        with structlog.testing.capture_logs() as logs:
            StructlogTransport().send({"level": "error", "message": "boom", "url": "/a"})

        assert logs == [
            {"event": LogEvents.RECORD_SHIPPED, "log_level": "error", "message": "boom", "url": "/a"}
        ]

    def test_host_levels_are_mapped(self):
        with structlog.testing.capture_logs() as logs:
            StructlogTransport().send({"level": "emergency", "message": "down"})

        assert logs[0]["log_level"] == "critical"

    def test_sensitive_context_is_redacted(self):
        with structlog.testing.capture_logs() as logs:
            StructlogTransport().send({"level": "info", "context": {"password": "hunter2", "user": "bob"}})

        assert logs[0]["context"] == {"password": REDACTED_VALUE, "user": "bob"}

    def test_reserved_keys_are_renamed(self):
        with structlog.testing.capture_logs() as logs:
            StructlogTransport().send({"level": "info", "event": "login", "logger": "app"})

        assert logs[0]["event"] == LogEvents.RECORD_SHIPPED
        assert logs[0]["record_event"] == "login"
        assert logs[0]["record_logger"] == "app"

    def test_record_is_not_mutated(self):
        record = {"level": "info", "message": "x"}

        with structlog.testing.capture_logs():
            StructlogTransport().send(record)

        assert record == {"level": "info", "message": "x"}


# =============================================================================
# HttpTransport
# =============================================================================


@pytest.fixture
def http_transport():
    """An HttpTransport whose worker thread is stopped after the test."""
    transports = []

    def _make(**kwargs) -> HttpTransport:
        transport = HttpTransport(ENDPOINT, **kwargs)
        transports.append(transport)
        return transport

    yield _make

    for transport in transports:
        transport.close()


class TestHttpTransport:
    """Tests for HttpTransport."""

    def test_requires_endpoint(self):
        with pytest.raises(TransportError):
            HttpTransport("")

    @respx.mock
    def test_posts_json_after_flush(self, http_transport):
        route = respx.post(ENDPOINT).mock(return_value=httpx.Response(202))
        transport = http_transport(service="billing")

        transport.send({"level": "error", "message": "boom", "context": {"api_key": "k-123"}})
        transport.flush()

        assert route.called
        request = route.calls.last.request
        assert request.headers["content-type"] == "application/json"
        assert json.loads(request.content) == {
            "service": "billing",
            "level": "error",
            "message": "boom",
            "context": {"api_key": REDACTED_VALUE},
        }

    @respx.mock
    def test_send_does_not_wait_for_collector(self, http_transport):
        def slow_collector(request):
            time.sleep(0.5)
            return httpx.Response(202)

        route = respx.post(ENDPOINT).mock(side_effect=slow_collector)
        transport = http_transport()

        started = time.monotonic()
        transport.send({"level": "error", "message": "boom"})
        elapsed = time.monotonic() - started

        assert elapsed < 0.2
        transport.flush()
        assert route.call_count == 1

    @respx.mock
    def test_records_share_one_worker(self, http_transport):
        route = respx.post(ENDPOINT).mock(return_value=httpx.Response(202))
        transport = http_transport()

        for index in range(3):
            transport.send({"level": "info", "message": f"m{index}"})
        transport.flush()

        assert [json.loads(call.request.content)["message"] for call in route.calls] == ["m0", "m1", "m2"]

    @respx.mock
    def test_close_delivers_queued_records(self):
        route = respx.post(ENDPOINT).mock(return_value=httpx.Response(202))
        transport = HttpTransport(ENDPOINT)

        transport.send({"level": "info", "message": "last"})
        transport.close()

        assert route.call_count == 1
        assert transport._worker is None

    def test_flush_and_close_without_records(self):
        transport = HttpTransport(ENDPOINT)

        transport.flush()
        transport.close()

        assert transport._worker is None

    @respx.mock
    def test_non_json_values_are_stringified(self, http_transport):
        route = respx.post(ENDPOINT).mock(return_value=httpx.Response(200))
        transport = http_transport()

        transport.send({"level": "info", "message": ValueError("x")})
        transport.flush()

        assert json.loads(route.calls.last.request.content)["message"] == "x"

    @respx.mock
    def test_connection_error_is_dropped(self, http_transport):
        route = respx.post(ENDPOINT).mock(side_effect=httpx.ConnectError("refused"))
        transport = http_transport()

        with structlog.testing.capture_logs() as logs:
            transport.send({"level": "error", "message": "boom"})
            transport.flush()

        assert logs[0]["event"] == LogEvents.TRANSPORT_SEND_FAILED
        assert logs[0]["log_level"] == "debug"

        # The worker survives the failure
        route.mock(return_value=httpx.Response(202))
        transport.send({"level": "error", "message": "again"})
        transport.flush()
        assert route.call_count == 2

    @respx.mock
    def test_unexpected_status_is_logged(self, http_transport):
        respx.post(ENDPOINT).mock(return_value=httpx.Response(503))
        transport = http_transport()

        with structlog.testing.capture_logs() as logs:
            transport.send({"level": "error", "message": "boom"})
            transport.flush()

        assert logs[0]["event"] == LogEvents.TRANSPORT_UNEXPECTED_STATUS
        assert logs[0]["status_code"] == 503

    @pytest.mark.asyncio
    @respx.mock
    async def test_inside_event_loop_sends_in_background(self):
        route = respx.post(ENDPOINT).mock(return_value=httpx.Response(202))
        transport = HttpTransport(ENDPOINT)

        transport.send({"level": "error", "message": "boom"})
        await transport.aflush()

        assert route.call_count == 1
        assert transport._worker is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_background_failure_is_dropped(self):
        respx.post(ENDPOINT).mock(side_effect=httpx.ReadTimeout("slow"))
        transport = HttpTransport(ENDPOINT)

        with structlog.testing.capture_logs() as logs:
            transport.send({"level": "error", "message": "boom"})
            await transport.aflush()

        assert logs[0]["event"] == LogEvents.TRANSPORT_SEND_FAILED
