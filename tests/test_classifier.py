"""Tests for EventClassifier routing."""

from __future__ import annotations

import pytest
import structlog.testing

from logship.events.classifier import EventClassifier, Outcome, ignore_levels
from logship.events.messages import ErrorRef, LogEvent, PlainMessage, log_event
from logship.events.versions import HostVersion
from logship.observability.constants import LogEvents


@pytest.fixture
def make_classifier(event_sink, error_sink):
    """Factory building a classifier for a given host version."""

    def make(version: str = "5.6", should_ignore=None) -> EventClassifier:
        return EventClassifier(
            host_version=HostVersion(version),
            event_sink=event_sink,
            error_sink=error_sink,
            should_ignore=should_ignore,
        )

    return make


class TestStructuredEvents:
    """Tests for info/debug events with plain messages."""

    def test_info_plain_message(self, make_classifier, event_sink, error_sink):
        """level=info with a plain message is a structured event, payload unchanged."""
        result = make_classifier().handle("info", "hello", {"foo": 1})

        assert result.outcome is Outcome.STRUCTURED_EVENT
        assert event_sink.accepted == [("info", "hello", {"foo": 1})]
        assert error_sink.accepted == []

    def test_debug_structured_message(self, make_classifier, event_sink):
        payload = {"action": "login", "user": 3}

        make_classifier().handle("debug", payload)

        assert event_sink.accepted == [("debug", payload, {})]

    def test_level_is_case_insensitive(self, make_classifier, event_sink):
        """Upper-case level names from stdlib logging are normalized."""
        make_classifier().handle("INFO", "hello")

        assert event_sink.accepted == [("info", "hello", {})]

    def test_info_with_error_message_is_error(self, make_classifier, event_sink, error_sink):
        """An error-like message always goes to the error sink."""
        error = ValueError("bad")

        result = make_classifier().handle("info", error)

        assert result.outcome is Outcome.ERROR_EVENT
        assert event_sink.accepted == []
        assert error_sink.accepted == [("info", error, {})]


class TestErrorEvents:
    """Tests for error routing on modern and legacy hosts."""

    def test_modern_side_channel_exception(self, make_classifier, error_sink):
        """On 5.5+ the context exception is extracted and removed from the context."""
        error = RuntimeError("boom")

        result = make_classifier("5.6").handle("error", "Something failed", {"exception": error, "foo": 1})

        assert result.outcome is Outcome.ERROR_EVENT
        assert error_sink.accepted == [("error", error, {"foo": 1})]

    def test_legacy_ignores_side_channel(self, make_classifier, error_sink):
        """Before 5.5 the message is forwarded and the context kept intact."""
        error = RuntimeError("boom")

        make_classifier("5.2").handle("error", "Something failed", {"exception": error})

        assert error_sink.accepted == [("error", "Something failed", {"exception": error})]

    @pytest.mark.parametrize("version", ["5.0", "5.1", "5.2", "5.3", "5.4"])
    def test_legacy_boundary(self, make_classifier, error_sink, version):
        error = RuntimeError("boom")

        make_classifier(version).handle("error", "msg", {"exception": error})

        assert error_sink.accepted[0][1] == "msg"

    @pytest.mark.parametrize("version", ["5.5", "5.6", "5.8", "6.0", "10.2"])
    def test_modern_boundary(self, make_classifier, error_sink, version):
        error = RuntimeError("boom")

        make_classifier(version).handle("error", "msg", {"exception": error})

        assert error_sink.accepted[0][1] is error

    def test_modern_non_error_exception_key(self, make_classifier, error_sink):
        """A non error-like context exception is ordinary context."""
        make_classifier("5.6").handle("error", "msg", {"exception": "just a string"})

        assert error_sink.accepted == [("error", "msg", {"exception": "just a string"})]

    def test_modern_error_message_without_side_channel(self, make_classifier, error_sink):
        """An error passed as the message on a modern host is the error payload."""
        error = KeyError("missing")

        result = make_classifier("5.8").handle("critical", error, {"foo": 1})

        assert result.outcome is Outcome.ERROR_EVENT
        assert error_sink.accepted == [("critical", error, {"foo": 1})]

    def test_plain_warning_goes_to_error_sink(self, make_classifier, event_sink, error_sink):
        """Anything above info is handled by the error sink."""
        make_classifier().handle("warning", "disk almost full")

        assert event_sink.accepted == []
        assert error_sink.accepted == [("warning", "disk almost full", {})]

    def test_custom_error_hierarchy_is_error_like(self, make_classifier, error_sink):
        class HostError(Exception):
            pass

        error = HostError("x")
        make_classifier("5.6").handle("error", "msg", {"exception": error})

        assert error_sink.accepted[0][1] is error

    def test_classification_does_not_mutate_input(self, make_classifier):
        error = RuntimeError("boom")
        context = {"exception": error, "foo": 1}

        make_classifier("5.6").handle("error", "msg", context)

        assert context == {"exception": error, "foo": 1}


class TestIgnore:
    """Tests for the ignore predicate."""

    def test_ignored_event_reaches_no_sink(self, make_classifier, event_sink, error_sink):
        classifier = make_classifier(should_ignore=lambda level, message, context: "healthcheck" in str(message))

        with structlog.testing.capture_logs() as logs:
            result = classifier.handle("error", "healthcheck failed")

        assert result.outcome is Outcome.IGNORED
        assert event_sink.accepted == []
        assert error_sink.accepted == []
        assert logs[0]["event"] == LogEvents.EVENT_IGNORED

    def test_predicate_sees_unwrapped_message(self, make_classifier):
        seen = []
        error = RuntimeError("x")

        make_classifier(should_ignore=lambda *args: seen.append(args) or False).handle("error", error, {"a": 1})

        assert seen == [("error", error, {"a": 1})]

    def test_ignore_levels(self, make_classifier, event_sink, error_sink):
        classifier = make_classifier(should_ignore=ignore_levels(["DEBUG", "notice"]))

        classifier.handle("debug", "noise")
        classifier.handle("notice", "noise")
        classifier.handle("info", "kept")

        assert event_sink.accepted == [("info", "kept", {})]
        assert error_sink.accepted == []


class TestClassify:
    """Tests for side-effect free classification."""

    def test_classify_does_not_forward(self, make_classifier, event_sink, error_sink):
        result = make_classifier().classify(log_event("info", "hello"))

        assert result.outcome is Outcome.STRUCTURED_EVENT
        assert result.payload == "hello"
        assert event_sink.accepted == []
        assert error_sink.accepted == []

    def test_message_variant_is_built_at_ingestion(self):
        assert isinstance(log_event("info", "hello").message, PlainMessage)
        assert isinstance(log_event("error", ValueError("x")).message, ErrorRef)

    def test_raw_message_is_wrapped_by_constructor(self, make_classifier):
        """LogEvent built directly from raw values classifies like log_event."""
        event = LogEvent("info", "hello")

        assert event.message == PlainMessage("hello")
        assert make_classifier().classify(event).outcome is Outcome.STRUCTURED_EVENT

    def test_raw_error_is_wrapped_by_constructor(self, make_classifier):
        error = ValueError("x")

        result = make_classifier().classify(LogEvent("error", error, {"a": 1}))

        assert result.outcome is Outcome.ERROR_EVENT
        assert result.payload is error
