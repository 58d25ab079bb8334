"""Wiring of registry, classifier, sinks and host event listeners.

Usage:
    from logship.bootstrap import Integration
    from logship.core.config import get_settings
    from logship.observability import configure_logging

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format, settings.service_name)

    integration = Integration.from_settings(settings)
    integration.install(dispatcher)                  # host event bus
    logging.getLogger().addHandler(integration.logging_handler())
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from logship.core.config import Settings, get_settings
from logship.core.exceptions import TransportError
from logship.events.classifier import EventClassifier, IgnorePredicate, ignore_levels
from logship.events.dispatcher import Dispatcher
from logship.events.versions import EventFamily, ExtractionStrategy, HostVersion, select_all
from logship.fields.constants import SQL_QUERIES_KEY
from logship.fields.registry import FieldRegistry
from logship.observability.constants import LogEvents
from logship.observability.handler import LogshipHandler
from logship.observability.logger import get_logger
from logship.runtime.request import AuthProbe
from logship.runtime.unit_of_work import get_unit_of_work
from logship.sinks.loggers import EventLogger, ExceptionLogger
from logship.sinks.transport import HttpTransport, StructlogTransport, Transport

logger = get_logger(__name__)


def build_transport(settings: Settings) -> Transport:
    """Create the transport named by ``settings.transport``."""
    if settings.transport == "structlog":
        return StructlogTransport()
    if settings.transport == "http":
        return HttpTransport(
            settings.endpoint_url,
            timeout=settings.http_timeout,
            service=settings.service_name,
        )
    raise TransportError(f"Unknown transport '{settings.transport}'.")


def _combine(predicates: Sequence[IgnorePredicate]) -> IgnorePredicate | None:
    if not predicates:
        return None
    if len(predicates) == 1:
        return predicates[0]

    def predicate(level: str, message: Any, context: Mapping[str, Any]) -> bool:
        return any(p(level, message, context) for p in predicates)

    return predicate


class Integration:
    """The assembled integration for one process."""

    def __init__(
        self,
        settings: Settings,
        registry: FieldRegistry,
        classifier: EventClassifier,
        strategies: Mapping[EventFamily, ExtractionStrategy],
    ):
        self.settings = settings
        self.registry = registry
        self.classifier = classifier
        self.strategies = dict(strategies)

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        transport: Transport | None = None,
        auth_probes: Sequence[AuthProbe] = (),
        should_ignore: IgnorePredicate | None = None,
        argv: Sequence[str] | None = None,
    ) -> Integration:
        """Build the integration from settings.

        Args:
            settings: Integration settings; defaults to ``get_settings()``.
            transport: Destination of records; defaults to the one named
                in settings.
            auth_probes: Process-wide auth probes for ``getUserId``.
            should_ignore: Extra ignore predicate for the classifier.
            argv: Command line reported by ``getArtisanCommandName``.
        """
        settings = settings or get_settings()
        transport = transport or build_transport(settings)
        host_version = HostVersion(settings.host_version)

        registry = FieldRegistry(
            environment=settings.environment,
            host_version=host_version,
            running_in_console=settings.running_in_console,
            argv=argv,
            auth_probes=auth_probes,
        )

        predicates: list[IgnorePredicate] = []
        if settings.ignored_levels:
            predicates.append(ignore_levels(settings.ignored_levels))
        if should_ignore is not None:
            predicates.append(should_ignore)

        classifier = EventClassifier(
            host_version=host_version,
            event_sink=EventLogger(registry, transport, settings.event_fields),
            error_sink=ExceptionLogger(registry, transport, settings.error_fields),
            should_ignore=_combine(predicates),
        )

        return cls(settings, registry, classifier, select_all(host_version))

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def handle_log(self, *args: Any) -> None:
        """Listener for the log-emitted event family."""
        event = self.strategies[EventFamily.LOG_EMITTED].extract(*args)
        self.classifier.dispatch(event)

    def handle_job_boundary(self, *args: Any) -> None:
        """Listener for queue job events: start a fresh unit of work."""
        self.strategies[EventFamily.QUEUE_JOB_LIFECYCLE].extract(*args)
        get_unit_of_work().reset()

    def handle_query(self, *args: Any) -> None:
        """Listener for executed queries: collect them for error records."""
        query = self.strategies[EventFamily.QUERY_EXECUTED].extract(*args)
        get_unit_of_work().collector.set_in_array(SQL_QUERIES_KEY, query.to_dict())

    def install(self, dispatcher: Dispatcher) -> list[str]:
        """Register listeners on the host dispatcher.

        Log events are always listened to, queue events only in console
        processes (workers), query events only with ``sql_enabled``.

        Returns:
            The event names listened to.
        """
        if not self.settings.enabled:
            return []

        listeners = [(EventFamily.LOG_EMITTED, self.handle_log)]
        if self.settings.running_in_console:
            listeners.append((EventFamily.QUEUE_JOB_LIFECYCLE, self.handle_job_boundary))
        if self.settings.sql_enabled:
            listeners.append((EventFamily.QUERY_EXECUTED, self.handle_query))

        installed: list[str] = []
        for family, listener in listeners:
            strategy = self.strategies[family]
            for event_name in strategy.event_names:
                dispatcher.listen(event_name, listener)
                installed.append(event_name)
                logger.debug(
                    LogEvents.LISTENER_REGISTERED,
                    family=family.value,
                    event_name=event_name,
                    legacy=strategy.legacy,
                )

        logger.info(
            LogEvents.INTEGRATION_INSTALLED,
            host_version=str(self.registry.host_version),
            listeners=len(installed),
        )
        return installed

    def logging_handler(self, level: int = logging.NOTSET) -> LogshipHandler:
        """Return a ``logging.Handler`` feeding stdlib records to the classifier."""
        return LogshipHandler(self.classifier, level=level)
