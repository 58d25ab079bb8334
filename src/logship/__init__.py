"""logship - normalize host framework events into uniform log records.

Example usage:
    import logging

    from logship import EventDispatcher, Integration, Settings

    integration = Integration.from_settings(Settings(host_version="5.8"))

    # Host event bus
    dispatcher = EventDispatcher()
    integration.install(dispatcher)

    # Or feed stdlib logging directly
    logging.getLogger().addHandler(integration.logging_handler())

    # Custom fields
    integration.registry.register("getTenant", lambda occurrence: "acme")
"""

from logship._version import __version__
from logship.bootstrap import Integration, build_transport
from logship.core.config import Settings, get_settings
from logship.core.exceptions import (
    ConfigurationError,
    LogshipError,
    TransportError,
    UnknownEventFamilyError,
    UnregisteredFieldError,
)
from logship.events import (
    Classification,
    ErrorRef,
    EventClassifier,
    EventDispatcher,
    EventFamily,
    HostVersion,
    LogEvent,
    Outcome,
    PlainMessage,
    log_event,
    select_strategy,
)
from logship.fields import FieldRegistry, LogOccurrence
from logship.runtime import (
    CorrelationTokenProvider,
    DataCollector,
    RequestContext,
    UnitOfWork,
    get_unit_of_work,
    unit_of_work,
)
from logship.sinks import EventLogger, ExceptionLogger, HttpTransport, StructlogTransport

__all__ = [
    "__version__",
    # Wiring
    "Integration",
    "Settings",
    "build_transport",
    "get_settings",
    # Exceptions
    "ConfigurationError",
    "LogshipError",
    "TransportError",
    "UnknownEventFamilyError",
    "UnregisteredFieldError",
    # Events
    "Classification",
    "ErrorRef",
    "EventClassifier",
    "EventDispatcher",
    "EventFamily",
    "HostVersion",
    "LogEvent",
    "Outcome",
    "PlainMessage",
    "log_event",
    "select_strategy",
    # Fields
    "FieldRegistry",
    "LogOccurrence",
    # Runtime
    "CorrelationTokenProvider",
    "DataCollector",
    "RequestContext",
    "UnitOfWork",
    "get_unit_of_work",
    "unit_of_work",
    # Sinks
    "EventLogger",
    "ExceptionLogger",
    "HttpTransport",
    "StructlogTransport",
]
