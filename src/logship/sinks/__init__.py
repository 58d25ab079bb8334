"""Sinks and transports for classified events."""

from logship.sinks.loggers import EventLogger, ExceptionLogger, describe_error
from logship.sinks.transport import HttpTransport, StructlogTransport, Transport

__all__ = [
    "EventLogger",
    "ExceptionLogger",
    "HttpTransport",
    "StructlogTransport",
    "Transport",
    "describe_error",
]
