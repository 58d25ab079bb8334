"""Structured-event and error sinks.

Both sinks build a record from the classified event, resolve their field
map through the registry for the current unit of work, and hand the merged
record to a transport.
"""

from __future__ import annotations

import traceback
from collections.abc import Mapping
from typing import Any

from logship.events.messages import is_error_like
from logship.fields.registry import FieldRegistry, FieldSpec, LogOccurrence
from logship.observability.constants import LogEvents
from logship.observability.logger import get_logger
from logship.runtime.unit_of_work import get_unit_of_work
from logship.sinks.transport import Transport

logger = get_logger(__name__)


def describe_error(error: BaseException) -> dict[str, Any]:
    """Describe a raised error by class, message and raising location."""
    error_type = type(error)
    class_name = error_type.__qualname__
    if error_type.__module__ != "builtins":
        class_name = f"{error_type.__module__}.{class_name}"

    frames = traceback.extract_tb(error.__traceback__) if error.__traceback__ else []
    last = frames[-1] if frames else None

    return {
        "class": class_name,
        "message": str(error),
        "file": last.filename if last else None,
        "line": last.lineno if last else None,
        "stack": [
            {"file": frame.filename, "line": frame.lineno, "function": frame.name}
            for frame in reversed(frames)
        ],
    }


class _FieldSink:
    def __init__(
        self,
        registry: FieldRegistry,
        transport: Transport,
        fields: Mapping[str, FieldSpec],
    ):
        self.registry = registry
        self.transport = transport
        self.fields = dict(fields)

    def build_record(self, level: str, payload: Any, context: dict[str, Any]) -> dict[str, Any]:
        raise NotImplementedError

    def accept(self, level: str, payload: Any, context: dict[str, Any]) -> None:
        record = self.build_record(level, payload, context)
        occurrence = LogOccurrence(
            level=level,
            message=payload,
            context=record,
            unit=get_unit_of_work(),
        )
        record.update(self.registry.resolve_values(self.fields, occurrence))

        try:
            self.transport.send(record)
        except Exception as exc:
            # A broken transport drops the record; the host keeps running
            logger.debug(
                LogEvents.TRANSPORT_SEND_FAILED,
                transport=type(self.transport).__name__,
                error_type=type(exc).__name__,
                error=str(exc),
            )


class EventLogger(_FieldSink):
    """Sink for info/debug events with plain messages."""

    def build_record(self, level: str, payload: Any, context: dict[str, Any]) -> dict[str, Any]:
        if isinstance(payload, Mapping):
            record = {str(key): value for key, value in payload.items()}
        else:
            record = {"message": payload}

        record["level"] = level
        if context:
            record["context"] = context
        return record


class ExceptionLogger(_FieldSink):
    """Sink for errors and for every event above info level."""

    def build_record(self, level: str, payload: Any, context: dict[str, Any]) -> dict[str, Any]:
        if is_error_like(payload):
            record = describe_error(payload)
        else:
            record = {"message": payload if isinstance(payload, str) else str(payload)}

        record["level"] = level
        if context:
            record["context"] = context
        return record
