"""Bridge from Python's ``logging`` module into the event classifier."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from logship.events.classifier import EventClassifier
from logship.events.messages import EXCEPTION_KEY, LogEvent, is_error_like, log_event

# Attributes every LogRecord has; anything else came in through `extra=`
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}

# Records from these loggers are never shipped, or shipping would recurse
DEFAULT_IGNORED_LOGGERS = ("logship", "httpx", "httpcore")


def event_from_record(record: logging.LogRecord) -> LogEvent:
    """Convert a stdlib log record into a ``LogEvent``.

    ``extra=`` attributes become the context, and an attached ``exc_info``
    travels under ``context["exception"]``.
    """
    message: Any = record.msg if is_error_like(record.msg) else record.getMessage()

    context = {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRIBUTES and not key.startswith("_")
    }
    context.setdefault("channel", record.name)

    if record.exc_info and record.exc_info[1] is not None:
        context.setdefault(EXCEPTION_KEY, record.exc_info[1])

    return log_event(record.levelname, message, context)


class LogshipHandler(logging.Handler):
    """Logging handler that classifies every record and forwards it to a sink."""

    def __init__(
        self,
        classifier: EventClassifier,
        level: int = logging.NOTSET,
        ignored_loggers: Iterable[str] = DEFAULT_IGNORED_LOGGERS,
    ) -> None:
        super().__init__(level)
        self.classifier = classifier
        self.ignored_loggers = tuple(ignored_loggers)

    def _is_ignored(self, name: str) -> bool:
        return any(name == prefix or name.startswith(prefix + ".") for prefix in self.ignored_loggers)

    def emit(self, record: logging.LogRecord) -> None:
        if self._is_ignored(record.name):
            return
        try:
            self.classifier.dispatch(event_from_record(record))
        except Exception:
            self.handleError(record)
