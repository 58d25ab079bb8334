"""Transports handing finished records to their destination.

Delivery is best effort: failures are logged and the record is dropped.
There is no retry and no authentication with the collector.
"""

from __future__ import annotations

import asyncio
import json
import queue
import threading
from typing import Any, Protocol

import httpx

from logship.core.exceptions import TransportError
from logship.observability.constants import SERVICE_NAME, LogEvents
from logship.observability.logger import get_logger, log_with_context
from logship.observability.sanitizer import sanitize

logger = get_logger(__name__)

# Shipped records are logged under the logship namespace so the logging
# bridge never feeds them back into the classifier.
SHIPPED_LOGGER_NAME = "logship.shipped"


class Transport(Protocol):
    """Destination of finished records."""

    def send(self, record: dict[str, Any]) -> None:
        """Ship one record. Must not raise."""


class StructlogTransport:
    """Emit records as structlog entries (stdout JSON in production)."""

    def __init__(self, logger_name: str = SHIPPED_LOGGER_NAME):
        self._logger = get_logger(logger_name)

    def send(self, record: dict[str, Any]) -> None:
        payload = {str(key): value for key, value in sanitize(dict(record)).items()}
        level = str(payload.pop("level", "info"))
        for reserved in ("event", "logger"):
            if reserved in payload:
                payload[f"record_{reserved}"] = payload.pop(reserved)
        log_with_context(self._logger, level, LogEvents.RECORD_SHIPPED, **payload)


class HttpTransport:
    """POST records as JSON to a collector endpoint without blocking the caller.

    Inside a running event loop each record is sent by a background task.
    Elsewhere (queue workers, console commands, sync handlers) records go on
    a queue drained by one daemon thread. ``flush()`` / ``aflush()`` wait for
    what has been handed over so far; ``close()`` stops the thread.
    """

    def __init__(self, endpoint_url: str, timeout: float = 5.0, service: str = SERVICE_NAME):
        if not endpoint_url:
            raise TransportError("HttpTransport requires an endpoint URL.")
        self.endpoint_url = endpoint_url
        self.timeout = httpx.Timeout(timeout)
        self.service = service
        self._pending: set[asyncio.Task[None]] = set()
        self._queue: queue.Queue[bytes | None] = queue.Queue()
        self._worker: threading.Thread | None = None
        self._lock = threading.Lock()

    def _encode(self, record: dict[str, Any]) -> bytes:
        body = {"service": self.service, **sanitize(record)}
        return json.dumps(body, default=str, separators=(",", ":")).encode()

    def send(self, record: dict[str, Any]) -> None:
        content = self._encode(record)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._ensure_worker()
            self._queue.put(content)
            return

        task = loop.create_task(self._send_async(content))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def flush(self) -> None:
        """Block until every record queued outside the event loop is sent."""
        if self._worker is not None:
            self._queue.join()

    async def aflush(self) -> None:
        """Wait for records scheduled from inside the event loop."""
        if self._pending:
            await asyncio.gather(*self._pending)

    def close(self) -> None:
        """Send what is queued, then stop the worker thread."""
        with self._lock:
            worker, self._worker = self._worker, None
        if worker is None:
            return
        self._queue.put(None)
        worker.join()

    def _ensure_worker(self) -> None:
        with self._lock:
            if self._worker is None:
                self._worker = threading.Thread(
                    target=self._drain, name="logship-http-transport", daemon=True
                )
                self._worker.start()

    def _drain(self) -> None:
        with httpx.Client(timeout=self.timeout) as client:
            while True:
                content = self._queue.get()
                try:
                    if content is None:
                        return
                    self._post(client, content)
                finally:
                    self._queue.task_done()

    def _post(self, client: httpx.Client, content: bytes) -> None:
        try:
            response = client.post(
                self.endpoint_url,
                content=content,
                headers={"Content-Type": "application/json"},
            )
            self._check(response)
        except Exception as exc:
            # Shipping never breaks the application
            logger.debug(LogEvents.TRANSPORT_SEND_FAILED, error=str(exc))

    async def _send_async(self, content: bytes) -> None:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.endpoint_url,
                    content=content,
                    headers={"Content-Type": "application/json"},
                )
            self._check(response)
        except Exception as exc:
            # Shipping never breaks the application
            logger.debug(LogEvents.TRANSPORT_SEND_FAILED, error=str(exc))

    def _check(self, response: httpx.Response) -> None:
        if response.status_code >= 300:
            logger.debug(
                LogEvents.TRANSPORT_UNEXPECTED_STATUS,
                status_code=response.status_code,
            )
