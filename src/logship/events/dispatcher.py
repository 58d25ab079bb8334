"""In-process event dispatcher for hosts without their own event bus."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import Any, Protocol

Listener = Callable[..., Any]


class Dispatcher(Protocol):
    """Anything that can register listeners by event name."""

    def listen(self, event_name: str, listener: Listener) -> None:
        """Call ``listener`` whenever ``event_name`` is fired."""


class EventDispatcher:
    """Name-keyed listener registry.

    Listeners run synchronously in registration order with the arguments
    passed to ``dispatch``.
    """

    def __init__(self) -> None:
        self._listeners: defaultdict[str, list[Listener]] = defaultdict(list)

    def listen(self, event_name: str, listener: Listener) -> None:
        self._listeners[event_name].append(listener)

    def has_listeners(self, event_name: str) -> bool:
        return bool(self._listeners.get(event_name))

    def dispatch(self, event_name: str, *args: Any) -> None:
        for listener in list(self._listeners.get(event_name, ())):
            listener(*args)
