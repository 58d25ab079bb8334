"""Read-only facades over host request, session and router state.

Field resolvers only ever see the host through these protocols. Any of them
may be missing (e.g. a console command has no request), in which case
``RequestContext`` holds ``None`` and resolvers report the field as absent.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SessionStore(Protocol):
    """Session facade."""

    def get_id(self) -> str | None:
        """Return the raw session identifier, or None if the client has none."""

    def get(self, key: str) -> Any:
        """Return the session value at ``key`` or None."""


@runtime_checkable
class Route(Protocol):
    """Resolved route facade."""

    @property
    def name(self) -> str | None:
        """Registered route name."""


@runtime_checkable
class Router(Protocol):
    """Router facade."""

    def current_route(self) -> Route | None:
        """Return the route matched for the current request, if any."""


@runtime_checkable
class HttpRequest(Protocol):
    """Request facade."""

    server: Mapping[str, str]

    def path(self) -> str:
        """Request path, with or without the leading slash."""

    def query_string(self) -> str | None:
        """Raw query string without the leading ``?``."""

    def method(self) -> str:
        """HTTP method token."""

    def client_ip(self) -> str | None:
        """Client address after proxy-header resolution."""


@runtime_checkable
class AuthProbe(Protocol):
    """Reports the signed-in user of one auth provider, if installed."""

    def current_user_id(self) -> Any:
        """Return the signed-in user id or None."""


@dataclass(frozen=True)
class RequestContext:
    """Snapshot of the host state available to field resolvers."""

    session: SessionStore | None = None
    router: Router | None = None
    request: HttpRequest | None = None
    auth_probes: Sequence[AuthProbe] = ()


EMPTY_CONTEXT = RequestContext()


# Plain implementations, for hosts that do not use Starlette


@dataclass
class DictSession:
    """Session facade backed by a dict."""

    session_id: str | None
    data: dict[str, Any] = field(default_factory=dict)

    def get_id(self) -> str | None:
        return self.session_id

    def get(self, key: str) -> Any:
        return self.data.get(key)


@dataclass(frozen=True)
class NamedRoute:
    name: str | None


@dataclass
class StaticRouter:
    """Router facade returning a fixed route."""

    route: NamedRoute | None = None

    def current_route(self) -> NamedRoute | None:
        return self.route


@dataclass
class StaticRequest:
    """Request facade built from already-known values."""

    request_path: str = "/"
    request_method: str = "GET"
    query: str | None = None
    remote_addr: str | None = None
    server: Mapping[str, str] = field(default_factory=dict)

    def path(self) -> str:
        return self.request_path

    def query_string(self) -> str | None:
        return self.query

    def method(self) -> str:
        return self.request_method

    def client_ip(self) -> str | None:
        return self.remote_addr
