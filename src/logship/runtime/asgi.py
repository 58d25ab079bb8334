"""Starlette implementations of the request, router and session facades."""

from __future__ import annotations

from typing import Any

from starlette.requests import Request
from starlette.routing import BaseRoute, Match

from logship.runtime.request import RequestContext

SESSION_COOKIE = "session"
SESSION_USER_KEY = "user_id"


def _get_client_ip(request: Request) -> str | None:
    """Extract client IP from request, considering proxies.

    Args:
        request: The incoming HTTP request.

    Returns:
        The client IP address, or None if it cannot be determined.
    """
    # Check X-Forwarded-For header (set by reverse proxies)
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        # Take the first IP (original client)
        return forwarded_for.split(",")[0].strip()

    # Check X-Real-IP header (nginx convention)
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    # Fallback to direct client
    if request.client:
        return request.client.host

    return None


def _server_variables(request: Request) -> dict[str, str]:
    """Build CGI-style server variables from the ASGI scope."""
    server: dict[str, str] = {"REQUEST_METHOD": request.method}

    address = request.scope.get("server")
    if address:
        server["SERVER_ADDR"] = str(address[0])
        if address[1] is not None:
            server["SERVER_PORT"] = str(address[1])

    if request.client:
        server["REMOTE_ADDR"] = request.client.host

    user_agent = request.headers.get("user-agent")
    if user_agent:
        server["HTTP_USER_AGENT"] = user_agent

    return server


class StarletteRequest:
    """Request facade over a Starlette request."""

    def __init__(self, request: Request):
        self._request = request
        self.server = _server_variables(request)

    def path(self) -> str:
        return self._request.url.path

    def query_string(self) -> str | None:
        return self._request.url.query or None

    def method(self) -> str:
        return self._request.method

    def client_ip(self) -> str | None:
        return _get_client_ip(self._request)


class StarletteRouter:
    """Router facade reporting the route matched for a request.

    Routers that record the matched route in the scope (FastAPI) are read
    directly; otherwise the application's routes are matched again.
    """

    def __init__(self, request: Request):
        self._request = request

    def current_route(self) -> BaseRoute | None:
        scope = self._request.scope
        route = scope.get("route")
        if route is not None:
            return route

        app = scope.get("app")
        for candidate in getattr(app, "routes", ()):
            match, _ = candidate.matches(scope)
            if match == Match.FULL:
                return candidate

        return None


class StarletteSession:
    """Session facade over ``SessionMiddleware`` state.

    Starlette keeps session data in a signed cookie; the cookie value is
    what identifies the session and is only ever shipped hashed.
    """

    def __init__(self, request: Request, cookie_name: str = SESSION_COOKIE):
        self._request = request
        self._cookie_name = cookie_name

    def get_id(self) -> str | None:
        return self._request.cookies.get(self._cookie_name)

    def get(self, key: str) -> Any:
        return self._request.session.get(key)


# Auth probes. Each one only works when its provider is installed; the
# registry treats a probe that raises as reporting no user.


class RequestStateUserProbe:
    """User stored on ``request.state.user`` by application code."""

    def __init__(self, request: Request):
        self._request = request

    def current_user_id(self) -> Any:
        user = getattr(self._request.state, "user", None)
        if not user:
            return None
        return getattr(user, "id", None)


class AuthenticatedUserProbe:
    """User set by Starlette's ``AuthenticationMiddleware``."""

    def __init__(self, request: Request):
        self._request = request

    def current_user_id(self) -> Any:
        # Raises AssertionError when AuthenticationMiddleware is not installed
        user = self._request.user
        if not getattr(user, "is_authenticated", False):
            return None
        user_id = getattr(user, "id", None)
        if user_id is not None:
            return user_id
        return user.identity


class SessionUserProbe:
    """User id stored in the session under a fixed key."""

    def __init__(self, request: Request, key: str = SESSION_USER_KEY):
        self._request = request
        self._key = key

    def current_user_id(self) -> Any:
        # Raises AssertionError when SessionMiddleware is not installed
        return self._request.session.get(self._key)


def request_context_from_starlette(
    request: Request,
    session_cookie: str = SESSION_COOKIE,
    session_user_key: str = SESSION_USER_KEY,
) -> RequestContext:
    """Build the resolver-facing snapshot of a Starlette request.

    Args:
        request: The incoming HTTP request.
        session_cookie: Name of the session cookie.
        session_user_key: Session key holding the signed-in user id.

    Returns:
        Request context with request, router and auth probes, plus the
        session when ``SessionMiddleware`` runs before this call.
    """
    session = StarletteSession(request, session_cookie) if "session" in request.scope else None

    return RequestContext(
        session=session,
        router=StarletteRouter(request),
        request=StarletteRequest(request),
        auth_probes=(
            RequestStateUserProbe(request),
            AuthenticatedUserProbe(request),
            SessionUserProbe(request, session_user_key),
        ),
    )
