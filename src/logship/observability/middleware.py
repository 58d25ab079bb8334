"""Starlette middleware opening one unit of work per HTTP request."""

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from logship.observability.constants import PROCESS_ID_HEADER
from logship.runtime.asgi import (
    SESSION_COOKIE,
    SESSION_USER_KEY,
    request_context_from_starlette,
)
from logship.runtime.unit_of_work import unit_of_work


class UnitOfWorkMiddleware(BaseHTTPMiddleware):
    """Middleware scoping the correlation token and collected data to a request.

    For every request it:
    1. Snapshots request, router, session and auth state for field resolvers
    2. Binds a fresh unit of work (new token, empty collector) in a ContextVar
    3. Adds the token to structlog context as ``process_id``
    4. Returns the token in the X-Process-ID response header

    Install it inside ``SessionMiddleware`` / ``AuthenticationMiddleware``
    so that session and user state are visible to the snapshot.
    """

    def __init__(
        self,
        app: ASGIApp,
        session_cookie: str = SESSION_COOKIE,
        session_user_key: str = SESSION_USER_KEY,
        exclude_paths: set[str] | None = None,
    ) -> None:
        """Initialize the middleware.

        Args:
            app: The ASGI application.
            session_cookie: Name of the session cookie.
            session_user_key: Session key holding the signed-in user id.
            exclude_paths: Paths that run without a unit of work (e.g. health checks).
        """
        super().__init__(app)
        self.session_cookie = session_cookie
        self.session_user_key = session_user_key
        self.exclude_paths = exclude_paths or {"/health", "/ready", "/metrics"}

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Process the request inside a unit of work.

        Args:
            request: The incoming HTTP request.
            call_next: The next middleware/handler in the chain.

        Returns:
            The response with the process identifier header.
        """
        if request.url.path in self.exclude_paths:
            return await call_next(request)

        context = request_context_from_starlette(
            request,
            session_cookie=self.session_cookie,
            session_user_key=self.session_user_key,
        )

        with unit_of_work(context) as unit:
            response = await call_next(request)
            response.headers[PROCESS_ID_HEADER] = unit.token

        return response
