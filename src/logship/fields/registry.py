"""Named, extensible registry of field resolvers.

A resolver computes one contextual value (session id, url, user id, ...) for
a log occurrence. Callers pass a field map of output names to resolvers, or
to the names of registered resolvers, and get back one value per entry.

Two failure modes are kept apart:

- Naming a resolver that was never registered is a wiring bug and raises
  ``UnregisteredFieldError`` immediately.
- Anything a resolver raises while computing its value is logged and the
  field is reported as absent (``None``); the other fields still resolve.
"""

from __future__ import annotations

import hashlib
import sys
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Union

from logship._version import __version__
from logship.core.exceptions import ConfigurationError, UnregisteredFieldError
from logship.events.versions import HostVersion
from logship.fields import constants as names
from logship.observability.constants import LogEvents
from logship.observability.logger import get_logger
from logship.runtime.request import EMPTY_CONTEXT, AuthProbe, RequestContext
from logship.runtime.unit_of_work import UnitOfWork, get_unit_of_work

logger = get_logger(__name__)


@dataclass(frozen=True)
class LogOccurrence:
    """One emitted log entry, plus the unit of work it was emitted in."""

    level: str
    message: Any
    context: Mapping[str, Any] = field(default_factory=dict)
    unit: UnitOfWork | None = None

    @property
    def request(self) -> RequestContext:
        if self.unit is None:
            return EMPTY_CONTEXT
        return self.unit.request


Resolver = Callable[[LogOccurrence], Any]
FieldSpec = Union[Resolver, str, Sequence[Union[Resolver, str]]]


class FieldRegistry:
    """Registry of named field resolvers with the built-in set preloaded."""

    def __init__(
        self,
        *,
        environment: str | None = None,
        host_version: HostVersion | str = "",
        running_in_console: bool = False,
        argv: Sequence[str] | None = None,
        auth_probes: Sequence[AuthProbe] = (),
    ):
        """Initialize the registry.

        Args:
            environment: Runtime environment name (e.g. "production").
            host_version: Host framework version.
            running_in_console: Whether this process is a console invocation.
            argv: Command line of the invocation; defaults to ``sys.argv``
                read at resolution time.
            auth_probes: Process-wide auth probes, tried after the probes
                carried by the request context.
        """
        self.environment = environment
        self.host_version = HostVersion(str(host_version))
        self.running_in_console = running_in_console
        self.argv = argv
        self.auth_probes = tuple(auth_probes)
        self._resolvers: dict[str, Resolver] = {}

        builtins: dict[str, Callable[..., Any]] = {
            names.SESSION_ID: self.get_session_id,
            names.ROUTE_NAME: self.get_route_name,
            names.URL: self.get_url,
            names.REQUEST_METHOD: self.get_request_method,
            names.SERVER_IP: self.get_server_ip,
            names.CLIENT_IP: self.get_client_ip,
            names.CLIENT_USER_AGENT: self.get_client_user_agent,
            names.ENVIRONMENT: self.get_environment,
            names.FROM_SESSION: self.get_from_session,
            names.PROCESS_IDENTIFIER: self.get_process_identifier,
            names.USER_ID: self.get_user_id,
            names.GROUP_ID: self.get_group_id,
            names.HOST_VERSION: self.get_host_version,
            names.SQL_QUERIES: self.get_sql_queries,
            names.CONSOLE_COMMAND: self.get_console_command,
            names.RUNNING_IN_CONSOLE: self.get_running_in_console,
            names.LOGGER_VERSION: self.get_logger_version,
        }
        for name in names.BUILTIN_FIELDS:
            self._resolvers[name] = builtins[name]

    # ------------------------------------------------------------------
    # Registration and lookup
    # ------------------------------------------------------------------

    def register(self, name: str, resolver: Resolver) -> None:
        """Register ``resolver`` under ``name``, replacing any previous one."""
        self._resolvers[name] = resolver
        logger.debug(LogEvents.FIELD_REGISTERED, field=name)

    def has(self, name: str) -> bool:
        return name in self._resolvers

    @property
    def names(self) -> list[str]:
        """Registered names in registration order."""
        return list(self._resolvers)

    def resolver(self, name: str) -> Resolver:
        """Return the resolver registered under ``name``.

        Raises:
            UnregisteredFieldError: If nothing is registered under ``name``.
        """
        try:
            return self._resolvers[name]
        except KeyError:
            raise UnregisteredFieldError(name, self.names) from None

    def call(self, name: str, *args: Any) -> Any:
        """Look up ``name`` and invoke it with ``args``."""
        return self.resolver(name)(*args)

    def from_session(self, key: str) -> Resolver:
        """Build a resolver reading ``key`` from the current session."""

        def resolve(occurrence: LogOccurrence) -> Any:
            return self.call(names.FROM_SESSION, occurrence, key)

        return resolve

    def _lookup(self, spec: FieldSpec) -> Resolver:
        if isinstance(spec, str):
            return self.resolver(spec)
        if callable(spec):
            return spec
        if isinstance(spec, Sequence):
            if not spec:
                raise ConfigurationError("Empty field resolver entry.")
            # Only the first element is used; the rest is reserved
            return self._lookup(spec[0])
        raise ConfigurationError(f"Invalid field resolver entry: {spec!r}")

    def resolve_values(
        self, requested: Mapping[str, FieldSpec], occurrence: LogOccurrence
    ) -> dict[str, Any]:
        """Resolve every field in ``requested`` for ``occurrence``.

        Args:
            requested: Output field name to resolver, registered name, or a
                sequence whose first element is one of those.
            occurrence: The log occurrence passed to each resolver.

        Returns:
            Output field name to value, in the order of ``requested``.
            Absent values are ``None``.

        Raises:
            UnregisteredFieldError: If a registered name is unknown.
        """
        data: dict[str, Any] = {}

        for field_name, spec in requested.items():
            resolver = self._lookup(spec)
            try:
                value = resolver(occurrence)
            except UnregisteredFieldError:
                raise
            except Exception as exc:
                logger.warning(
                    LogEvents.FIELD_RESOLVE_FAILED,
                    field=field_name,
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                )
                value = None
            data[field_name] = value

        return data

    # ------------------------------------------------------------------
    # Built-in resolvers
    # ------------------------------------------------------------------

    def get_session_id(self, occurrence: LogOccurrence) -> str | None:
        """Return a SHA-1 of the session id; the raw id is never shipped."""
        session = occurrence.request.session
        if session is None:
            return None

        session_id = session.get_id()
        if session_id is None or session_id == "":
            return None
        return hashlib.sha1(str(session_id).encode()).hexdigest()

    def get_route_name(self, occurrence: LogOccurrence) -> str | None:
        router = occurrence.request.router
        if router is None:
            return None

        route = router.current_route()
        if route is None:
            return None

        return route.name

    def get_url(self, occurrence: LogOccurrence) -> str | None:
        """Return the request path with its query string."""
        request = occurrence.request.request
        if request is None:
            return None

        url = request.path()
        if not url.startswith("/"):
            url = "/" + url

        query_string = request.query_string()
        if query_string:
            url += "?" + query_string

        return url

    def get_request_method(self, occurrence: LogOccurrence) -> str | None:
        request = occurrence.request.request
        if request is None:
            return None

        return request.method()

    def get_server_ip(self, occurrence: LogOccurrence) -> str | None:
        request = occurrence.request.request
        if request is None:
            return None

        return request.server.get("SERVER_ADDR")

    def get_client_ip(self, occurrence: LogOccurrence) -> str | None:
        request = occurrence.request.request
        if request is None:
            return None

        return request.client_ip()

    def get_client_user_agent(self, occurrence: LogOccurrence) -> str | None:
        request = occurrence.request.request
        if request is None:
            return None

        return request.server.get("HTTP_USER_AGENT")

    def get_environment(self, occurrence: LogOccurrence) -> str | None:  # noqa: ARG002
        return self.environment

    def get_from_session(self, occurrence: LogOccurrence, key: str) -> Any:
        """Return the session value at ``key``."""
        session = occurrence.request.session
        if session is None:
            return None

        return session.get(key)

    def get_process_identifier(self, occurrence: LogOccurrence) -> str:
        """Return the token of the occurrence's unit of work."""
        unit = occurrence.unit or get_unit_of_work()
        return unit.token

    def get_user_id(self, occurrence: LogOccurrence) -> Any:
        """Return the first user id reported by an auth probe.

        Probes carried by the request context run first, then the
        registry's own. A probe that raises counts as reporting no user.
        """
        for probe in (*occurrence.request.auth_probes, *self.auth_probes):
            try:
                user_id = probe.current_user_id()
            except Exception as exc:
                logger.debug(
                    LogEvents.AUTH_PROBE_FAILED,
                    probe=type(probe).__name__,
                    error_message=str(exc),
                )
                continue

            if user_id is not None and user_id != "":
                return user_id

        return None

    def get_group_id(self, occurrence: LogOccurrence) -> str:
        """Return a grouping key for similar error occurrences.

        Hashes ``class#file#line`` from the occurrence context.
        """
        parts = []
        for key in ("class", "file", "line"):
            value = occurrence.context.get(key)
            parts.append(names.NULL_MARKER if value is None else str(value))

        return hashlib.sha1("#".join(parts).encode()).hexdigest()

    def get_host_version(self, occurrence: LogOccurrence) -> str:  # noqa: ARG002
        return str(self.host_version)

    def get_sql_queries(self, occurrence: LogOccurrence) -> list[Any] | None:
        if occurrence.unit is None:
            return None

        return occurrence.unit.collector.get_by_key(names.SQL_QUERIES_KEY)

    def get_console_command(self, occurrence: LogOccurrence) -> str | None:  # noqa: ARG002
        """Return the full command line when running in a console."""
        if not self.running_in_console:
            return None

        argv = sys.argv if self.argv is None else self.argv
        if not argv:
            return None

        return " ".join(argv)

    def get_running_in_console(self, occurrence: LogOccurrence) -> bool:  # noqa: ARG002
        return self.running_in_console

    def get_logger_version(self, occurrence: LogOccurrence) -> str:  # noqa: ARG002
        return __version__
