"""Per unit-of-work runtime state: tokens, collected data and request context."""

from logship.runtime.collector import DataCollector
from logship.runtime.request import (
    AuthProbe,
    DictSession,
    HttpRequest,
    NamedRoute,
    RequestContext,
    Router,
    SessionStore,
    StaticRequest,
    StaticRouter,
)
from logship.runtime.tokens import CorrelationTokenProvider
from logship.runtime.unit_of_work import (
    UnitOfWork,
    get_optional_unit_of_work,
    get_unit_of_work,
    set_unit_of_work,
    unit_of_work,
)

__all__ = [
    "AuthProbe",
    "CorrelationTokenProvider",
    "DataCollector",
    "DictSession",
    "HttpRequest",
    "NamedRoute",
    "RequestContext",
    "Router",
    "SessionStore",
    "StaticRequest",
    "StaticRouter",
    "UnitOfWork",
    "get_optional_unit_of_work",
    "get_unit_of_work",
    "set_unit_of_work",
    "unit_of_work",
]
