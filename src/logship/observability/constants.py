"""Constants for observability layer."""

# HTTP header returning the unit-of-work token to the client
PROCESS_ID_HEADER = "X-Process-ID"

# Service identifier for logs
SERVICE_NAME = "logship"


# Log event names following the pattern: {domain}.{action}.{result}
class LogEvents:
    """Standardized log event names."""

    # Field resolution events
    FIELD_RESOLVE_FAILED = "field.resolve.failed"
    FIELD_REGISTERED = "field.registered"
    AUTH_PROBE_FAILED = "auth.probe.failed"

    # Classification events
    EVENT_IGNORED = "event.classify.ignored"
    EVENT_STRUCTURED = "event.classify.structured"
    EVENT_ERROR = "event.classify.error"

    # Unit of work lifecycle events
    UNIT_STARTED = "unit.started"
    UNIT_RESET = "unit.reset"

    # Integration events
    INTEGRATION_INSTALLED = "integration.installed"
    LISTENER_REGISTERED = "integration.listener.registered"

    # Transport events
    RECORD_SHIPPED = "record.shipped"
    TRANSPORT_SEND_FAILED = "transport.send.failed"
    TRANSPORT_UNEXPECTED_STATUS = "transport.send.unexpected_status"


# Fields that should be redacted in shipped context
SENSITIVE_FIELDS = frozenset({
    # Authentication
    "password",
    "secret",
    "secret_key",
    "private_key",
    # Tokens
    "token",
    "access_token",
    "refresh_token",
    "api_key",
    "access_key",
    "apikey",
    "api_secret",
    "bearer",
    "authorization",
    "auth",
    # Session
    "cookie",
    "csrf_token",
})

# Words that mark a key as sensitive wherever they appear in it, matched
# against whole words of the snake_cased key
SENSITIVE_WORDS = frozenset({
    "password",
    "passwd",
    "secret",
    "token",
    "credential",
    "credentials",
    "auth",
    "authorization",
    "cookie",
    "apikey",
})

# Redaction placeholder
REDACTED_VALUE = "[REDACTED]"
