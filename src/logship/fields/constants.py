"""Built-in field names and default field maps."""

SESSION_ID = "getSessionId"
ROUTE_NAME = "getRouteName"
URL = "getUrl"
REQUEST_METHOD = "getRequestMethod"
SERVER_IP = "getServerIp"
CLIENT_IP = "getClientIp"
CLIENT_USER_AGENT = "getClientUserAgent"
ENVIRONMENT = "getEnvironment"
FROM_SESSION = "getFromSession"
PROCESS_IDENTIFIER = "getProcessIdentifier"
USER_ID = "getUserId"
GROUP_ID = "getGroupId"
HOST_VERSION = "getLaravelVersion"
SQL_QUERIES = "getSqlQueries"
CONSOLE_COMMAND = "getArtisanCommandName"
RUNNING_IN_CONSOLE = "getRunningInConsole"
LOGGER_VERSION = "getLoggerVersion"

# Registration order of the built-in resolvers
BUILTIN_FIELDS = (
    SESSION_ID,
    ROUTE_NAME,
    URL,
    REQUEST_METHOD,
    SERVER_IP,
    CLIENT_IP,
    CLIENT_USER_AGENT,
    ENVIRONMENT,
    FROM_SESSION,
    PROCESS_IDENTIFIER,
    USER_ID,
    GROUP_ID,
    HOST_VERSION,
    SQL_QUERIES,
    CONSOLE_COMMAND,
    RUNNING_IN_CONSOLE,
    LOGGER_VERSION,
)

# Collector category holding executed SQL statements
SQL_QUERIES_KEY = "sql_queries"

# Placeholder for a missing group id part
NULL_MARKER = "null"

DEFAULT_EVENT_FIELDS = {
    "session_id": SESSION_ID,
    "request_id": PROCESS_IDENTIFIER,
    "user_id": USER_ID,
    "env": ENVIRONMENT,
    "url": URL,
    "method": REQUEST_METHOD,
    "client_ip": CLIENT_IP,
    "server_ip": SERVER_IP,
    "user_agent": CLIENT_USER_AGENT,
    "route": ROUTE_NAME,
}

DEFAULT_ERROR_FIELDS = {
    **DEFAULT_EVENT_FIELDS,
    "group_id": GROUP_ID,
    "sql_queries": SQL_QUERIES,
    "framework_version": HOST_VERSION,
    "console_command": CONSOLE_COMMAND,
    "running_in_console": RUNNING_IN_CONSOLE,
    "logger_version": LOGGER_VERSION,
}
