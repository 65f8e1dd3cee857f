"""MCP Server initialization and shared connection."""

from typing import Optional

from fastmcp import FastMCP

from ..auth import Connection, ensure_valid_token
from ..auth.oauth_callback_server import ensure_oauth_callback_available
from ..auth.oauth_config import get_oauth_config
from ..auth.scopes import (
    CALENDAR_SCOPE,
    DRIVE_SCOPE,
    SCRIPT_PROJECTS_SCOPE,
    SPREADSHEETS_SCOPE,
    get_scopes,
)
from ..core.config import APPLICATION_NAME
from ..utils.errors import AuthenticationError, AuthorizationRequiredError

# Initialize MCP Server
mcp = FastMCP("Workspace Facade")

SERVER_SCOPES = get_scopes(
    [DRIVE_SCOPE], [CALENDAR_SCOPE], [SCRIPT_PROJECTS_SCOPE, SPREADSHEETS_SCOPE]
)

# Global connection, initialized lazily
_connection: Optional[Connection] = None


def get_connection() -> Connection:
    """Get or create the shared Connection.

    Returns:
        A Connection set up with the server's scopes. It may not hold a
        token yet; see require_token().
    """
    global _connection
    if _connection is None:
        connection = Connection()
        connection.create_connection(APPLICATION_NAME, scopes=SERVER_SCOPES)
        _connection = connection
    return _connection


def start_callback_server(connection: Connection) -> None:
    """Make sure the redirect target of an authorization URL is listening.

    Raises:
        AuthenticationError: If the callback server cannot be started.
    """
    config = get_oauth_config()
    success, error_msg = ensure_oauth_callback_available(
        connection, port=config.port, base_uri=config.base_uri
    )
    if not success:
        raise AuthenticationError(f"OAuth callback server unavailable: {error_msg}")


def require_token() -> Connection:
    """Return the shared connection once it carries a valid token.

    When no token is stored yet, the callback server is started so the
    authorization URL carried by the error can complete.

    Raises:
        AuthorizationRequiredError: If the user still has to authorize.
        AuthenticationError: If the callback server cannot be started.
    """
    connection = get_connection()
    result = ensure_valid_token(connection)
    if not result.ok:
        start_callback_server(connection)
        raise AuthorizationRequiredError(result.auth_url)
    return connection
