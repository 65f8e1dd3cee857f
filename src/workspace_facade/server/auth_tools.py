"""Authentication MCP tools."""

import logging

from .main import mcp, get_connection
from ..auth import ensure_valid_token
from ..auth.oauth_callback_server import ensure_oauth_callback_available
from ..auth.oauth_config import get_oauth_config

logger = logging.getLogger(__name__)


def _not_configured_message(auth_config_path: str) -> str:
    return (
        "**Authentication Error:** OAuth client credentials not found. Set "
        "GOOGLE_OAUTH_CLIENT_ID and GOOGLE_OAUTH_CLIENT_SECRET, or place "
        f"client_secret.json at {auth_config_path}"
    )


def _auth_message(auth_url: str) -> str:
    message_lines = [
        "**ACTION REQUIRED: Google Authorization Needed**\n",
        "**Open this link to authorize access:**",
        f"```\n{auth_url}\n```",
        "",
        "After authorizing, the browser shows a success page. Retry your command.",
    ]
    return "\n".join(message_lines)


@mcp.tool()
def check_google_token() -> str:
    """
    Check the stored Google token, refreshing it when expired.

    Returns "Token is valid" when the tools can be used, otherwise the
    authorization link the user has to open.
    """
    config = get_oauth_config()
    if not config.is_configured():
        return _not_configured_message(config.auth_config_path)

    try:
        connection = get_connection()
        result = ensure_valid_token(connection)
        if result.ok:
            return "Token refreshed and valid" if result.refreshed else result.message

        success, error_msg = ensure_oauth_callback_available(
            connection,
            port=config.port,
            base_uri=config.base_uri,
        )
        if not success:
            return f"**Error:** OAuth callback server unavailable: {error_msg}"
        return _auth_message(result.auth_url)

    except Exception as e:
        logger.error(f"Token check failed: {e}", exc_info=True)
        return f"**Error:** Token check failed ({type(e).__name__}: {e})"


@mcp.tool()
def start_google_auth() -> str:
    """
    Manually start the Google authorization flow.

    NOTE: Normally not needed. check_google_token and every other tool ask
    for authorization when no token is stored. Use this to re-authorize,
    e.g. with another account or after the refresh token was revoked.

    Returns:
        Authorization URL and instructions, or error message.
    """
    config = get_oauth_config()
    if not config.is_configured():
        return _not_configured_message(config.auth_config_path)

    try:
        connection = get_connection()
        success, error_msg = ensure_oauth_callback_available(
            connection,
            port=config.port,
            base_uri=config.base_uri,
        )
        if not success:
            return f"**Error:** OAuth callback server unavailable: {error_msg}"
        return _auth_message(connection.create_auth_url())

    except Exception as e:
        logger.error(f"Failed to start Google authentication flow: {e}", exc_info=True)
        return f"**Error:** An unexpected error occurred: {e}"
