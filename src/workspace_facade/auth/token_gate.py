"""
Token refresh gate.

ensure_valid_token() is called before any facade operation. It either
confirms a usable access token (refreshing and persisting it when expired)
or hands back the authorization URL the user has to visit. It never blocks
waiting for the user.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .connection import Connection
from .credential_store import CredentialStore, TokenFileStore

logger = logging.getLogger(__name__)


class TokenStatus(enum.Enum):
    OK = 200
    AUTH_REQUIRED = 401


@dataclass
class TokenCheckResult:
    """Outcome of a token check."""

    status: TokenStatus
    message: str = ""
    auth_url: Optional[str] = None
    refreshed: bool = False

    @property
    def ok(self) -> bool:
        return self.status is TokenStatus.OK

    def as_dict(self) -> Dict[str, Any]:
        """Serialize as {status, message} or {status, authUrl}."""
        if self.ok:
            return {"status": self.status.value, "message": self.message}
        return {"status": self.status.value, "authUrl": self.auth_url}


def ensure_valid_token(
    connection: Connection, store: Optional[CredentialStore] = None
) -> TokenCheckResult:
    """
    Make sure the connection carries a valid access token.

    Args:
        connection: A connection set up with create_connection().
        store: Where the credential blob lives. Defaults to a token file at
            connection.credentials_path.

    Returns:
        OK when a usable token is installed, AUTH_REQUIRED with the
        authorization URL when no blob has been persisted yet.

    Raises:
        json.JSONDecodeError, CredentialBlobError: The persisted blob is malformed.
        google.auth.exceptions.RefreshError: The refresh token was rejected.
    """
    if connection.is_service_account:
        return TokenCheckResult(TokenStatus.OK, "Service account credentials")

    if store is None:
        store = TokenFileStore(connection.credentials_path)

    if not store.exists():
        auth_url = connection.create_auth_url()
        logger.info("No stored credentials, authorization required")
        return TokenCheckResult(TokenStatus.AUTH_REQUIRED, auth_url=auth_url)

    connection.set_access_token(store.load(), issued_at=store.last_modified())

    if not connection.is_access_token_expired():
        return TokenCheckResult(TokenStatus.OK, "Token is valid")

    logger.info("Access token expired, refreshing")
    store.save(connection.refresh_access_token())
    return TokenCheckResult(TokenStatus.OK, "Token is valid", refreshed=True)
