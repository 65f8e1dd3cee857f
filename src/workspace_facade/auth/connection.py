"""
Connection builder for the Workspace facade.

A Connection holds one configured OAuth client (or service account) and the
credentials currently installed on it. Resource facades keep a reference to a
shared Connection and ask it for fresh service clients; they never own it.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from google.auth.transport.requests import Request
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from googleapiclient.discovery import build

from ..utils.errors import (
    AuthenticationError,
    ConnectionNotConfiguredError,
    CredentialBlobError,
)
from .oauth_config import get_oauth_config
from .scopes import DEFAULT_SCOPES, SIGN_IN_SCOPES

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"
DEFAULT_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
DEFAULT_PROMPT = "select_account consent"


def load_client_secrets_from_env() -> Optional[Dict[str, Any]]:
    """
    Load client secrets from environment variables.

    Returns:
        Client secrets configuration dict or None if not set.
    """
    config = get_oauth_config()
    if config.has_env_client():
        logger.info("Loaded OAuth credentials from environment variables")
        return _web_client_config(config.client_id, config.client_secret)
    return None


def load_auth_config(auth_config_path: str) -> Dict[str, Any]:
    """
    Load the auth configuration from environment variables or file.

    Args:
        auth_config_path: Path to a client secrets or service account JSON file.

    Returns:
        The parsed configuration. OAuth client configs keep their top-level
        "web" or "installed" key; service account configs are returned as-is.

    Raises:
        ValueError: If the file is neither a client secrets file nor a
            service account key.
        OSError: If the file cannot be read and no environment variables are set.
    """
    env_config = load_client_secrets_from_env()
    if env_config:
        return env_config

    with open(auth_config_path, "r") as f:
        client_config = json.load(f)

    if client_config.get("type") == "service_account":
        logger.info(f"Loaded service account from {auth_config_path}")
        return client_config
    if "web" in client_config or "installed" in client_config:
        logger.info(f"Loaded OAuth credentials from {auth_config_path}")
        return client_config
    raise ValueError(f"Invalid client secrets file format: {auth_config_path}")


def _web_client_config(
    client_id: str, client_secret: str, redirect_uri: Optional[str] = None
) -> Dict[str, Any]:
    web: Dict[str, Any] = {
        "client_id": client_id,
        "client_secret": client_secret,
        "auth_uri": DEFAULT_AUTH_URI,
        "token_uri": DEFAULT_TOKEN_URI,
    }
    if redirect_uri:
        web["redirect_uris"] = [redirect_uri]
    return {"web": web}


def _parse_expiry(value: Any) -> Optional[datetime]:
    """Convert a stored expiry to the naive UTC datetime google-auth expects."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _blob_expiry(blob: Dict[str, Any], issued_at: Optional[float]) -> Optional[datetime]:
    """Expiry of a blob: its "expiry", else issue time plus "expires_in".

    Blobs stored straight from the token endpoint carry "expires_in" and,
    when written by other clients, a "created" Unix timestamp. Without
    "created" the caller's issued_at (e.g. the token file's mtime) is used.
    """
    if blob.get("expiry") not in (None, ""):
        return _parse_expiry(blob["expiry"])
    if blob.get("expires_in") is None:
        return None
    created = blob.get("created")
    if created is None:
        created = issued_at
    if created is None:
        return None
    expires_at = float(created) + float(blob["expires_in"])
    return datetime.fromtimestamp(expires_at, timezone.utc).replace(tzinfo=None)


class Connection:
    """
    Authenticated connection shared by the resource facades.

    Typical use:

        connection = Connection(auth_config_path, credentials_path)
        connection.create_connection("Invoices", scopes=[DRIVE_SCOPE])
        result = ensure_valid_token(connection)
        if result.ok:
            DriveFacade(connection).list_files(folder_id)
    """

    def __init__(
        self,
        auth_config_path: Optional[str] = None,
        credentials_path: Optional[str] = None,
    ) -> None:
        config = get_oauth_config()
        self.auth_config_path = auth_config_path or config.auth_config_path
        self.credentials_path = credentials_path or config.credentials_path

        self.application_name: Optional[str] = None
        self.scopes: List[str] = list(DEFAULT_SCOPES)
        self.subject: Optional[str] = None
        self.access_type: Optional[str] = "offline"
        self.prompt: Optional[str] = DEFAULT_PROMPT

        self._flow: Optional[Flow] = None
        self._client_info: Dict[str, Any] = {}
        self._credentials: Optional[Any] = None
        self._is_service_account = False

    # ── Setup ────────────────────────────────────────────────────────────────

    def create_connection(
        self,
        application_name: str,
        scopes: Optional[Sequence[str]] = None,
        subject: Optional[str] = None,
        access_type: Optional[str] = "offline",
        prompt: Optional[str] = DEFAULT_PROMPT,
        redirect_uri: Optional[str] = None,
    ) -> None:
        """
        Set up the connection with the Google API.

        Args:
            application_name: Name of the calling application.
            scopes: OAuth scopes, e.g. the Drive, Calendar or Script scopes.
            subject: Account to impersonate. Only used with a service account
                (domain-wide delegation).
            access_type: "offline" (default) also returns a refresh token,
                "online" does not. None keeps the library default.
            prompt: Consent prompt sent with the authorization URL.
            redirect_uri: Callback URI; defaults to the configured one.
        """
        self.application_name = application_name
        self.scopes = list(scopes) if scopes else list(DEFAULT_SCOPES)
        self.subject = subject
        self.access_type = access_type
        self.prompt = prompt

        auth_config = load_auth_config(self.auth_config_path)

        if auth_config.get("type") == "service_account":
            self._is_service_account = True
            self._flow = None
            self._credentials = service_account.Credentials.from_service_account_info(
                auth_config, scopes=self.scopes, subject=subject
            )
            logger.info(
                f"Connection '{application_name}' uses service account "
                f"{auth_config.get('client_email')}"
            )
            return

        self._is_service_account = False
        self._client_info = auth_config.get("web") or auth_config.get("installed") or {}
        self._flow = Flow.from_client_config(
            auth_config,
            scopes=self.scopes,
            redirect_uri=redirect_uri or get_oauth_config().redirect_uri,
            autogenerate_code_verifier=False,
        )
        logger.debug(f"Connection '{application_name}' configured for {len(self.scopes)} scopes")

    def create_oauth2_service(
        self,
        application_name: str,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        scopes: Sequence[str] = tuple(SIGN_IN_SCOPES),
    ) -> None:
        """
        Set up a sign-in (OAuth2 service) connection from explicit client values.

        Args:
            application_name: Name of the calling application.
            client_id: The client ID of the OAuth client.
            client_secret: The client secret of the OAuth client.
            redirect_uri: The URI to redirect to after the user grants or
                denies permission.
            scopes: Defaults to email, profile and openid.
        """
        self.application_name = application_name
        self.scopes = list(scopes)
        self._is_service_account = False
        client_config = _web_client_config(client_id, client_secret, redirect_uri)
        self._client_info = client_config["web"]
        self._flow = Flow.from_client_config(
            client_config,
            scopes=self.scopes,
            redirect_uri=redirect_uri,
            autogenerate_code_verifier=False,
        )

    # ── Authorization ────────────────────────────────────────────────────────

    def create_auth_url(self) -> str:
        """Create the authorization URL the user has to visit."""
        if self._flow is None:
            raise ConnectionNotConfiguredError(
                "Call create_connection() or create_oauth2_service() first"
            )
        kwargs: Dict[str, str] = {}
        if self.access_type is not None:
            kwargs["access_type"] = self.access_type
        if self.prompt is not None:
            kwargs["prompt"] = self.prompt
        auth_url, _ = self._flow.authorization_url(**kwargs)
        logger.info(f"Issued authorization URL for '{self.application_name}'")
        return auth_url

    def fetch_access_token_with_auth_code(self, auth_code: str) -> Dict[str, Any]:
        """
        Exchange an authorization code for tokens and install them.

        Returns:
            The new credential blob, ready to be persisted.
        """
        if self._flow is None:
            raise ConnectionNotConfiguredError(
                "Call create_connection() or create_oauth2_service() first"
            )
        self._flow.fetch_token(code=auth_code)
        self._credentials = self._flow.credentials
        logger.info("Exchanged authorization code for tokens")
        return self.get_access_token()

    # ── Token access ─────────────────────────────────────────────────────────

    @property
    def credentials(self) -> Optional[Any]:
        return self._credentials

    @property
    def is_service_account(self) -> bool:
        return self._is_service_account

    def get_access_token(self) -> Dict[str, Any]:
        """Return the installed credentials as a credential blob."""
        if self._credentials is None or self._is_service_account:
            raise AuthenticationError("No user credentials installed on this connection")
        return json.loads(self._credentials.to_json())

    def set_access_token(
        self, blob: Dict[str, Any], issued_at: Optional[float] = None
    ) -> None:
        """
        Install a credential blob on the connection.

        Args:
            blob: google-auth blob ("token", "expiry") or token endpoint
                response ("access_token", "expires_in", optional "created").
            issued_at: Unix time the blob was written, used with
                "expires_in" when the blob has no "created".

        Raises:
            CredentialBlobError: If the blob carries no access token or its
                expiry cannot be parsed.
        """
        if not isinstance(blob, dict):
            raise CredentialBlobError("Credential blob is not a JSON object")
        token = blob.get("token") or blob.get("access_token")
        if not token:
            raise CredentialBlobError("Credential blob has no access token")
        try:
            expiry = _blob_expiry(blob, issued_at)
        except (TypeError, ValueError, OverflowError) as e:
            raise CredentialBlobError(f"Unreadable token expiry: {e}") from e

        self._credentials = Credentials(
            token=token,
            refresh_token=blob.get("refresh_token"),
            token_uri=blob.get("token_uri") or self._client_info.get("token_uri", DEFAULT_TOKEN_URI),
            client_id=blob.get("client_id") or self._client_info.get("client_id"),
            client_secret=blob.get("client_secret") or self._client_info.get("client_secret"),
            scopes=blob.get("scopes") or (blob.get("scope") or "").split() or self.scopes,
            expiry=expiry,
        )

    def is_access_token_expired(self) -> bool:
        """Check if the installed access token is expired (no token counts as expired)."""
        if self._credentials is None or not self._credentials.token:
            return True
        return bool(self._credentials.expired)

    def get_refresh_token(self) -> Optional[str]:
        if self._credentials is None:
            return None
        return getattr(self._credentials, "refresh_token", None)

    def refresh_access_token(self) -> Dict[str, Any]:
        """
        Exchange the stored refresh token for a new access token.

        Provider failures (e.g. a revoked grant raising RefreshError) are
        not caught and not retried.

        Returns:
            The refreshed credential blob.
        """
        if not self.get_refresh_token():
            raise AuthenticationError(
                "Access token expired and no refresh token is available"
            )
        self._credentials.refresh(Request())
        logger.info(f"Refreshed access token for '{self.application_name}'")
        return self.get_access_token()

    # ── Services ─────────────────────────────────────────────────────────────

    def build_service(self, name: str, version: str) -> Any:
        """Build a fresh Google API service client on the installed credentials."""
        if self._credentials is None:
            raise AuthenticationError(
                "No credentials installed. Run ensure_valid_token() first."
            )
        return build(name, version, credentials=self._credentials, cache_discovery=False)

