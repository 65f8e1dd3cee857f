"""
OAuth2 Authentication Package for the Workspace facade.

This package provides:
- The Connection builder (OAuth client or service account setup)
- A token file credential store with atomic writes
- The token refresh gate (ensure_valid_token)
- A non-blocking OAuth callback server
"""

from .scopes import (
    DEFAULT_SCOPES,
    DRIVE_SCOPE,
    CALENDAR_SCOPE,
    SCRIPT_PROJECTS_SCOPE,
    SIGN_IN_SCOPES,
    get_scopes,
)
from .credential_store import CredentialStore, TokenFileStore
from .connection import Connection, load_auth_config
from .token_gate import TokenCheckResult, TokenStatus, ensure_valid_token

__all__ = [
    # Scopes
    "DEFAULT_SCOPES",
    "DRIVE_SCOPE",
    "CALENDAR_SCOPE",
    "SCRIPT_PROJECTS_SCOPE",
    "SIGN_IN_SCOPES",
    "get_scopes",
    # Credential Store
    "CredentialStore",
    "TokenFileStore",
    # Connection
    "Connection",
    "load_auth_config",
    # Token gate
    "TokenCheckResult",
    "TokenStatus",
    "ensure_valid_token",
]
