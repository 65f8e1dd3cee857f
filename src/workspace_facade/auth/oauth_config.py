"""
OAuth Configuration Management for the Workspace facade.

This module centralizes OAuth-related configuration to eliminate hardcoded values.
"""

import os
from typing import Optional, Dict, Any

from dotenv import load_dotenv

load_dotenv()


class OAuthConfig:
    """
    Centralized OAuth configuration management.

    Provides a single source of truth for the auth configuration path,
    the credential (token) file path and the OAuth callback location.
    """

    def __init__(self) -> None:
        # Base server configuration
        self.base_uri = os.getenv("WORKSPACE_FACADE_BASE_URI", "http://localhost")
        self.port = int(os.getenv("WORKSPACE_FACADE_PORT", "9877"))
        self.base_url = f"{self.base_uri}:{self.port}"

        # Credentials directory
        self.credentials_dir = os.path.expanduser(
            os.getenv("WORKSPACE_FACADE_CREDENTIALS_DIR", "~/.workspace-facade")
        )

        # OAuth client configuration (from environment or client_secret.json)
        self.client_id = os.getenv("GOOGLE_OAUTH_CLIENT_ID")
        self.client_secret = os.getenv("GOOGLE_OAUTH_CLIENT_SECRET")

        # Client secrets / service account file
        self.auth_config_path = os.path.expanduser(
            os.getenv(
                "WORKSPACE_FACADE_AUTH_CONFIG",
                os.path.join(self.credentials_dir, "client_secret.json"),
            )
        )

        # Persisted token blob
        self.credentials_path = os.path.expanduser(
            os.getenv(
                "WORKSPACE_FACADE_TOKEN_FILE",
                os.path.join(self.credentials_dir, "token.json"),
            )
        )

        self.redirect_uri = self._get_redirect_uri()

    def _get_redirect_uri(self) -> str:
        """Get the OAuth redirect URI."""
        explicit_uri = os.getenv("WORKSPACE_FACADE_REDIRECT_URI")
        if explicit_uri:
            return explicit_uri
        return f"{self.base_url}/oauth2callback"

    def has_env_client(self) -> bool:
        """Check if the OAuth client is supplied through the environment."""
        return bool(self.client_id and self.client_secret)

    def is_configured(self) -> bool:
        """Check if OAuth is properly configured."""
        if self.has_env_client():
            return True
        return os.path.exists(self.auth_config_path)

    def get_environment_summary(self) -> Dict[str, Any]:
        """Get a summary of the current OAuth configuration (excluding secrets)."""
        return {
            "base_url": self.base_url,
            "redirect_uri": self.redirect_uri,
            "credentials_dir": self.credentials_dir,
            "auth_config_path": self.auth_config_path,
            "credentials_path": self.credentials_path,
            "client_configured": self.is_configured(),
        }


# Global configuration instance
_oauth_config: Optional[OAuthConfig] = None


def get_oauth_config() -> OAuthConfig:
    """Get the global OAuth configuration instance."""
    global _oauth_config
    if _oauth_config is None:
        _oauth_config = OAuthConfig()
    return _oauth_config


def reload_oauth_config() -> OAuthConfig:
    """Reload the OAuth configuration from environment variables."""
    global _oauth_config
    _oauth_config = OAuthConfig()
    return _oauth_config

