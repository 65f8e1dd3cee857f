"""Unit tests for the Connection builder and auth configuration."""

import json
import os
import shutil
import tempfile
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock, patch

import pytest
from google.oauth2.credentials import Credentials

from workspace_facade.auth import DRIVE_SCOPE, CALENDAR_SCOPE, get_scopes, load_auth_config
from workspace_facade.auth.connection import Connection
from workspace_facade.auth.oauth_config import get_oauth_config, reload_oauth_config
from workspace_facade.utils.errors import (
    AuthenticationError,
    ConnectionNotConfiguredError,
    CredentialBlobError,
)


CLIENT_SECRETS = {
    "installed": {
        "client_id": "test-client-id.apps.googleusercontent.com",
        "client_secret": "test-secret",
        "auth_uri": "https://accounts.google.com/o/oauth2/auth",
        "token_uri": "https://oauth2.googleapis.com/token",
    }
}


class ConnectionTestCase:
    """Temporary credentials directory with a client secrets file."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.env = patch.dict(os.environ, {"WORKSPACE_FACADE_CREDENTIALS_DIR": self.temp_dir})
        self.env.start()
        os.environ.pop("GOOGLE_OAUTH_CLIENT_ID", None)
        os.environ.pop("GOOGLE_OAUTH_CLIENT_SECRET", None)
        os.environ.pop("WORKSPACE_FACADE_AUTH_CONFIG", None)
        os.environ.pop("WORKSPACE_FACADE_TOKEN_FILE", None)
        os.environ.pop("WORKSPACE_FACADE_REDIRECT_URI", None)
        reload_oauth_config()

        self.auth_config_path = os.path.join(self.temp_dir, "client_secret.json")
        with open(self.auth_config_path, "w") as f:
            json.dump(CLIENT_SECRETS, f)

    def teardown_method(self):
        self.env.stop()
        reload_oauth_config()
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)


class TestOAuthConfig(ConnectionTestCase):
    """Tests for environment-driven configuration."""

    def test_paths_default_to_credentials_dir(self):
        config = get_oauth_config()
        assert config.auth_config_path == self.auth_config_path
        assert config.credentials_path == os.path.join(self.temp_dir, "token.json")
        assert config.redirect_uri == "http://localhost:9877/oauth2callback"

    def test_environment_client_takes_precedence(self):
        os.environ["GOOGLE_OAUTH_CLIENT_ID"] = "env-id"
        os.environ["GOOGLE_OAUTH_CLIENT_SECRET"] = "env-secret"
        reload_oauth_config()

        config = load_auth_config(self.auth_config_path)
        assert config["web"]["client_id"] == "env-id"

    def test_explicit_redirect_uri(self):
        os.environ["WORKSPACE_FACADE_REDIRECT_URI"] = "https://example.com/cb"
        assert reload_oauth_config().redirect_uri == "https://example.com/cb"

    def test_invalid_auth_config_file(self):
        with open(self.auth_config_path, "w") as f:
            json.dump({"something": "else"}, f)

        with pytest.raises(ValueError):
            load_auth_config(self.auth_config_path)

    def test_summary_excludes_secrets(self):
        os.environ["GOOGLE_OAUTH_CLIENT_SECRET"] = "env-secret"
        summary = reload_oauth_config().get_environment_summary()
        assert "env-secret" not in json.dumps(summary)


class TestScopes:
    """Tests for scope merging."""

    def test_no_groups_gives_defaults(self):
        assert get_scopes() == [DRIVE_SCOPE]

    def test_merge_drops_duplicates_in_order(self):
        merged = get_scopes([DRIVE_SCOPE], [CALENDAR_SCOPE, DRIVE_SCOPE])
        assert merged == [DRIVE_SCOPE, CALENDAR_SCOPE]


class TestAuthorizationUrl(ConnectionTestCase):
    """Tests for create_connection() and create_auth_url()."""

    def test_url_carries_access_type_and_prompt(self):
        connection = Connection(self.auth_config_path)
        connection.create_connection("Invoices", scopes=[DRIVE_SCOPE])

        url = connection.create_auth_url()

        assert url.startswith("https://accounts.google.com/o/oauth2/auth?")
        assert "client_id=test-client-id.apps.googleusercontent.com" in url
        assert "access_type=offline" in url
        assert "prompt=select_account" in url
        assert "code_challenge" not in url

    def test_online_access_and_no_prompt(self):
        connection = Connection(self.auth_config_path)
        connection.create_connection("Invoices", access_type="online", prompt=None)

        url = connection.create_auth_url()

        assert "access_type=online" in url
        assert "prompt=" not in url

    def test_url_before_setup_fails(self):
        with pytest.raises(ConnectionNotConfiguredError):
            Connection(self.auth_config_path).create_auth_url()

    def test_sign_in_service(self):
        connection = Connection(self.auth_config_path)
        connection.create_oauth2_service(
            "Sign in", "signin-id", "signin-secret", "https://example.com/cb"
        )

        url = connection.create_auth_url()

        assert "client_id=signin-id" in url
        assert "openid" in url
        assert connection.scopes == ["email", "profile", "openid"]

    def test_fetch_access_token_installs_credentials(self):
        creds = Credentials(token="fresh", refresh_token="r1", client_id="c", client_secret="s",
                            token_uri="https://oauth2.googleapis.com/token")
        with patch("workspace_facade.auth.connection.Flow") as mock_flow_cls:
            mock_flow = Mock()
            mock_flow.credentials = creds
            mock_flow_cls.from_client_config.return_value = mock_flow

            connection = Connection(self.auth_config_path)
            connection.create_connection("Invoices")
            blob = connection.fetch_access_token_with_auth_code("4/code")

        mock_flow.fetch_token.assert_called_once_with(code="4/code")
        assert blob["token"] == "fresh"
        assert blob["refresh_token"] == "r1"
        assert connection.credentials is creds

    def test_service_account_config(self):
        with open(self.auth_config_path, "w") as f:
            json.dump({"type": "service_account", "client_email": "bot@example.iam.gserviceaccount.com"}, f)

        with patch("workspace_facade.auth.connection.service_account") as mock_sa:
            connection = Connection(self.auth_config_path)
            connection.create_connection("Bot", subject="user@example.com")

        assert connection.is_service_account
        kwargs = mock_sa.Credentials.from_service_account_info.call_args.kwargs
        assert kwargs["subject"] == "user@example.com"
        assert kwargs["scopes"] == [DRIVE_SCOPE]


class TestAccessToken(ConnectionTestCase):
    """Tests for installing and reading access tokens."""

    def setup_method(self):
        super().setup_method()
        self.connection = Connection(self.auth_config_path)
        self.connection.create_connection("Invoices")

    def test_no_token_counts_as_expired(self):
        assert self.connection.is_access_token_expired()

    def test_future_expiry_is_not_expired(self):
        expiry = (datetime.now(timezone.utc) + timedelta(hours=1)).isoformat()
        self.connection.set_access_token({"token": "t", "expiry": expiry})

        assert not self.connection.is_access_token_expired()
        # client values come from the client secrets file
        assert self.connection.credentials.client_id == "test-client-id.apps.googleusercontent.com"

    def test_past_expiry_is_expired(self):
        self.connection.set_access_token({"token": "t", "expiry": "2020-01-01T00:00:00Z"})
        assert self.connection.is_access_token_expired()

    def test_access_token_alias(self):
        self.connection.set_access_token({"access_token": "legacy"})
        assert self.connection.get_access_token()["token"] == "legacy"

    def test_blob_round_trip(self):
        self.connection.set_access_token(
            {"token": "t", "refresh_token": "r", "expiry": "2030-01-01T00:00:00Z"}
        )
        blob = self.connection.get_access_token()

        other = Connection(self.auth_config_path)
        other.create_connection("Invoices")
        other.set_access_token(blob)
        assert other.credentials.expiry == datetime(2030, 1, 1)
        assert other.get_refresh_token() == "r"

    def test_expires_in_uses_created(self):
        self.connection.set_access_token(
            {"access_token": "t", "expires_in": 3600, "created": 1735689600}
        )
        assert self.connection.credentials.expiry == datetime(2025, 1, 1, 1, 0)

    def test_expires_in_falls_back_to_issued_at(self):
        self.connection.set_access_token(
            {"access_token": "t", "expires_in": 60}, issued_at=1735689600
        )
        assert self.connection.credentials.expiry == datetime(2025, 1, 1, 0, 1)

    def test_space_separated_scope(self):
        self.connection.set_access_token(
            {"access_token": "t", "scope": "https://www.googleapis.com/auth/drive openid"}
        )
        assert self.connection.credentials.scopes == ["https://www.googleapis.com/auth/drive", "openid"]

    @pytest.mark.parametrize("blob", [
        ["not", "a", "dict"],
        {"refresh_token": "r"},
        {"token": "t", "expiry": "yesterday"},
        {"access_token": "t", "expires_in": "soon", "created": 1735689600},
    ])
    def test_bad_blobs(self, blob):
        with pytest.raises(CredentialBlobError):
            self.connection.set_access_token(blob)

    def test_refresh_without_refresh_token(self):
        self.connection.set_access_token({"token": "t", "expiry": "2020-01-01T00:00:00Z"})
        with pytest.raises(AuthenticationError):
            self.connection.refresh_access_token()

    def test_build_service_requires_credentials(self):
        with pytest.raises(AuthenticationError):
            self.connection.build_service("drive", "v3")

    def test_build_service(self):
        self.connection.set_access_token({"token": "t"})
        with patch("workspace_facade.auth.connection.build") as mock_build:
            self.connection.build_service("drive", "v3")

        mock_build.assert_called_once_with(
            "drive", "v3", credentials=self.connection.credentials, cache_discovery=False
        )
