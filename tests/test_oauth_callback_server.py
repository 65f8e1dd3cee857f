"""Unit tests for the OAuth callback app."""

import inspect
from unittest.mock import Mock

from fastapi.testclient import TestClient

from workspace_facade.auth.oauth_callback_server import create_callback_app


class TestOAuthCallback:
    """Tests for GET /oauth2callback."""

    def setup_method(self):
        self.connection = Mock()
        self.connection.application_name = "Invoices"
        self.connection.fetch_access_token_with_auth_code.return_value = {"token": "abc"}
        self.store = Mock()
        self.client = TestClient(create_callback_app(self.connection, self.store))

    def test_code_is_exchanged_and_stored(self):
        response = self.client.get("/oauth2callback", params={"code": "4/xyz"})

        assert response.status_code == 200
        assert "Authentication Successful" in response.text
        self.connection.fetch_access_token_with_auth_code.assert_called_once_with("4/xyz")
        self.store.save.assert_called_once_with({"token": "abc"})

    def test_google_error(self):
        response = self.client.get("/oauth2callback", params={"error": "access_denied"})

        assert response.status_code == 400
        assert "access_denied" in response.text
        self.store.save.assert_not_called()

    def test_missing_code(self):
        response = self.client.get("/oauth2callback")

        assert response.status_code == 400
        self.connection.fetch_access_token_with_auth_code.assert_not_called()

    def test_exchange_failure(self):
        self.connection.fetch_access_token_with_auth_code.side_effect = RuntimeError("bad code <x>")

        response = self.client.get("/oauth2callback", params={"code": "4/xyz"})

        assert response.status_code == 500
        assert "bad code &lt;x&gt;" in response.text
        self.store.save.assert_not_called()

    def test_handler_runs_in_threadpool(self):
        """The code exchange blocks on the network, so the handler must be sync."""
        app = create_callback_app(self.connection, self.store)
        route = next(r for r in app.routes if getattr(r, "path", None) == "/oauth2callback")
        assert not inspect.iscoroutinefunction(route.endpoint)
