"""
OAuth Callback Server for the Workspace facade.

In stdio mode, starts a minimal HTTP server for OAuth callbacks. The user
opens the authorization URL returned by ensure_valid_token(); Google
redirects back here, the code is exchanged on the shared connection and the
credential blob is written to the store.
"""

import asyncio
import html
import logging
import socket
import threading
import time
from typing import Optional, Tuple
from urllib.parse import urlparse

import uvicorn
from fastapi import FastAPI
from fastapi.responses import HTMLResponse

from .connection import Connection
from .credential_store import CredentialStore, TokenFileStore

logger = logging.getLogger(__name__)

_PAGE = """
<!DOCTYPE html>
<html>
<head>
    <title>{title}</title>
    <style>
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            display: flex;
            justify-content: center;
            align-items: center;
            min-height: 100vh;
            margin: 0;
            background: {background};
        }}
        .container {{
            background: white;
            padding: 40px;
            border-radius: 12px;
            text-align: center;
            max-width: 400px;
        }}
    </style>
</head>
<body>
    <div class="container">
        <h1>{title}</h1>
        <p>{body}</p>
    </div>
</body>
</html>
"""


def _create_success_html(application_name: str) -> str:
    """Create a success HTML page after OAuth completion."""
    return _PAGE.format(
        title="Authentication Successful!",
        background="#667eea",
        body=(
            f"{html.escape(application_name)} is now authorized. "
            "You can close this window and return to your application."
        ),
    )


def _create_error_html(error_message: str) -> str:
    """Create an error HTML page."""
    return _PAGE.format(
        title="Authentication Failed",
        background="#ee5a5a",
        body=html.escape(error_message),
    )


def create_callback_app(connection: Connection, store: CredentialStore) -> FastAPI:
    """Build the FastAPI app serving /oauth2callback for one connection."""
    app = FastAPI()

    @app.get("/oauth2callback")
    def oauth_callback(
        code: Optional[str] = None, error: Optional[str] = None
    ) -> HTMLResponse:
        """Handle OAuth callback from Google."""
        if error:
            error_message = f"Google returned an error: {error}"
            logger.error(error_message)
            return HTMLResponse(content=_create_error_html(error_message), status_code=400)

        if not code:
            error_message = "No authorization code received from Google"
            logger.error(error_message)
            return HTMLResponse(content=_create_error_html(error_message), status_code=400)

        try:
            blob = connection.fetch_access_token_with_auth_code(code)
            store.save(blob)
        except Exception as e:
            error_message = f"Error processing OAuth callback: {e}"
            logger.error(error_message, exc_info=True)
            return HTMLResponse(content=_create_error_html(error_message), status_code=500)

        logger.info("OAuth callback: credentials stored")
        return HTMLResponse(
            content=_create_success_html(connection.application_name or "The application")
        )

    return app


class MinimalOAuthServer:
    """
    Minimal HTTP server for OAuth callbacks in stdio mode.
    Only starts when needed and runs in a background thread.
    """

    def __init__(
        self,
        connection: Connection,
        store: Optional[CredentialStore] = None,
        port: int = 9877,
        base_uri: str = "http://localhost",
    ) -> None:
        self.port = port
        self.base_uri = base_uri
        self.store = store or TokenFileStore(connection.credentials_path)
        self.app = create_callback_app(connection, self.store)
        self.server: Optional[uvicorn.Server] = None
        self.server_thread: Optional[threading.Thread] = None
        self.is_running = False

    def start(self) -> Tuple[bool, str]:
        """
        Start the minimal OAuth server.

        Returns:
            Tuple of (success: bool, error_message: str)
        """
        if self.is_running:
            return True, ""

        hostname = urlparse(self.base_uri).hostname or "localhost"

        try:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
                s.bind((hostname, self.port))
        except OSError:
            error_msg = f"Port {self.port} is already in use"
            logger.error(error_msg)
            return False, error_msg

        def run_server() -> None:
            """Run the server in a separate thread."""
            try:
                config = uvicorn.Config(
                    self.app,
                    host=hostname,
                    port=self.port,
                    log_level="warning",
                    access_log=False,
                )
                self.server = uvicorn.Server(config)
                asyncio.run(self.server.serve())
            except Exception as e:
                logger.error(f"Minimal OAuth server error: {e}", exc_info=True)
                self.is_running = False

        self.server_thread = threading.Thread(target=run_server, daemon=True)
        self.server_thread.start()

        # Wait for server to start
        deadline = time.time() + 3.0
        while time.time() < deadline:
            with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
                if s.connect_ex((hostname, self.port)) == 0:
                    self.is_running = True
                    logger.info(f"Minimal OAuth server started on {hostname}:{self.port}")
                    return True, ""
            time.sleep(0.1)

        error_msg = f"Failed to start OAuth server on {hostname}:{self.port}"
        logger.error(error_msg)
        return False, error_msg


# Global instance, started on first use
_minimal_oauth_server: Optional[MinimalOAuthServer] = None


def ensure_oauth_callback_available(
    connection: Connection,
    port: int = 9877,
    base_uri: str = "http://localhost",
) -> Tuple[bool, str]:
    """
    Ensure the OAuth callback endpoint is listening.

    Starts the minimal server on first use; later calls reuse it.

    Returns:
        Tuple of (success: bool, error_message: str)
    """
    global _minimal_oauth_server

    if _minimal_oauth_server is None:
        logger.info(f"Creating minimal OAuth server on {base_uri}:{port}")
        _minimal_oauth_server = MinimalOAuthServer(connection, port=port, base_uri=base_uri)

    return _minimal_oauth_server.start()

