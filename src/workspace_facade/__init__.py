"""Workspace Facade - convenience layer over the Google API client.

This package wraps OAuth2 setup, a token file cache with lazy refresh, and
task-level Drive, Calendar and Apps Script operations. It also ships an MCP
server exposing those operations as tools.
"""
from .auth import Connection, TokenFileStore, TokenStatus, ensure_valid_token
from .client import CalendarFacade, DriveFacade, ScriptFacade
from .models import PostedFile, UploadedLink

__version__ = "0.1.0"
__all__ = [
    "Connection",
    "TokenFileStore",
    "TokenStatus",
    "ensure_valid_token",
    "DriveFacade",
    "CalendarFacade",
    "ScriptFacade",
    "PostedFile",
    "UploadedLink",
]
