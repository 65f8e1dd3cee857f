"""Workspace Facade MCP server."""

from .main import mcp, get_connection, require_token

from . import auth_tools
from . import drive_tools
from . import calendar_tools
from . import script_tools

from ..core.config import configure_logging

__all__ = ["mcp", "get_connection", "require_token", "main"]


def main():
    """Entry point for the Workspace Facade MCP server."""
    configure_logging()
    mcp.run(show_banner=False)
