"""
Shared configuration for the Workspace facade.

This module centralizes configuration values to avoid hardcoded values
scattered throughout the codebase. Values are read from the environment,
after loading a local .env file if one exists.
"""

import logging
import os
import sys

from dotenv import load_dotenv

from ..utils.constants import DEFAULT_TIME_ZONE

load_dotenv()

# Application name reported when connections are created
APPLICATION_NAME = os.getenv("WORKSPACE_FACADE_APP_NAME", "Workspace Facade")

# Time zone attached to calendar events
CALENDAR_TIME_ZONE = os.getenv("WORKSPACE_FACADE_TIMEZONE", DEFAULT_TIME_ZONE)

LOG_LEVEL = os.getenv("WORKSPACE_FACADE_LOG_LEVEL", "INFO")


def configure_logging(level: str = LOG_LEVEL) -> None:
    """
    Send log records to stderr.

    stdout is reserved for the MCP stdio transport, so the handler is
    attached to stderr explicitly.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
