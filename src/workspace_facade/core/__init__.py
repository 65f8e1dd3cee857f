"""
Core utilities package for the Workspace facade.

This package provides shared configuration.
"""

from .config import (
    APPLICATION_NAME,
    CALENDAR_TIME_ZONE,
    configure_logging,
)

__all__ = [
    "APPLICATION_NAME",
    "CALENDAR_TIME_ZONE",
    "configure_logging",
]
