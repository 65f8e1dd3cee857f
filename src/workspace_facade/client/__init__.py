"""Resource facades over the Google API client.

DriveFacade combines the Drive mixins into a single class; the Calendar and
Script facades stand alone. All of them share a Connection by reference.
"""
from .base import FacadeBase
from .files import FilesMixin
from .sharing import SharingMixin
from .calendar import CalendarFacade
from .script import ScriptFacade


class DriveFacade(FacadeBase, FilesMixin, SharingMixin):
    """Drive API v3 operations: upload, copy, delete, export, list, share."""

    SERVICE_NAME = 'drive'
    SERVICE_VERSION = 'v3'


__all__ = ['DriveFacade', 'CalendarFacade', 'ScriptFacade']
