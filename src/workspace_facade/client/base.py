"""Base facade holding a reference to the shared connection."""
from typing import Any

from ..auth.connection import Connection


class FacadeBase:
    """Base class for the resource facades.

    The connection is shared and owned by the caller; each call builds a
    fresh service client from it.
    """

    SERVICE_NAME = ""
    SERVICE_VERSION = ""

    def __init__(self, connection: Connection) -> None:
        self.connection = connection

    def _service(self) -> Any:
        """Build a service client for this facade's API."""
        return self.connection.build_service(self.SERVICE_NAME, self.SERVICE_VERSION)
