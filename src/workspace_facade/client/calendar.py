"""Google Calendar facade."""
import logging
from datetime import datetime
from typing import Any, Optional, Union
from zoneinfo import ZoneInfo

from ..auth.connection import Connection
from ..core.config import CALENDAR_TIME_ZONE
from ..utils.constants import EVENT_DATETIME_FORMAT
from ..utils.errors import EventRangeError
from .base import FacadeBase

logger = logging.getLogger(__name__)

DateLike = Union[datetime, str]


def _to_datetime(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return value
    value = value.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


class CalendarFacade(FacadeBase):
    """Calendar API v3 operations."""

    SERVICE_NAME = 'calendar'
    SERVICE_VERSION = 'v3'

    def __init__(self, connection: Connection, time_zone: Optional[str] = None) -> None:
        super().__init__(connection)
        self.time_zone = time_zone or CALENDAR_TIME_ZONE

    def add_event(
        self,
        subject: str,
        body_text: str,
        start_date: DateLike,
        end_date: DateLike,
        calendar_id: str,
        location_name: Optional[str] = None,
    ) -> dict[str, Any]:
        """Insert an event in a calendar.

        Start and end are sent as wall-clock times in the facade's time
        zone. Naive values are taken as already in that zone; values with
        a UTC offset are converted to it.

        Args:
            subject: Event title.
            body_text: Event description.
            start_date: datetime or ISO 8601 string.
            end_date: datetime or ISO 8601 string.
            calendar_id: Calendar to insert into ('primary' or an address).
            location_name: Optional location.

        Returns:
            The created event resource.

        Raises:
            ValueError: If a date string cannot be parsed.
            EventRangeError: If the event ends before it starts.
        """
        start = self._local_time(_to_datetime(start_date))
        end = self._local_time(_to_datetime(end_date))
        if end < start:
            raise EventRangeError(f"Event '{subject}' ends before it starts")

        body = {
            'summary': subject,
            'description': body_text,
            'location': location_name,
            'start': {'dateTime': start.strftime(EVENT_DATETIME_FORMAT), 'timeZone': self.time_zone},
            'end': {'dateTime': end.strftime(EVENT_DATETIME_FORMAT), 'timeZone': self.time_zone},
        }

        event = self._service().events().insert(calendarId=calendar_id, body=body).execute()
        logger.info("Created event %s: %s", event.get('id'), subject)
        return event

    def _local_time(self, value: datetime) -> datetime:
        """Naive wall-clock time of value in the facade's time zone."""
        if value.tzinfo is not None:
            value = value.astimezone(ZoneInfo(self.time_zone))
        return value.replace(tzinfo=None)
