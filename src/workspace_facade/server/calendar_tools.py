"""Calendar MCP tools."""
from typing import Optional

from googleapiclient.errors import HttpError

from .main import mcp, require_token
from ..client import CalendarFacade
from ..utils.errors import handle_http_error, format_error, WorkspaceFacadeError


@mcp.tool()
def add_calendar_event(
    subject: str,
    start: str,
    end: str,
    calendar_id: str = "primary",
    description: str = "",
    location: Optional[str] = None,
) -> str:
    """
    Add an event to a Google Calendar.
    Args:
        subject: Event title.
        start: Start as ISO date-time, e.g. '2025-03-01T14:00'.
        end: End as ISO date-time.
        calendar_id: Calendar ID or address (default: 'primary').
        description: Event body text.
        location: Optional location name.
    """
    try:
        event = CalendarFacade(require_token()).add_event(
            subject, description, start, end, calendar_id, location
        )
        return f"Event created: {event.get('htmlLink', event.get('id'))}"
    except HttpError as e:
        return format_error("Add event", handle_http_error(e))
    except WorkspaceFacadeError as e:
        return format_error("Add event", e)
    except ValueError as e:
        return f"Add event failed: Invalid date ({e})"
    except Exception as e:
        return f"Add event failed: Unexpected error ({type(e).__name__}: {e})"
