"""Google Calendar access for gcal-cli.

Usage:
    from gcal_cli.calendar import CalendarClient, TimeParser, select_calendar

    client = CalendarClient(transport.build_service("calendar", "v3"))
    calendar_id = select_calendar(client, console_prompt)
    create_event(client, calendar_id, console_prompt, TimeParser())
"""

from __future__ import annotations

from gcal_cli.calendar.client import (
    Attendee,
    Calendar,
    CalendarClient,
    CalendarService,
    Event,
    EventTime,
)
from gcal_cli.calendar.exceptions import (
    CalendarError,
    InvalidFormatError,
    InvalidOperationError,
    InvalidSelectionError,
    NoCalendarsError,
    RemoteError,
    ValidationError,
)
from gcal_cli.calendar.operations import (
    OPERATIONS,
    create_event,
    delete_event,
    get_event,
    list_events,
    update_event,
)
from gcal_cli.calendar.selector import select_calendar
from gcal_cli.calendar.timeparse import TimeParser

__all__ = [
    "CalendarClient",
    "CalendarService",
    "Calendar",
    "Event",
    "EventTime",
    "Attendee",
    "TimeParser",
    "select_calendar",
    "OPERATIONS",
    "list_events",
    "create_event",
    "get_event",
    "update_event",
    "delete_event",
    "CalendarError",
    "InvalidFormatError",
    "InvalidOperationError",
    "InvalidSelectionError",
    "NoCalendarsError",
    "RemoteError",
    "ValidationError",
]
