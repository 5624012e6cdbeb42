"""Google Calendar API client implementation."""

from __future__ import annotations

import copy
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import httplib2
from google.auth.exceptions import RefreshError, TransportError
from googleapiclient.errors import HttpError

from gcal_cli.calendar.exceptions import RemoteError
from gcal_cli.google.exceptions import AuthError

logger = logging.getLogger(__name__)


@dataclass
class Calendar:
    """Represents a Google Calendar."""

    id: str
    summary: str
    description: str | None = None
    primary: bool = False
    time_zone: str | None = None


@dataclass
class EventTime:
    """Start or end of an event: a timed instant or an all-day date."""

    date_time: str | None = None
    date: str | None = None
    time_zone: str | None = None

    @property
    def display(self) -> str:
        """The date-time, falling back to the all-day date."""
        return self.date_time or self.date or ""

    @property
    def is_all_day(self) -> bool:
        return not self.date_time and bool(self.date)

    def to_body(self) -> dict[str, str]:
        body = {}
        if self.date_time:
            body["dateTime"] = self.date_time
        elif self.date:
            body["date"] = self.date
        if self.time_zone:
            body["timeZone"] = self.time_zone
        return body


@dataclass
class Attendee:
    """An invited attendee and their response."""

    email: str
    response_status: str = "needsAction"


@dataclass
class Event:
    """Represents a Google Calendar event.

    `raw` keeps the full API document so an update re-submits every field,
    including the ones this client does not model.
    """

    id: str
    summary: str = ""
    description: str = ""
    start: EventTime = field(default_factory=EventTime)
    end: EventTime = field(default_factory=EventTime)
    status: str = "confirmed"
    html_link: str | None = None
    attendees: list[Attendee] = field(default_factory=list)
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    def to_body(self) -> dict[str, Any]:
        """Full request body: the original document with modelled fields applied."""
        body = copy.deepcopy(self.raw)
        body["summary"] = self.summary
        body["description"] = self.description
        body["start"] = self.start.to_body()
        body["end"] = self.end.to_body()
        return body


def parse_event(data: dict[str, Any]) -> Event:
    """Parse event from API response."""
    return Event(
        id=data.get("id", ""),
        summary=data.get("summary", ""),
        description=data.get("description", ""),
        start=_parse_event_time(data.get("start", {})),
        end=_parse_event_time(data.get("end", {})),
        status=data.get("status", "confirmed"),
        html_link=data.get("htmlLink"),
        attendees=[
            Attendee(email=a.get("email", ""), response_status=a.get("responseStatus", ""))
            for a in data.get("attendees", [])
        ],
        raw=data,
    )


def _parse_event_time(data: dict[str, Any]) -> EventTime:
    return EventTime(
        date_time=data.get("dateTime"),
        date=data.get("date"),
        time_zone=data.get("timeZone"),
    )


def parse_calendar(data: dict[str, Any]) -> Calendar:
    """Parse calendar from API response."""
    return Calendar(
        id=data["id"],
        summary=data.get("summary", ""),
        description=data.get("description"),
        primary=data.get("primary", False),
        time_zone=data.get("timeZone"),
    )


class CalendarService(ABC):
    """The remote operations gcal-cli needs from a calendar backend."""

    @abstractmethod
    def list_calendars(self) -> list[Calendar]:
        """List calendars visible to the authenticated identity."""

    @abstractmethod
    def list_events(
        self,
        calendar_id: str,
        time_min: str,
        max_results: int = 10,
        order_by: str = "startTime",
        single_events: bool = True,
    ) -> list[Event]:
        """List events starting at or after `time_min` (RFC 3339)."""

    @abstractmethod
    def get_event(self, calendar_id: str, event_id: str) -> Event:
        """Fetch one event; raises RemoteError if it does not exist."""

    @abstractmethod
    def insert_event(self, calendar_id: str, body: dict[str, Any]) -> Event:
        """Create an event and return it with its assigned id."""

    @abstractmethod
    def update_event(self, calendar_id: str, event_id: str, body: dict[str, Any]) -> Event:
        """Replace an event's full state."""

    @abstractmethod
    def delete_event(self, calendar_id: str, event_id: str) -> None:
        """Delete an event."""


class CalendarClient(CalendarService):
    """Google Calendar API client.

    Wraps a `googleapiclient` Calendar v3 service and translates API
    failures into `RemoteError`.

    Usage:
        transport = GoogleOAuth(app).obtain()
        client = CalendarClient(transport.build_service("calendar", "v3"))

        calendars = client.list_calendars()
        events = client.list_events(calendars[0].id, time_min="2026-01-25T00:00:00Z")
    """

    def __init__(self, service: Any) -> None:
        """Initialize Calendar client.

        Args:
            service: Calendar v3 resource from googleapiclient.discovery.build.
        """
        self._service = service

    def _execute(self, request: Any, action: str) -> Any:
        try:
            return request.execute()
        except HttpError as e:
            status = getattr(e, "status_code", None) or getattr(e.resp, "status", None)
            raise RemoteError(f"unable to {action}: {e}", status_code=status) from e
        except RefreshError as e:
            # revoked or expired refresh token; deleting token.json forces a new grant
            raise AuthError(f"unable to refresh oauth token: {e}") from e
        except (TransportError, httplib2.HttpLib2Error, OSError) as e:
            raise RemoteError(f"unable to {action}: {e}") from e

    # =========================================================================
    # Calendars
    # =========================================================================

    def list_calendars(self) -> list[Calendar]:
        results = self._execute(self._service.calendarList().list(), "retrieve calendars")
        items = results.get("items", [])
        logger.debug(f"Retrieved {len(items)} calendars")
        return [parse_calendar(item) for item in items]

    # =========================================================================
    # Events
    # =========================================================================

    def list_events(
        self,
        calendar_id: str,
        time_min: str,
        max_results: int = 10,
        order_by: str = "startTime",
        single_events: bool = True,
    ) -> list[Event]:
        request = self._service.events().list(
            calendarId=calendar_id,
            maxResults=max_results,
            orderBy=order_by,
            singleEvents=single_events,
            timeMin=time_min,
        )
        results = self._execute(request, "retrieve events")
        items = results.get("items", [])
        logger.debug(f"Retrieved {len(items)} events from {calendar_id}")
        return [parse_event(item) for item in items]

    def get_event(self, calendar_id: str, event_id: str) -> Event:
        request = self._service.events().get(calendarId=calendar_id, eventId=event_id)
        return parse_event(self._execute(request, "retrieve event"))

    def insert_event(self, calendar_id: str, body: dict[str, Any]) -> Event:
        request = self._service.events().insert(calendarId=calendar_id, body=body)
        return parse_event(self._execute(request, "create event"))

    def update_event(self, calendar_id: str, event_id: str, body: dict[str, Any]) -> Event:
        request = self._service.events().update(
            calendarId=calendar_id, eventId=event_id, body=body
        )
        return parse_event(self._execute(request, "update event"))

    def delete_event(self, calendar_id: str, event_id: str) -> None:
        request = self._service.events().delete(calendarId=calendar_id, eventId=event_id)
        self._execute(request, "delete event")
        logger.debug(f"Deleted event {event_id} from {calendar_id}")
