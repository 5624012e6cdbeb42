"""Shared fixtures: an in-memory calendar backend and OAuth client files."""

import copy
import json
import uuid

import pytest

from gcal_cli.calendar.client import CalendarService, parse_calendar, parse_event
from gcal_cli.calendar.exceptions import RemoteError
from gcal_cli.calendar.timeparse import TimeParser


class FakeCalendarService(CalendarService):
    """CalendarService backed by dicts, recording every call."""

    def __init__(self, calendars=None, events=None):
        self.calendars = calendars if calendars is not None else []
        self.events = {e["id"]: copy.deepcopy(e) for e in (events or [])}
        self.calls = []

    def list_calendars(self):
        self.calls.append(("list_calendars",))
        return [parse_calendar(c) for c in self.calendars]

    def list_events(
        self, calendar_id, time_min, max_results=10, order_by="startTime", single_events=True
    ):
        self.calls.append(("list_events", calendar_id, time_min, max_results, order_by))
        items = sorted(self.events.values(), key=lambda e: e["start"].get("dateTime", ""))
        return [parse_event(copy.deepcopy(e)) for e in items[:max_results]]

    def get_event(self, calendar_id, event_id):
        self.calls.append(("get_event", calendar_id, event_id))
        if event_id not in self.events:
            raise RemoteError("unable to retrieve event: <HttpError 404 \"Not Found\">", 404)
        return parse_event(copy.deepcopy(self.events[event_id]))

    def insert_event(self, calendar_id, body):
        self.calls.append(("insert_event", calendar_id, copy.deepcopy(body)))
        event = dict(copy.deepcopy(body), id=uuid.uuid4().hex[:12], status="confirmed")
        self.events[event["id"]] = event
        return parse_event(copy.deepcopy(event))

    def update_event(self, calendar_id, event_id, body):
        self.calls.append(("update_event", calendar_id, event_id, copy.deepcopy(body)))
        if event_id not in self.events:
            raise RemoteError("unable to update event: <HttpError 404 \"Not Found\">", 404)
        self.events[event_id] = dict(copy.deepcopy(body), id=event_id)
        return parse_event(copy.deepcopy(self.events[event_id]))

    def delete_event(self, calendar_id, event_id):
        self.calls.append(("delete_event", calendar_id, event_id))
        if event_id not in self.events:
            raise RemoteError("unable to delete event: <HttpError 404 \"Not Found\">", 404)
        del self.events[event_id]

    def called(self, name):
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def parser():
    """Time parser with the default format and Asia/Kolkata zone."""
    return TimeParser()


@pytest.fixture
def calendars():
    return [
        {"id": "primary@example.com", "summary": "Personal"},
        {"id": "team_abc@group.calendar.google.com", "summary": "Team"},
        {"id": "holidays@group.v.calendar.google.com", "summary": "Holidays"},
    ]


@pytest.fixture
def meeting():
    """A timed event with attendees."""
    return {
        "id": "evt123",
        "summary": "Planning",
        "description": "Quarterly planning",
        "status": "confirmed",
        "location": "Room 4",
        "start": {"dateTime": "2024-03-15T09:30:00+05:30", "timeZone": "Asia/Kolkata"},
        "end": {"dateTime": "2024-03-15T10:30:00+05:30", "timeZone": "Asia/Kolkata"},
        "attendees": [
            {"email": "ana@example.com", "responseStatus": "accepted"},
            {"email": "raj@example.com", "responseStatus": "tentative"},
        ],
    }


@pytest.fixture
def fake_service(calendars, meeting):
    return FakeCalendarService(calendars=calendars, events=[meeting])


@pytest.fixture
def mock_credentials(tmp_path):
    """Create a mock OAuth client credentials file."""
    creds = {
        "installed": {
            "client_id": "test-client-id.apps.googleusercontent.com",
            "client_secret": "test-client-secret",
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "redirect_uris": ["http://localhost"],
        }
    }
    creds_path = tmp_path / "credentials.json"
    with open(creds_path, "w") as f:
        json.dump(creds, f)
    return creds_path


@pytest.fixture
def make_service():
    """Factory for FakeCalendarService instances."""
    return FakeCalendarService
