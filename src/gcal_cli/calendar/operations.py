"""The five event operations offered by the session menu.

Each operation reads its input one prompt at a time and stops at the first
invalid field, before anything is sent to the Calendar API.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from gcal_cli.calendar.client import CalendarService, Event, EventTime
from gcal_cli.calendar.exceptions import ValidationError
from gcal_cli.calendar.timeparse import TimeParser
from gcal_cli.prompt import Prompt

logger = logging.getLogger(__name__)

MAX_LISTED_EVENTS = 10


def _check_order(parser: TimeParser, start: str, end: str) -> None:
    if not start or not end:
        return
    if parser.to_instant(end) < parser.to_instant(start):
        raise ValidationError("end time cannot be before start time")


def list_events(
    service: CalendarService,
    calendar_id: str,
    prompt: Prompt,
    parser: TimeParser,
    now: datetime | None = None,
) -> list[Event]:
    """Print up to ten upcoming single-occurrence events."""
    now = now or datetime.now(timezone.utc)
    events = service.list_events(
        calendar_id,
        time_min=now.isoformat(),
        max_results=MAX_LISTED_EVENTS,
        order_by="startTime",
        single_events=True,
    )

    if not events:
        print("No upcoming events found.")
        return events

    print("\nUpcoming events:")
    for i, event in enumerate(events, start=1):
        print(f"{i}) {event.summary} ({event.id})")
        print(f"   When: {event.start.display} to {event.end.display}")
    print()
    return events


def create_event(
    service: CalendarService, calendar_id: str, prompt: Prompt, parser: TimeParser
) -> Event:
    """Prompt for a new event and insert it.

    Raises:
        InvalidFormatError: If a start or end time is malformed.
        ValidationError: If the end is before the start.
    """
    title = prompt("Title: ")
    description = prompt("Description: ")
    start = parser.parse(prompt(f"Start ({parser.pattern}): "))
    end = parser.parse(prompt(f"End   ({parser.pattern}): "))
    _check_order(parser, start, end)

    body = {
        "summary": title,
        "description": description,
        "start": {"dateTime": start, "timeZone": parser.time_zone},
        "end": {"dateTime": end, "timeZone": parser.time_zone},
    }
    created = service.insert_event(calendar_id, body)
    logger.info(f"Created event {created.id} in {calendar_id}")
    print(f"Event created successfully! ID: {created.id}")
    return created


def get_event(
    service: CalendarService, calendar_id: str, prompt: Prompt, parser: TimeParser
) -> Event:
    """Fetch one event by id and print its details."""
    event = service.get_event(calendar_id, prompt("Event ID: "))

    print("\nEvent Details:")
    print(f"Title: {event.summary}")
    print(f"Description: {event.description}")
    print(f"Start: {event.start.display}")
    print(f"End: {event.end.display}")
    print(f"Status: {event.status}")
    if event.attendees:
        print("Attendees:")
        for attendee in event.attendees:
            print(f" - {attendee.email} ({attendee.response_status})")
    return event


def _prompt_bound(prompt: Prompt, parser: TimeParser, name: str, current: EventTime) -> EventTime:
    """Ask for a new bound; blank keeps the current one."""
    text = prompt(f"{name} ({parser.pattern}, current: {current.display}): ")
    if not text:
        return current
    return EventTime(date_time=parser.parse(text), time_zone=parser.time_zone)


def update_event(
    service: CalendarService, calendar_id: str, prompt: Prompt, parser: TimeParser
) -> Event:
    """Fetch an event, apply the operator's changes and submit its full state.

    Blank answers keep the current value. Times are only asked for when the
    operator opts in.

    Raises:
        RemoteError: If the event does not exist or the update is rejected.
        InvalidFormatError: If a new start or end time is malformed.
        ValidationError: If the merged end is before the merged start.
    """
    event_id = prompt("Event ID: ")
    event = service.get_event(calendar_id, event_id)

    print(f"Current title: {event.summary}")
    title = prompt("New title (leave empty to keep current): ")
    if title:
        event.summary = title

    print(f"Current description: {event.description}")
    description = prompt("New description (leave empty to keep current): ")
    if description:
        event.description = description

    if prompt("Update time? (y/n): ").lower() == "y":
        start = _prompt_bound(prompt, parser, "Start", event.start)
        end = _prompt_bound(prompt, parser, "End", event.end)
        _check_order(parser, start.display, end.display)
        event.start, event.end = start, end

    updated = service.update_event(calendar_id, event_id, event.to_body())
    logger.info(f"Updated event {updated.id} in {calendar_id}")
    print(f"Event updated successfully! ID: {updated.id}")
    return updated


def delete_event(
    service: CalendarService, calendar_id: str, prompt: Prompt, parser: TimeParser
) -> bool:
    """Delete an event after explicit confirmation.

    Returns:
        True if the event was deleted, False if the operator declined.
    """
    event_id = prompt("Event ID to delete: ")
    confirm = prompt(f"Are you sure you want to delete event {event_id}? (y/n): ")

    if confirm.lower() != "y":
        print("Deletion cancelled.")
        return False

    service.delete_event(calendar_id, event_id)
    logger.info(f"Deleted event {event_id} from {calendar_id}")
    print("Event deleted successfully.")
    return True


Operation = Callable[[CalendarService, str, Prompt, TimeParser], object]

# Menu number -> (label, operation)
OPERATIONS: dict[str, tuple[str, Operation]] = {
    "1": ("List upcoming events", list_events),
    "2": ("Create new event", create_event),
    "3": ("Get event details", get_event),
    "4": ("Update event", update_event),
    "5": ("Delete event", delete_event),
}
