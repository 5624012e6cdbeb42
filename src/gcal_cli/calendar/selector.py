"""Choosing the calendar a session works on."""

from __future__ import annotations

import logging

from gcal_cli.calendar.client import Calendar, CalendarService
from gcal_cli.calendar.exceptions import InvalidSelectionError, NoCalendarsError
from gcal_cli.prompt import Prompt

logger = logging.getLogger(__name__)


def print_calendars(calendars: list[Calendar]) -> None:
    print("\nAvailable calendars:")
    for i, cal in enumerate(calendars, start=1):
        print(f"{i}) {cal.summary} → {cal.id}")
    print()


def resolve_selection(selection: str, calendars: list[Calendar]) -> str:
    """Map operator input to a calendar id.

    Input made only of digits is a 1-based position and must be in range.
    Anything else (signs, spaces and underscores included) is taken verbatim
    as a calendar id.

    Raises:
        InvalidSelectionError: If a number is outside 1..len(calendars).
    """
    if not selection.isdecimal():
        return selection

    index = int(selection)
    if not 1 <= index <= len(calendars):
        raise InvalidSelectionError(index, len(calendars))
    return calendars[index - 1].id


def select_calendar(service: CalendarService, prompt: Prompt) -> str:
    """List the account's calendars and ask the operator to pick one.

    Raises:
        NoCalendarsError: If the account has no calendars.
        InvalidSelectionError: If a calendar number is out of range.
    """
    calendars = service.list_calendars()
    if not calendars:
        raise NoCalendarsError()

    print_calendars(calendars)
    calendar_id = resolve_selection(prompt("Enter calendar number or ID: "), calendars)
    logger.info(f"Selected calendar {calendar_id}")
    return calendar_id
