"""Calendar operation exceptions."""

from gcal_cli.exceptions import GcalCliError


class CalendarError(GcalCliError):
    """Base exception for calendar operation errors."""

    pass


class InvalidFormatError(CalendarError):
    """Raised when a date-time string does not match the expected pattern."""

    def __init__(self, text: str, expected: str):
        self.text = text
        self.expected = expected
        super().__init__(f"invalid time format {text!r} (use {expected})")


class ValidationError(CalendarError):
    """Raised when operator input is well-formed but not acceptable."""

    pass


class InvalidSelectionError(ValidationError):
    """Raised when a calendar number is outside the listed range."""

    def __init__(self, selection: int, count: int):
        self.selection = selection
        self.count = count
        super().__init__(f"invalid calendar number {selection} (choose 1-{count})")


class NoCalendarsError(CalendarError):
    """Raised when the account has no calendars."""

    def __init__(self):
        super().__init__("no calendars found in your account")


class InvalidOperationError(CalendarError):
    """Raised when the menu choice is not one of the listed operations."""

    def __init__(self, choice: str):
        self.choice = choice
        super().__init__(f"Invalid operation: {choice}")


class RemoteError(CalendarError):
    """Raised when the Calendar API returns an error."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
