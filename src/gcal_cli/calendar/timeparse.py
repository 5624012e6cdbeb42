"""Parsing of operator-entered date-times.

Input is a civil date-time in a fixed pattern (``YYYY-MM-DD HH:MM`` by
default), interpreted in a configured IANA zone. Output is the RFC 3339
timestamp the Calendar API expects, carrying that zone's UTC offset.
"""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from gcal_cli.calendar.exceptions import InvalidFormatError
from gcal_cli.config import DEFAULT_TIME_FORMAT, DEFAULT_TIME_ZONE

# strftime directives shown to the operator in prompts and errors
_DIRECTIVE_LABELS = {
    "%Y": "YYYY",
    "%m": "MM",
    "%d": "DD",
    "%H": "HH",
    "%M": "MM",
    "%S": "SS",
}


class TimeParser:
    """Converts civil date-time text to wire timestamps.

    Example:
        >>> parser = TimeParser(time_zone="Asia/Kolkata")
        >>> parser.parse("2024-03-15 09:30")
        '2024-03-15T09:30:00+05:30'
    """

    def __init__(self, time_format: str = DEFAULT_TIME_FORMAT, time_zone: str = DEFAULT_TIME_ZONE):
        self.time_format = time_format
        self.time_zone = time_zone
        self._tz = ZoneInfo(time_zone)

    @property
    def pattern(self) -> str:
        """Human-readable form of the time format, e.g. ``YYYY-MM-DD HH:MM``."""
        label = self.time_format
        for directive, text in _DIRECTIVE_LABELS.items():
            label = label.replace(directive, text)
        return label

    def parse(self, text: str) -> str:
        """Parse civil date-time text into an RFC 3339 timestamp.

        Raises:
            InvalidFormatError: If the text is not exactly in the configured format.
        """
        try:
            civil = datetime.strptime(text, self.time_format)
        except ValueError as e:
            raise InvalidFormatError(text, self.pattern) from e

        # strptime tolerates missing zero padding; require the canonical rendering
        if civil.strftime(self.time_format) != text:
            raise InvalidFormatError(text, self.pattern)

        return civil.replace(tzinfo=self._tz).isoformat()

    def to_instant(self, wire: str) -> datetime:
        """Parse a wire timestamp (or all-day date) back to an aware datetime.

        All-day dates resolve to midnight in the configured zone.
        """
        value = datetime.fromisoformat(wire.replace("Z", "+00:00"))
        if value.tzinfo is None:
            value = value.replace(tzinfo=self._tz)
        return value
