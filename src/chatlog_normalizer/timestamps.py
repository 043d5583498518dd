"""Time-of-day marker parsing for pasted chat transcripts.

Chat clients that export a session as plain text usually prefix each line
with a wall-clock marker such as ``[21:04:17]`` and omit the date. This
module centralises the handling of those markers so that the normalizer and
its tests agree on:

* which prefixes count as a marker (exactly two ASCII digits per field,
  square-bracket delimited, optional whitespace afterwards),
* how a marker becomes a ``timedelta`` offset from midnight, and
* the reference instants used to turn those offsets into sortable
  ``datetime`` values.

Field values are not range-checked. ``[99:61:00]`` is a valid marker whose
time of day simply lies past the end of the calendar day.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import NamedTuple, Optional

TIME_MARKER_PATTERN = re.compile(r"^\[(\d{2}):(\d{2}):(\d{2})\]\s*(.*)", re.ASCII)

# Lines without a marker sort before every timestamped line.
EPOCH = datetime(1970, 1, 1)

# Fixed calendar day that timestamped lines are placed on before any
# inferred day offset is added.
REFERENCE_DAY = datetime(2000, 1, 1)

ONE_DAY = timedelta(days=1)


class TimeMarker(NamedTuple):
    """A parsed ``[HH:MM:SS]`` prefix and the text that follows it."""

    hours: int
    minutes: int
    seconds: int
    content: str

    @property
    def time_of_day(self) -> timedelta:
        """Offset from midnight described by the marker fields."""
        return timedelta(hours=self.hours, minutes=self.minutes, seconds=self.seconds)


def parse_time_marker(line: str) -> Optional[TimeMarker]:
    """Return the leading time marker of ``line`` or ``None``.

    Parameters
    ----------
    line:
        A single transcript line. Callers normally pass the trimmed line;
        leading whitespace defeats the anchored match.

    Returns
    -------
    Optional[TimeMarker]
        Marker fields as integers plus the remainder of the line, or
        ``None`` when the line does not start with a well-formed marker.
    """

    match = TIME_MARKER_PATTERN.match(line)
    if match is None:
        return None
    hours, minutes, seconds, content = match.groups()
    return TimeMarker(int(hours), int(minutes), int(seconds), content)


def resolve_timestamp(
    time_of_day: Optional[timedelta], day_offset: int = 0
) -> datetime:
    """Place a time of day on the reference calendar.

    ``None`` resolves to :data:`EPOCH`. Otherwise the result is
    ``REFERENCE_DAY + time_of_day + day_offset`` days.
    """

    if time_of_day is None:
        return EPOCH
    return REFERENCE_DAY + time_of_day + day_offset * ONE_DAY


__all__ = [
    "EPOCH",
    "ONE_DAY",
    "REFERENCE_DAY",
    "TIME_MARKER_PATTERN",
    "TimeMarker",
    "parse_time_marker",
    "resolve_timestamp",
]
