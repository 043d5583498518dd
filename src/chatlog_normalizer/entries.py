"""Record types passed between the normalizer pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional


@dataclass(frozen=True)
class ParsedEntry:
    """A trimmed line that survived filtering.

    Attributes
    ----------
    full_line:
        Trimmed original text including any time marker. This is what the
        normalizer renders.
    dedup_key:
        Message content used to detect repeats: the text after the marker
        when one was found, else the whole trimmed line.
    time_of_day:
        Offset from midnight taken from the ``[HH:MM:SS]`` marker, or
        ``None`` when the line has no marker.
    original_index:
        Zero-based position of the line in the raw input.
    """

    full_line: str
    dedup_key: str
    time_of_day: Optional[timedelta]
    original_index: int

    @property
    def has_timestamp(self) -> bool:
        return self.time_of_day is not None


@dataclass(frozen=True)
class ResolvedEntry:
    """A parsed entry placed on an absolute, sortable timeline."""

    entry: ParsedEntry
    timestamp: datetime
    day_offset: int = 0

    @property
    def full_line(self) -> str:
        return self.entry.full_line

    @property
    def dedup_key(self) -> str:
        return self.entry.dedup_key


@dataclass(frozen=True)
class RolloverState:
    """Accumulator threaded through day-offset inference.

    ``last_time_of_day`` is ``None`` at the start of a run and after any line
    without a time marker; ``day_offset`` counts inferred midnights since
    then.
    """

    last_time_of_day: Optional[timedelta] = None
    day_offset: int = 0


@dataclass(frozen=True)
class NormalizationSummary:
    """Counters describing one normalization run, plus its rendered text."""

    text: str
    total_lines: int
    blank_lines: int
    matched_lines: int
    timestamped_lines: int
    rollovers: int
    duplicates_dropped: int
    output_lines: int

    def as_dict(self) -> dict:
        """Return the counters without the rendered text."""

        return {
            "total_lines": self.total_lines,
            "blank_lines": self.blank_lines,
            "matched_lines": self.matched_lines,
            "timestamped_lines": self.timestamped_lines,
            "rollovers": self.rollovers,
            "duplicates_dropped": self.duplicates_dropped,
            "output_lines": self.output_lines,
        }


__all__ = [
    "NormalizationSummary",
    "ParsedEntry",
    "ResolvedEntry",
    "RolloverState",
]
