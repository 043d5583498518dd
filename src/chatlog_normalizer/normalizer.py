"""Filter, deduplicate and chronologically order a pasted chat log.

The pipeline runs in fixed stages over one input string:

1. split the text into trimmed, non-empty lines;
2. keep lines that contain the filter term;
3. parse an optional ``[HH:MM:SS]`` marker off each line;
4. infer day offsets from backwards jumps in time of day;
5. keep one line per message content, preferring the earliest;
6. sort the survivors by resolved timestamp (stable);
7. join the original lines back together.

Nothing here raises for unusual input. Lines without a marker sort first and
break day-rollover continuity; a malformed regex filter degrades to a literal
match (see :mod:`chatlog_normalizer.filters`).
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Sequence, Tuple

from .entries import NormalizationSummary, ParsedEntry, ResolvedEntry, RolloverState
from .filters import build_line_matcher
from .timestamps import parse_time_marker, resolve_timestamp

logger = logging.getLogger(__name__)

NumberedLine = Tuple[int, str]

# Unicode whitespace plus U+FEFF, which pasted text often carries at the start.
_EDGE_PATTERN = re.compile(r"^[\s\ufeff]+|[\s\ufeff]+$")


def trim(text: str) -> str:
    """Strip whitespace and byte order marks from both ends of ``text``."""

    return _EDGE_PATTERN.sub("", text)


def split_lines(chatlog: str) -> List[NumberedLine]:
    """Return ``(original_index, trimmed_line)`` for every non-blank line."""

    numbered: List[NumberedLine] = []
    for index, raw in enumerate(chatlog.split("\n")):
        trimmed = trim(raw)
        if trimmed:
            numbered.append((index, trimmed))
    return numbered


def parse_entry(index: int, line: str) -> ParsedEntry:
    """Split a trimmed line into its time of day and deduplication key."""

    marker = parse_time_marker(line)
    if marker is None:
        return ParsedEntry(
            full_line=line, dedup_key=line, time_of_day=None, original_index=index
        )
    return ParsedEntry(
        full_line=line,
        dedup_key=trim(marker.content),
        time_of_day=marker.time_of_day,
        original_index=index,
    )


def advance_rollover(
    state: RolloverState, entry: ParsedEntry
) -> Tuple[RolloverState, ResolvedEntry]:
    """One step of day-offset inference.

    A time of day strictly earlier than the previous one is taken to mean the
    log crossed midnight. A line without a marker resolves to the epoch and
    resets the state, so the next timestamped line starts a fresh day count.
    """

    if entry.time_of_day is None:
        return RolloverState(), ResolvedEntry(entry, resolve_timestamp(None))

    day_offset = state.day_offset
    previous = state.last_time_of_day
    if previous is not None and entry.time_of_day < previous:
        day_offset += 1
    resolved = ResolvedEntry(
        entry, resolve_timestamp(entry.time_of_day, day_offset), day_offset
    )
    return RolloverState(entry.time_of_day, day_offset), resolved


def infer_day_offsets(entries: Iterable[ParsedEntry]) -> List[ResolvedEntry]:
    """Fold :func:`advance_rollover` over ``entries`` in input order."""

    state = RolloverState()
    resolved: List[ResolvedEntry] = []
    for entry in entries:
        state, placed = advance_rollover(state, entry)
        resolved.append(placed)
    return resolved


def resolve_without_rollover(entries: Iterable[ParsedEntry]) -> List[ResolvedEntry]:
    """Place every timestamped entry on the reference day, ignoring order."""

    return [
        ResolvedEntry(entry, resolve_timestamp(entry.time_of_day)) for entry in entries
    ]


def deduplicate(entries: Iterable[ResolvedEntry]) -> Dict[str, ResolvedEntry]:
    """Keep the earliest entry for each deduplication key.

    The returned dict is ordered by the first appearance of each key. A later
    entry that replaces an earlier one takes over that slot rather than
    moving to the end; on equal timestamps the first-seen entry stays.
    """

    retained: Dict[str, ResolvedEntry] = {}
    for entry in entries:
        current = retained.get(entry.dedup_key)
        if current is None or entry.timestamp < current.timestamp:
            retained[entry.dedup_key] = entry
    return retained


def order_chronologically(entries: Iterable[ResolvedEntry]) -> List[ResolvedEntry]:
    """Sort by resolved timestamp; ties keep their incoming order."""

    return sorted(entries, key=lambda item: item.timestamp)


def render(entries: Sequence[ResolvedEntry]) -> str:
    return "\n".join(entry.full_line for entry in entries)


def _count_rollovers(resolved: Sequence[ResolvedEntry]) -> int:
    pairs = zip(resolved, resolved[1:])
    return sum(1 for prev, cur in pairs if cur.day_offset > prev.day_offset)


def normalize_with_summary(
    chatlog: str,
    filter_term: str,
    *,
    use_regex: bool = False,
    infer_days: bool = True,
) -> NormalizationSummary:
    """Run the full pipeline and report what each stage did.

    Parameters
    ----------
    chatlog:
        Raw transcript text, lines separated by ``"\\n"``.
    filter_term:
        Case-insensitive term a line must contain to be kept.
    use_regex:
        Interpret ``filter_term`` as a regular expression.
    infer_days:
        Infer midnight crossings from backwards jumps in time of day. When
        False every timestamped line is placed on the same day.

    Returns
    -------
    NormalizationSummary
        Stage counters and the normalized text.
    """

    numbered = split_lines(chatlog)
    raw_count = chatlog.count("\n") + 1 if chatlog else 0
    matches = build_line_matcher(filter_term, use_regex=use_regex)
    parsed = [parse_entry(index, line) for index, line in numbered if matches(line)]

    if infer_days:
        resolved = infer_day_offsets(parsed)
    else:
        resolved = resolve_without_rollover(parsed)

    retained = deduplicate(resolved)
    ordered = order_chronologically(retained.values())

    summary = NormalizationSummary(
        text=render(ordered),
        total_lines=raw_count,
        blank_lines=raw_count - len(numbered),
        matched_lines=len(parsed),
        timestamped_lines=sum(1 for entry in parsed if entry.has_timestamp),
        rollovers=_count_rollovers(resolved),
        duplicates_dropped=len(parsed) - len(retained),
        output_lines=len(ordered),
    )
    logger.debug("Normalized chat log: %s", summary.as_dict())
    return summary


def normalize(
    chatlog: str,
    filter_term: str,
    *,
    use_regex: bool = False,
    infer_days: bool = True,
) -> str:
    """Return the matching lines of ``chatlog``, deduplicated and sorted.

    See :func:`normalize_with_summary` for the parameters.
    """

    return normalize_with_summary(
        chatlog, filter_term, use_regex=use_regex, infer_days=infer_days
    ).text


__all__ = [
    "advance_rollover",
    "deduplicate",
    "infer_day_offsets",
    "normalize",
    "normalize_with_summary",
    "order_chronologically",
    "parse_entry",
    "render",
    "resolve_without_rollover",
    "split_lines",
    "trim",
]
