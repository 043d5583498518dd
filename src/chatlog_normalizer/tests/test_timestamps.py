"""
Tests for time marker parsing and the line filters.
"""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from chatlog_normalizer.filters import build_line_matcher
from chatlog_normalizer.timestamps import (
    EPOCH,
    REFERENCE_DAY,
    TimeMarker,
    parse_time_marker,
    resolve_timestamp,
)


def test_parse_time_marker_extracts_fields_and_content() -> None:
    """A well-formed marker yields integer fields and the trailing text."""

    marker = parse_time_marker("[21:04:17]  Alice: hello [there]")
    assert marker == TimeMarker(21, 4, 17, "Alice: hello [there]")
    assert marker.time_of_day == timedelta(hours=21, minutes=4, seconds=17)


def test_parse_time_marker_allows_missing_space_and_empty_content() -> None:
    """Whitespace after the marker is optional and content may be empty."""

    assert parse_time_marker("[01:02:03]Bob") == TimeMarker(1, 2, 3, "Bob")
    assert parse_time_marker("[01:02:03]") == TimeMarker(1, 2, 3, "")


@pytest.mark.parametrize(
    "line",
    [
        "Bob: [10:00:00] hi",
        "[1:00:00] Bob",
        "[10:00] Bob",
        "(10:00:00) Bob",
        "[10:00:000] Bob",
        " [10:00:00] Bob",
        "[\uff11\uff10:00:00] Bob",
    ],
)
def test_parse_time_marker_rejects_non_conforming_prefixes(line: str) -> None:
    """Only a leading bracketed HH:MM:SS with ASCII digits is a marker."""

    assert parse_time_marker(line) is None


def test_out_of_range_marker_is_not_validated() -> None:
    """Hour 99 and minute 61 are accepted and overflow into larger offsets."""

    marker = parse_time_marker("[99:61:00] Bob")
    assert marker is not None
    assert marker.time_of_day == timedelta(hours=100, minutes=1)


def test_resolve_timestamp_places_offsets_on_reference_day() -> None:
    """resolve_timestamp adds the time of day and whole days to the reference."""

    assert REFERENCE_DAY == datetime(2000, 1, 1)
    assert resolve_timestamp(timedelta(hours=6)) == datetime(2000, 1, 1, 6)
    assert resolve_timestamp(timedelta(hours=6), 2) == datetime(2000, 1, 3, 6)


def test_resolve_timestamp_without_time_is_epoch() -> None:
    """Missing time of day resolves to the epoch regardless of offset."""

    assert resolve_timestamp(None) == EPOCH
    assert resolve_timestamp(None, 5) == EPOCH
    assert EPOCH < resolve_timestamp(timedelta(0))


def test_literal_matcher_ignores_case_and_metacharacters() -> None:
    """The default matcher is a case-insensitive substring test."""

    matches = build_line_matcher("Bob (mod)")
    assert matches("[10:00:00] BOB (MOD): hi")
    assert not matches("[10:00:00] Bob mod: hi")


def test_regex_matcher_uses_pattern_semantics() -> None:
    """With use_regex the term is searched as a case-insensitive pattern."""

    matches = build_line_matcher(r"^\[\d\d:\d\d:\d\d\] (bob|carol):", use_regex=True)
    assert matches("[10:00:00] Carol: hi")
    assert not matches("[10:00:00] Alice: bob: hi")


def test_empty_term_matches_everything() -> None:
    """An empty filter term accepts any line in both modes."""

    assert build_line_matcher("")("anything")
    assert build_line_matcher("", use_regex=True)("anything")
