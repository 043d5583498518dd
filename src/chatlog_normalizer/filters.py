"""Line filters built from a user-supplied filter term.

The term is matched case-insensitively anywhere in a line. By default it is
a literal substring, so names such as ``"A.J. (mod)"`` match only
themselves. Callers that want pattern semantics opt in with
``use_regex=True``; the term is then compiled as-is, without escaping.
"""

from __future__ import annotations

import logging
import re
from typing import Callable

logger = logging.getLogger(__name__)

LineMatcher = Callable[[str], bool]


def _literal_matcher(term: str) -> LineMatcher:
    """Case-insensitive substring containment."""
    needle = term.casefold()

    def matches(line: str) -> bool:
        return needle in line.casefold()

    return matches


def _regex_matcher(pattern: re.Pattern[str]) -> LineMatcher:
    def matches(line: str) -> bool:
        return pattern.search(line) is not None

    return matches


def build_line_matcher(term: str, *, use_regex: bool = False) -> LineMatcher:
    """Return a predicate that tells whether a line matches ``term``.

    Parameters
    ----------
    term:
        Filter term. The empty string matches every line.
    use_regex:
        When True, compile ``term`` as a case-insensitive regular
        expression. A term that fails to compile is logged and treated as a
        literal instead of raising.

    Returns
    -------
    LineMatcher
        Callable taking one line and returning ``True`` when it matches.
    """

    if not use_regex:
        return _literal_matcher(term)
    try:
        pattern = re.compile(term, re.IGNORECASE)
    except re.error as exc:
        logger.warning(
            "Filter %r is not a valid pattern (%s); matching it literally", term, exc
        )
        return _literal_matcher(term)
    return _regex_matcher(pattern)


__all__ = ["LineMatcher", "build_line_matcher"]
