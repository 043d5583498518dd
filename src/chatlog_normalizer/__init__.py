"""Chat log normalization package metadata and public exports."""

from .entries import NormalizationSummary, ParsedEntry, ResolvedEntry, RolloverState
from .filters import build_line_matcher
from .normalizer import normalize, normalize_with_summary
from .timestamps import EPOCH, REFERENCE_DAY, parse_time_marker
