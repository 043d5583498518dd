"""CLI entry point for normalizing a single chat log.

Reads a transcript from a file or stdin, keeps the lines that mention the
filter term, drops repeated messages and prints the rest in chronological
order.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .entries import NormalizationSummary
from .normalizer import normalize_with_summary
from .textloaders import (
    SUPPORTED_EXTENSIONS,
    LoadError,
    load_chatlog_text,
    normalize_newlines,
)

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = "chatlog_normalizer"


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for ``normalize_chatlog``."""
    parser = argparse.ArgumentParser(
        prog="normalize_chatlog",
        description=(
            "Keep the chat log lines that mention a name or keyword, drop "
            "repeated messages, and print them in chronological order."
        ),
    )
    parser.add_argument(
        "--filter",
        "-f",
        dest="filter_term",
        required=True,
        help="Name or keyword a line must contain (case-insensitive).",
    )
    parser.add_argument(
        "--input",
        "-i",
        default="-",
        help=(
            "Chat log file to read; '-' reads stdin (default). Recognised "
            f"extensions: {', '.join(sorted(SUPPORTED_EXTENSIONS))}."
        ),
    )
    parser.add_argument(
        "--output",
        "-o",
        help="Write the normalized log here instead of stdout.",
    )
    parser.add_argument(
        "--regex",
        action="store_true",
        help="Treat the filter as a regular expression instead of literal text.",
    )
    parser.add_argument(
        "--no-day-inference",
        dest="infer_days",
        action="store_false",
        help=(
            "Do not treat a backwards jump in time of day as a new day; "
            "every timestamp is placed on the same day."
        ),
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Print per-stage line counts to stderr.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    parser.add_argument("--log-file", help="Also write a detailed log to this file")
    return parser


def configure_logging(verbose: bool, log_file: Optional[str]) -> None:
    """Attach stderr (and optional file) handlers to the package logger."""
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    pkg_logger.handlers.clear()
    pkg_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    ch = logging.StreamHandler()
    ch.setLevel(logging.INFO if verbose else logging.WARNING)
    ch.setFormatter(logging.Formatter("%(message)s"))
    pkg_logger.addHandler(ch)
    if log_file:
        lf_path = Path(log_file).expanduser()
        lf_path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(lf_path), encoding="utf-8")
        fh.setLevel(logging.DEBUG if verbose else logging.INFO)
        fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
        pkg_logger.addHandler(fh)


def read_chatlog(source: str) -> str:
    """Return the chat log text from ``source`` (a path, or ``-`` for stdin)."""
    if source == "-":
        return normalize_newlines(sys.stdin.read().removeprefix("\ufeff"))
    return load_chatlog_text(Path(source).expanduser())


def write_result(text: str, output: Optional[str]) -> None:
    """Write ``text`` to ``output`` or stdout, newline-terminated when non-empty."""
    payload = text + "\n" if text else ""
    if not output:
        sys.stdout.write(payload)
        return
    out_path = Path(output).expanduser()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8", newline="\n") as fh:
        fh.write(payload)
    logger.info("Wrote %s", out_path)


def print_stats(summary: NormalizationSummary) -> None:
    for key, value in summary.as_dict().items():
        print(f"{key}: {value}", file=sys.stderr)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI and return the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # normalize() keeps every line for an empty term; reject it here.
    if not args.filter_term.strip():
        parser.error("--filter must not be empty")

    configure_logging(args.verbose, args.log_file)

    try:
        chatlog = read_chatlog(args.input)
    except FileNotFoundError as e:
        logger.error("Input not found: %s", e)
        return 1
    except (OSError, LoadError) as e:
        logger.error("Could not read %s: %s", args.input, e)
        return 1

    summary = normalize_with_summary(
        chatlog,
        args.filter_term,
        use_regex=args.regex,
        infer_days=args.infer_days,
    )
    logger.info(
        "Kept %d of %d matching lines (%d duplicates dropped, %d day rollovers)",
        summary.output_lines,
        summary.matched_lines,
        summary.duplicates_dropped,
        summary.rollovers,
    )
    if summary.matched_lines == 0:
        logger.warning("No lines matched %r", args.filter_term)

    try:
        write_result(summary.text, args.output)
    except OSError as e:
        logger.error("Could not write %s: %s", args.output, e)
        return 1
    if args.stats:
        print_stats(summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
