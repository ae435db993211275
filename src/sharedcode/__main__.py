"""Command-line entrypoint for sharedcode."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from datetime import datetime

from sharedcode.config import Settings, load_settings
from sharedcode.dates.calendar_ops import date_diff
from sharedcode.dates.formats import DateTimeFormat, format_datetime
from sharedcode.enums.helpers import to_enum
from sharedcode.enums.labels import parse
from sharedcode.logs import configure_logging
from sharedcode.security.hasher import HashType, compute_hash

logger = logging.getLogger(__name__)


def _parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO datetime string."""
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid datetime: {value}") from exc


def _parse_hash_type(value: str) -> HashType:
    """Resolve a ``hashlib`` algorithm label to a ``HashType``."""
    member = parse(HashType, value.strip(), ignore_case=True)
    if member is None:
        raise argparse.ArgumentTypeError(f"unknown hash type: {value}")
    return member


def _parse_date_format(value: str) -> DateTimeFormat:
    """Resolve a ``DateTimeFormat`` member name."""
    try:
        return to_enum(value, DateTimeFormat)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    """Create and return the top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="sharedcode",
        description="sharedcode utility command-line interface.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    subparsers = parser.add_subparsers(dest="command")

    hash_cmd = subparsers.add_parser("hash", help="Print the hex digest of TEXT.")
    hash_cmd.add_argument("text")
    hash_cmd.add_argument("--type", dest="hash_type", type=_parse_hash_type, default=None)

    fmt_cmd = subparsers.add_parser("format-date", help="Format an ISO datetime with a named format.")
    fmt_cmd.add_argument("value", type=_parse_iso_datetime)
    fmt_cmd.add_argument("--format", dest="date_format", type=_parse_date_format, default=None)

    diff_cmd = subparsers.add_parser("date-diff", help="Count date parts between two ISO datetimes.")
    diff_cmd.add_argument("start", type=_parse_iso_datetime)
    diff_cmd.add_argument("end", type=_parse_iso_datetime)
    diff_cmd.add_argument("--part", required=True)

    return parser


def _run(args: argparse.Namespace, settings: Settings) -> str:
    """Execute one parsed subcommand and return its output line."""
    if args.command == "hash":
        return compute_hash(args.text, args.hash_type or settings.hash_type)
    if args.command == "format-date":
        return format_datetime(args.value, args.date_format or settings.date_format)
    return str(date_diff(args.start, args.part, args.end))


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI application."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        settings = load_settings()
    except ValueError as exc:
        parser.error(f"invalid SHAREDCODE_* environment: {exc}")
    configure_logging(settings.log_level)
    logger.debug("running %s", args.command)

    try:
        output = _run(args, settings)
    except ValueError as exc:
        parser.error(str(exc))
    print(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
