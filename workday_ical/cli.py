"""
CLI (Command Line Interface).

    workday-ical convert <source> --term A --start 2024-08-22 --end 2024-10-11
    workday-ical terms <source>

<source> is the URL of a Workday "Registered Classes" .xlsx export, a
downloaded .xlsx file, or a bare worksheet .xml file.

Note:
- Results and errors are printed as plain text; diagnostics go through the logger
- The conversion itself lives in workday_ical.schedule
"""

from __future__ import annotations

import argparse
import sys
from datetime import date
from functools import partial
from pathlib import Path
from typing import Optional

from workday_ical import __version__
from workday_ical.config import Settings, get_settings
from workday_ical.errors import ConversionError
from workday_ical.export_ics import write_calendar
from workday_ical.fetch import Fetcher, load_worksheet
from workday_ical.log import setup_logging
from workday_ical.schedule import courses_from_worksheet, generate_calendar, term_labels


def _iso_date(text: str) -> date:
    """
    argparse type for YYYY-MM-DD dates.
    """
    try:
        return date.fromisoformat(text.strip())
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a YYYY-MM-DD date: {text!r}") from None


def _default_output(label: str) -> Path:
    return Path("_".join(label.split()) + ".ics")


def _cmd_convert(args: argparse.Namespace, settings: Settings, fetcher: Fetcher) -> int:
    """
    Generate the .ics file for one term.
    """
    if args.start > args.end:
        print("Error: --start must not be after --end", file=sys.stderr)
        return 1

    worksheet = fetcher(args.source)
    schedule, text = generate_calendar(
        worksheet,
        args.term,
        args.start,
        args.end,
        settings,
        bound_to_term_end=args.until_term_end,
    )

    out_path = Path(args.output) if args.output else _default_output(schedule.label)
    write_calendar(text, out_path)
    print(f"Exported {len(schedule.courses)} classes for {schedule.label} to: {out_path}")
    return 0


def _cmd_terms(args: argparse.Namespace, settings: Settings, fetcher: Fetcher) -> int:
    """
    List the term labels found in the export.
    """
    courses = courses_from_worksheet(fetcher(args.source), settings)
    labels = term_labels(courses)
    if not labels:
        print("No classes found.")
        return 0

    for label, count in labels:
        print(f"{label} | {count} class{'es' if count != 1 else ''}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(
        prog="workday-ical", description="Convert a Workday registration export to an .ics schedule"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_convert = sub.add_parser("convert", help="Generate the calendar for one term")
    p_convert.add_argument("source", type=str, help="Export URL, .xlsx file or worksheet .xml file")
    p_convert.add_argument("--term", "-t", required=True, help="Term letter (e.g. A)")
    p_convert.add_argument("--start", required=True, type=_iso_date, help="First day of term (YYYY-MM-DD)")
    p_convert.add_argument("--end", required=True, type=_iso_date, help="Last day of term (YYYY-MM-DD)")
    p_convert.add_argument("-o", "--output", type=str, help="Output .ics path (default: <label>.ics)")
    p_convert.add_argument("--timezone", type=str, help="Timezone of the class times (e.g. America/New_York)")
    p_convert.add_argument(
        "--until-term-end",
        action="store_true",
        help="Stop the weekly recurrence at the end of the term instead of repeating forever",
    )

    p_terms = sub.add_parser("terms", help="List the terms found in an export")
    p_terms.add_argument("source", type=str, help="Export URL, .xlsx file or worksheet .xml file")

    return parser


def main(argv: list[str] | None = None, fetcher: Optional[Fetcher] = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except ValueError as e:
        print(f"Error: invalid WORKDAY_ICAL_* configuration: {e}", file=sys.stderr)
        raise SystemExit(1)

    if getattr(args, "timezone", None):
        try:
            settings = Settings.model_validate({**settings.model_dump(), "timezone": args.timezone})
        except ValueError:
            parser.error(f"invalid --timezone: {args.timezone!r}")

    setup_logging(json_output=settings.log_json, log_level="DEBUG" if args.verbose else settings.log_level)

    if fetcher is None:
        fetcher = partial(load_worksheet, settings=settings)

    handlers = {"convert": _cmd_convert, "terms": _cmd_terms}
    handler = handlers.get(args.command)
    if handler is None:
        raise SystemExit(2)

    try:
        raise SystemExit(handler(args, settings, fetcher))
    except (ConversionError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)
