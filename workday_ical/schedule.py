"""
Schedule assembly: pick one term's courses and render them as a calendar.

The whole conversion is a pure function of its inputs:

    Worksheet + term letter + term dates + settings -> calendar text
"""

from __future__ import annotations

import re
from collections import Counter
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from workday_ical.config import Settings
from workday_ical.errors import MeetingPatternError, NoMatchingCoursesError
from workday_ical.export_ics import render_calendar
from workday_ical.fetch import Worksheet
from workday_ical.log import get_logger
from workday_ical.meeting import parse_meeting_pattern
from workday_ical.model import CalendarEvent, CourseRecord, Schedule, course_records_from_rows
from workday_ical.recurrence import build_event
from workday_ical.sheet import extract_rows

logger = get_logger(__name__)


def _term_token(letter: str) -> re.Pattern:
    # "A TERM" as a whole token: "AA Term" and "A Terms" do not count
    return re.compile(rf"(?<![0-9A-Z]){re.escape(letter)} TERM(?![0-9A-Z])", re.IGNORECASE)


def normalize_term_letter(letter: str) -> str:
    """
    Validate and upper-case a term letter ("a" -> "A").
    """
    cleaned = (letter or "").strip().upper()
    if len(cleaned) != 1 or not cleaned.isalnum():
        raise ValueError(f"Term letter must be a single letter or digit, got {letter!r}")
    return cleaned


def matches_term(label: str, letter: str) -> bool:
    """
    True if the term label contains "<letter> Term" as a whole token.
    """
    return _term_token(normalize_term_letter(letter)).search(label or "") is not None


def term_labels(courses: Iterable[CourseRecord]) -> List[Tuple[str, int]]:
    """
    Distinct term labels with how many courses carry them, in first-seen order.
    """
    counts = Counter(c.term for c in courses)
    return list(counts.items())


def assemble_schedule(
    term_letter: str,
    start_date: date,
    end_date: date,
    courses: Sequence[CourseRecord],
    institution: str = "WPI",
) -> Schedule:
    """
    Build the Schedule for one term.

    Raises NoMatchingCoursesError if no course belongs to the term.
    """
    letter = normalize_term_letter(term_letter)
    token = _term_token(letter)
    selected = tuple(c for c in courses if token.search(c.term))

    logger.info("courses_filtered", term=letter, total=len(courses), selected=len(selected))
    if not selected:
        raise NoMatchingCoursesError(letter)

    label = f"{institution} {letter} Term".strip()
    return Schedule(label=label, start_date=start_date, end_date=end_date, courses=selected)


def schedule_events(
    schedule: Schedule,
    settings: Settings,
    bound_to_term_end: bool = False,
) -> List[CalendarEvent]:
    """
    Build one CalendarEvent per course of the schedule.
    """
    tz = settings.tzinfo()
    events: List[CalendarEvent] = []
    for course in schedule.courses:
        try:
            pattern = parse_meeting_pattern(course.meeting_pattern)
        except MeetingPatternError as e:
            raise MeetingPatternError(e.pattern, f"{e.reason} (course {course.title!r})") from e
        events.append(
            build_event(
                course,
                pattern,
                schedule.start_date,
                tz,
                term_end=schedule.end_date,
                bound_to_term_end=bound_to_term_end,
            )
        )
    return events


def render_schedule(
    schedule: Schedule,
    settings: Settings,
    bound_to_term_end: bool = False,
    dtstamp: Optional[datetime] = None,
) -> str:
    """
    Render a schedule as iCalendar text.
    """
    events = schedule_events(schedule, settings, bound_to_term_end=bound_to_term_end)
    return render_calendar(events, settings.product_id, dtstamp=dtstamp)


def courses_from_worksheet(worksheet: Worksheet, settings: Settings) -> List[CourseRecord]:
    rows = extract_rows(
        worksheet.xml,
        namespace=settings.spreadsheet_namespace,
        shared_strings=worksheet.shared_strings,
    )
    courses, _errors = course_records_from_rows(rows)
    return courses


def generate_calendar(
    worksheet: Worksheet,
    term_letter: str,
    start_date: date,
    end_date: date,
    settings: Settings,
    bound_to_term_end: bool = False,
    dtstamp: Optional[datetime] = None,
) -> Tuple[Schedule, str]:
    """
    Full pipeline: worksheet -> (schedule, calendar text).
    """
    courses = courses_from_worksheet(worksheet, settings)
    schedule = assemble_schedule(term_letter, start_date, end_date, courses, settings.institution)
    return schedule, render_schedule(schedule, settings, bound_to_term_end=bound_to_term_end, dtstamp=dtstamp)
