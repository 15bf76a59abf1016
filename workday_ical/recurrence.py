"""
First-occurrence and recurrence computation.

A course meets weekly on the days of its meeting pattern. The calendar
event for it starts on the first of those days on or after the term start
and repeats weekly from there.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional, Tuple

import pytz

from workday_ical.errors import NoWeekdaysError
from workday_ical.model import CalendarEvent, CourseRecord, MeetingPattern

# Sunday=0 ... Saturday=6
WEEKDAY_ORDINALS = {"SU": 0, "MO": 1, "TU": 2, "WE": 3, "TH": 4, "FR": 5, "SA": 6}


def weekday_ordinal(code: str) -> int:
    return WEEKDAY_ORDINALS[code]


def _ordinal_of_date(day: date) -> int:
    # date.weekday() is Monday=0
    return (day.weekday() + 1) % 7


def first_occurrence(start_date: date, days: Iterable[str]) -> date:
    """
    Return the first date on or after start_date that falls on one of days.

    The scan covers at most one week; an empty (or unrecognised) day set
    raises NoWeekdaysError.
    """
    wanted = {WEEKDAY_ORDINALS[d] for d in days if d in WEEKDAY_ORDINALS}
    if not wanted:
        raise NoWeekdaysError(f"No weekdays to schedule from {start_date.isoformat()}")

    for offset in range(7):
        candidate = start_date + timedelta(days=offset)
        if _ordinal_of_date(candidate) in wanted:
            return candidate

    # unreachable: seven consecutive days cover every ordinal
    raise NoWeekdaysError(f"No weekdays to schedule from {start_date.isoformat()}")


def to_utc(day: date, clock: Tuple[int, int], tz: pytz.BaseTzInfo) -> datetime:
    """
    Interpret day + (hour, minute) as wall-clock time in tz and convert to UTC.
    """
    local = tz.localize(datetime.combine(day, time(clock[0], clock[1])))
    return local.astimezone(pytz.utc)


def shift_days(days: Iterable[str], offset: int) -> Tuple[str, ...]:
    """
    Move each weekday code by offset days, e.g. shift_days(["SU"], 1) == ("MO",).
    """
    codes = sorted(WEEKDAY_ORDINALS, key=WEEKDAY_ORDINALS.get)
    return tuple(codes[(WEEKDAY_ORDINALS[d] + offset) % 7] for d in days)


def describe(course: CourseRecord) -> str:
    return f"{course.format} | {course.mode_of_delivery} | Instructor: {course.instructor}"


def build_event(
    course: CourseRecord,
    pattern: MeetingPattern,
    term_start: date,
    tz: pytz.BaseTzInfo,
    term_end: Optional[date] = None,
    bound_to_term_end: bool = False,
) -> CalendarEvent:
    """
    Build the weekly-recurring event for one course.

    The recurrence is open-ended unless bound_to_term_end is set, in which
    case it stops at the end of term_end (local time).
    """
    first_day = first_occurrence(term_start, pattern.weekday_set)
    start = to_utc(first_day, pattern.start, tz)
    end = to_utc(first_day, pattern.end, tz)

    # BYDAY is evaluated against the UTC DTSTART; keep the days aligned with
    # it when the conversion crosses midnight (e.g. evening classes west of UTC)
    days = pattern.days
    offset = (start.date() - first_day).days
    if offset:
        days = shift_days(days, offset)

    until: Optional[datetime] = None
    if bound_to_term_end:
        if term_end is None:
            raise ValueError("bound_to_term_end requires a term end date")
        until = to_utc(term_end, (23, 59), tz) + timedelta(seconds=59)

    return CalendarEvent(
        title=course.title,
        start=start,
        end=end,
        days=days,
        location=course.location,
        description=describe(course),
        until=until,
    )
