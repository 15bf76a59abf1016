"""
Meeting-pattern parsing.

A Workday meeting pattern looks like

    M-W-F|9:00 AM - 9:50 AM
    T-R|13:00 - 14:50

i.e. single-letter days joined by dashes, a pipe, then a time range.
Times are "H:MM" with an optional AM/PM marker; without a marker they are
taken as 24-hour clock values.

Anything that does not fit raises MeetingPatternError.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from workday_ical.errors import MeetingPatternError
from workday_ical.model import MeetingPattern

# R = Thursday, U = Sunday
DAY_LETTERS: Dict[str, str] = {
    "M": "MO",
    "T": "TU",
    "W": "WE",
    "R": "TH",
    "F": "FR",
    "S": "SA",
    "U": "SU",
}
LETTER_FOR_DAY: Dict[str, str] = {code: letter for letter, code in DAY_LETTERS.items()}

_CLOCK_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def _parse_days(pattern: str, days_part: str) -> Tuple[str, ...]:
    """
    Map "M-W-F" to ("MO", "WE", "FR"). Duplicates are kept as given.
    """
    if not days_part:
        raise MeetingPatternError(pattern, "no meeting days")

    codes: List[str] = []
    for letter in days_part.split("-"):
        letter = letter.strip().upper()
        if letter not in DAY_LETTERS:
            raise MeetingPatternError(pattern, f"unknown day {letter!r}")
        codes.append(DAY_LETTERS[letter])
    return tuple(codes)


def parse_clock(pattern: str, token: str) -> Tuple[int, int]:
    """
    Convert "1:30 PM" / "12:00 AM" / "13:30" to (hour, minute) in 24-hour form.
    """
    parts = token.strip().split(" ")
    if len(parts) > 2:
        raise MeetingPatternError(pattern, f"unreadable time {token!r}")

    clock = parts[0]
    meridiem: Optional[str] = parts[1].upper() if len(parts) == 2 else None

    m = _CLOCK_RE.match(clock)
    if not m:
        raise MeetingPatternError(pattern, f"unreadable time {token!r}")
    hour, minute = int(m.group(1)), int(m.group(2))

    if minute > 59:
        raise MeetingPatternError(pattern, f"minute out of range in {token!r}")

    if meridiem is None:
        if hour > 23:
            raise MeetingPatternError(pattern, f"hour out of range in {token!r}")
        return hour, minute

    if meridiem not in ("AM", "PM"):
        raise MeetingPatternError(pattern, f"unknown meridiem {parts[1]!r}")
    if not 1 <= hour <= 12:
        raise MeetingPatternError(pattern, f"hour out of range in {token!r}")

    if meridiem == "PM" and hour != 12:
        hour += 12
    elif meridiem == "AM" and hour == 12:
        hour = 0
    return hour, minute


def parse_meeting_pattern(text: str) -> MeetingPattern:
    """
    Parse "<days>|<start> - <end>" into a MeetingPattern.
    """
    pattern = text or ""
    if not pattern.strip():
        raise MeetingPatternError(pattern, "no meeting pattern")

    halves = [p.strip() for p in pattern.split("|")]
    if len(halves) != 2:
        raise MeetingPatternError(pattern, "expected exactly one '|' between days and times")
    days_part, time_part = halves

    days = _parse_days(pattern, days_part)

    times = [t.strip() for t in time_part.split("-")]
    if len(times) != 2 or not all(times):
        raise MeetingPatternError(pattern, "expected a '<start> - <end>' time range")

    start = parse_clock(pattern, times[0])
    end = parse_clock(pattern, times[1])
    if start >= end:
        raise MeetingPatternError(
            pattern, f"start {format_clock(start)} is not before end {format_clock(end)}"
        )

    return MeetingPattern(days=days, start=start, end=end)


def format_clock(clock: Tuple[int, int]) -> str:
    """
    Render (13, 30) as "1:30 PM".
    """
    hour, minute = clock
    meridiem = "AM" if hour < 12 else "PM"
    return f"{(hour % 12) or 12}:{minute:02d} {meridiem}"
