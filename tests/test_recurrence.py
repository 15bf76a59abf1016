"""
Unit tests for first-occurrence and event construction.

- the first occurrence is within [start, start + 6] and on a meeting day
- wall-clock times are converted to UTC using the given timezone
- an empty day set is an error, not an endless scan
"""

import unittest
from datetime import date, datetime, timedelta
from itertools import combinations

import pytz

from workday_ical.errors import NoWeekdaysError
from workday_ical.meeting import parse_meeting_pattern
from workday_ical.model import CourseRecord
from workday_ical.recurrence import (
    WEEKDAY_ORDINALS,
    build_event,
    first_occurrence,
    shift_days,
    to_utc,
    weekday_ordinal,
)

NEW_YORK = pytz.timezone("America/New_York")

COURSE = CourseRecord(
    term="2024 Spring C Term",
    title="CS 3733 - Software Engineering",
    format="Lecture",
    meeting_pattern="M-W-F|9:00 AM - 9:50 AM",
    location="Kaven Hall 116",
    instructor="Grace Hopper",
    mode_of_delivery="In-Person",
)


class TestFirstOccurrence(unittest.TestCase):
    def test_ordinals(self) -> None:
        self.assertEqual(weekday_ordinal("SU"), 0)
        self.assertEqual(weekday_ordinal("SA"), 6)

    def test_start_day_counts(self) -> None:
        # 2024-01-08 is a Monday
        self.assertEqual(first_occurrence(date(2024, 1, 8), ["MO", "WE", "FR"]), date(2024, 1, 8))

    def test_scans_forward(self) -> None:
        self.assertEqual(first_occurrence(date(2024, 1, 8), ["TH"]), date(2024, 1, 11))
        self.assertEqual(first_occurrence(date(2024, 1, 8), ["SU"]), date(2024, 1, 14))

    def test_always_within_one_week_and_on_a_meeting_day(self) -> None:
        codes = list(WEEKDAY_ORDINALS)
        sets = [set(c) for n in (1, 2, 3) for c in combinations(codes, n)]
        for offset in range(7):
            start = date(2024, 3, 1) + timedelta(days=offset)
            for days in sets:
                with self.subTest(start=start, days=days):
                    first = first_occurrence(start, days)
                    self.assertTrue(start <= first <= start + timedelta(days=6))
                    self.assertIn((first.weekday() + 1) % 7, {WEEKDAY_ORDINALS[d] for d in days})

    def test_empty_day_set_raises(self) -> None:
        with self.assertRaises(NoWeekdaysError):
            first_occurrence(date(2024, 1, 8), [])
        with self.assertRaises(NoWeekdaysError):
            first_occurrence(date(2024, 1, 8), ["XX"])


class TestToUtc(unittest.TestCase):
    def test_winter_offset(self) -> None:
        self.assertEqual(to_utc(date(2024, 1, 8), (9, 0), NEW_YORK), datetime(2024, 1, 8, 14, 0, tzinfo=pytz.utc))

    def test_summer_offset(self) -> None:
        self.assertEqual(to_utc(date(2024, 9, 3), (9, 0), NEW_YORK), datetime(2024, 9, 3, 13, 0, tzinfo=pytz.utc))


class TestShiftDays(unittest.TestCase):
    def test_wraps_around_the_week(self) -> None:
        self.assertEqual(shift_days(["MO", "SA"], 1), ("TU", "SU"))
        self.assertEqual(shift_days(["SU"], -1), ("SA",))


class TestBuildEvent(unittest.TestCase):
    def test_monday_wednesday_friday(self) -> None:
        pattern = parse_meeting_pattern(COURSE.meeting_pattern)
        ev = build_event(COURSE, pattern, date(2024, 1, 8), NEW_YORK)

        self.assertEqual(ev.title, COURSE.title)
        self.assertEqual(ev.start, datetime(2024, 1, 8, 14, 0, tzinfo=pytz.utc))
        self.assertEqual(ev.end, datetime(2024, 1, 8, 14, 50, tzinfo=pytz.utc))
        self.assertEqual(ev.days, ("MO", "WE", "FR"))
        self.assertEqual(ev.location, "Kaven Hall 116")
        self.assertEqual(ev.description, "Lecture | In-Person | Instructor: Grace Hopper")
        self.assertIsNone(ev.until)

    def test_first_occurrence_after_term_start(self) -> None:
        pattern = parse_meeting_pattern("T-R|2:00 PM - 3:50 PM")
        # term starts on a Thursday
        ev = build_event(COURSE, pattern, date(2024, 8, 22), NEW_YORK)
        self.assertEqual(ev.start, datetime(2024, 8, 22, 18, 0, tzinfo=pytz.utc))

    def test_evening_class_keeps_days_aligned_with_utc_start(self) -> None:
        # 8 PM Monday in New York is 1 AM Tuesday UTC
        pattern = parse_meeting_pattern("M-W|8:00 PM - 9:20 PM")
        ev = build_event(COURSE, pattern, date(2024, 1, 8), NEW_YORK)
        self.assertEqual(ev.start, datetime(2024, 1, 9, 1, 0, tzinfo=pytz.utc))
        self.assertEqual(ev.days, ("TU", "TH"))
        self.assertIn(ev.start.strftime("%a")[:2].upper(), ev.days)

    def test_term_end_ignored_unless_requested(self) -> None:
        pattern = parse_meeting_pattern(COURSE.meeting_pattern)
        ev = build_event(COURSE, pattern, date(2024, 1, 8), NEW_YORK, term_end=date(2024, 2, 29))
        self.assertIsNone(ev.until)

    def test_bounded_by_term_end(self) -> None:
        pattern = parse_meeting_pattern(COURSE.meeting_pattern)
        ev = build_event(
            COURSE, pattern, date(2024, 1, 8), NEW_YORK, term_end=date(2024, 2, 29), bound_to_term_end=True
        )
        self.assertEqual(ev.until, datetime(2024, 3, 1, 4, 59, 59, tzinfo=pytz.utc))

    def test_bounded_without_term_end_is_rejected(self) -> None:
        pattern = parse_meeting_pattern(COURSE.meeting_pattern)
        with self.assertRaises(ValueError):
            build_event(COURSE, pattern, date(2024, 1, 8), NEW_YORK, bound_to_term_end=True)


if __name__ == "__main__":
    unittest.main()
