"""
Central data model definitions used across the project.

This module defines the canonical structure of the objects that flow
through one conversion:

    worksheet rows -> CourseRecord -> MeetingPattern -> CalendarEvent -> Schedule

All of them are frozen dataclasses: a Schedule is built once per request
and only read afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from workday_ical.log import get_logger

logger = get_logger(__name__)

# Column order of the "Registered Classes" export
COLUMNS = (
    "term",
    "title",
    "format",
    "meeting_pattern",
    "location",
    "instructor",
    "mode_of_delivery",
)

# Columns a row cannot be identified without. A blank meeting pattern is
# kept so that rendering the term reports it against the course.
REQUIRED_COLUMNS = ("term", "title")


@dataclass(frozen=True)
class CourseRecord:
    """
    Represents one registration row of the export.
    """

    term: str
    title: str
    format: str = ""
    meeting_pattern: str = ""
    location: str = ""
    instructor: str = ""
    mode_of_delivery: str = ""

    @classmethod
    def from_row(cls, cells: Sequence[str]) -> "CourseRecord":
        """
        Build a record from the first 7 cells of a row.

        Short rows are fine: missing trailing columns become "".
        """
        values = [(cells[i] if i < len(cells) else "") or "" for i in range(len(COLUMNS))]
        return cls(*[v.strip() for v in values])


@dataclass(frozen=True)
class MeetingPattern:
    """
    Parsed form of a meeting-pattern string such as "M-W-F|9:00 AM - 9:50 AM".

    days keeps the input order (and duplicates); start/end are (hour, minute)
    in 24-hour form.
    """

    days: Tuple[str, ...]
    start: Tuple[int, int]
    end: Tuple[int, int]

    @property
    def weekday_set(self) -> frozenset:
        return frozenset(self.days)


@dataclass(frozen=True)
class CalendarEvent:
    """
    One weekly-recurring event, ready for serialization.

    start/end are timezone-aware UTC datetimes. until is None for an
    open-ended recurrence.
    """

    title: str
    start: datetime
    end: datetime
    days: Tuple[str, ...]
    location: str
    description: str
    until: Optional[datetime] = None


@dataclass(frozen=True)
class Schedule:
    """
    All courses of one term, plus the term's dates.
    """

    label: str
    start_date: date
    end_date: date
    courses: Tuple[CourseRecord, ...]


@dataclass(frozen=True)
class RowError:
    """
    A required field missing from a worksheet row.

    row_number is 1-based and counts the header row, matching what a user
    sees in a spreadsheet program.
    """

    row_number: int
    field: str
    message: str

    def __str__(self) -> str:
        return f"row {self.row_number}: {self.field}: {self.message}"


def build_course_record(
    cells: Sequence[str], row_number: int
) -> Tuple[Optional[CourseRecord], List[RowError]]:
    """
    Validating variant of CourseRecord.from_row().

    Returns (record, []) for a usable row, or (None, errors) listing every
    required field that is missing or blank.
    """
    record = CourseRecord.from_row(cells)
    errors = [
        RowError(row_number, name, "missing or blank")
        for name in REQUIRED_COLUMNS
        if not getattr(record, name)
    ]
    if errors:
        return None, errors
    return record, []


def course_records_from_rows(
    rows: Iterable[Sequence[str]],
) -> Tuple[List[CourseRecord], List[RowError]]:
    """
    Turn extracted worksheet rows into CourseRecords.

    The first row is the header and is dropped. Entirely blank rows are
    skipped; rows missing required fields are reported in the error list
    and left out of the result.
    """
    courses: List[CourseRecord] = []
    errors: List[RowError] = []

    for index, cells in enumerate(rows):
        if index == 0:
            continue
        row_number = index + 1
        if not any((c or "").strip() for c in cells):
            logger.debug("blank_row_skipped", row=row_number)
            continue
        record, row_errors = build_course_record(cells, row_number)
        if record is None:
            logger.warning("row_rejected", row=row_number, errors=[str(e) for e in row_errors])
            errors.extend(row_errors)
            continue
        courses.append(record)

    return courses, errors
