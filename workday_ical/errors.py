"""Error hierarchy for the export -> calendar conversion.

Every failure the pipeline reports derives from ConversionError, so the CLI
can catch one type and print a single line. Parse failures also derive from
ValueError because they are bad input values.
"""

from __future__ import annotations


class ConversionError(Exception):
    """Base exception for all conversion errors."""

    pass


class MeetingPatternError(ConversionError, ValueError):
    """A meeting-pattern string does not follow "<days>|<start> - <end>"."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid meeting pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class NoWeekdaysError(ConversionError, ValueError):
    """A first-occurrence scan was asked for with no usable weekday."""

    pass


class NoMatchingCoursesError(ConversionError):
    """No course in the export belongs to the requested term."""

    def __init__(self, term_letter: str) -> None:
        super().__init__(f"No classes found for {term_letter} Term")
        self.term_letter = term_letter


class FetchError(ConversionError):
    """The workbook could not be downloaded, opened or unpacked.

    Always terminal: no partial calendar is produced.
    """

    pass
