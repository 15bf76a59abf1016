"""
workday-ical: turn a Workday "Registered Classes" export into an .ics schedule.
"""

from pathlib import Path

__version__ = (Path(__file__).resolve().parent / "VERSION").read_text(encoding="utf-8").strip()
