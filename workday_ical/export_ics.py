"""
iCalendar (.ics) serialization.

We turn CalendarEvents into one calendar document that can be imported into:
- Google Calendar
- Outlook
- Apple Calendar

Times are written in UTC basic format (20240108T140000Z) and every line,
including the last one, ends with CRLF.
"""

from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional

from workday_ical.model import CalendarEvent

CRLF = "\r\n"

# RFC 5545 3.1: lines SHOULD NOT be longer than 75 octets
_MAX_LINE_OCTETS = 75


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace("\r", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _fold(line: str) -> List[str]:
    """
    Split a content line into 75-octet pieces; continuations start with a space.

    Cuts never fall inside a multi-byte UTF-8 character.
    """
    if len(line.encode("utf-8")) <= _MAX_LINE_OCTETS:
        return [line]

    pieces: List[str] = []
    current = ""
    for ch in line:
        if len((current + ch).encode("utf-8")) > _MAX_LINE_OCTETS:
            pieces.append(current)
            current = " "
        current += ch
    pieces.append(current)
    return pieces


def _dt_utc(value: datetime) -> str:
    """
    Convert an aware datetime to ICS UTC form 'YYYYMMDDTHHMMSSZ'.
    """
    return value.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def _uid(event: CalendarEvent) -> str:
    # Stable across runs for the same course and slot
    key = f"{event.title}|{_dt_utc(event.start)}|{','.join(event.days)}|{event.location}"
    return f"{hashlib.md5(key.encode('utf-8')).hexdigest()}@workday-ical"


def _rrule(event: CalendarEvent) -> str:
    rule = f"FREQ=WEEKLY;BYDAY={','.join(event.days)}"
    if event.until is not None:
        rule += f";UNTIL={_dt_utc(event.until)}"
    return rule


def _lines_to_text(lines: Iterable[str]) -> str:
    out: List[str] = []
    for line in lines:
        out.extend(_fold(line))
    return CRLF.join(out) + CRLF


def render_event(event: CalendarEvent, dtstamp: Optional[datetime] = None) -> str:
    """
    Serialize one event as a VEVENT block terminated by CRLF.
    """
    stamp = dtstamp if dtstamp is not None else datetime.now(timezone.utc)

    lines: List[str] = []
    lines.append("BEGIN:VEVENT")
    lines.append(f"UID:{_uid(event)}")
    lines.append(f"DTSTAMP:{_dt_utc(stamp)}")
    lines.append(f"SUMMARY:{_ics_escape(event.title)}")
    lines.append(f"DTSTART:{_dt_utc(event.start)}")
    lines.append(f"DTEND:{_dt_utc(event.end)}")
    lines.append(f"LOCATION:{_ics_escape(event.location)}")
    lines.append(f"DESCRIPTION:{_ics_escape(event.description)}")
    lines.append(f"RRULE:{_rrule(event)}")
    lines.append("END:VEVENT")
    return _lines_to_text(lines)


def render_calendar(
    events: Iterable[CalendarEvent],
    product_id: str,
    dtstamp: Optional[datetime] = None,
) -> str:
    """
    Wrap events into a VCALENDAR document.
    """
    stamp = dtstamp if dtstamp is not None else datetime.now(timezone.utc)

    parts: List[str] = [_lines_to_text(["BEGIN:VCALENDAR", "VERSION:2.0", f"PRODID:{product_id}"])]
    parts.extend(render_event(ev, stamp) for ev in events)
    parts.append("END:VCALENDAR" + CRLF)
    return "".join(parts)


def write_calendar(text: str, out_path: str | Path) -> Path:
    """
    Write a rendered calendar to disk, creating parent directories.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    # newline="" keeps the CRLF terminators as they are
    with out.open("w", encoding="utf-8", newline="") as fh:
        fh.write(text)
    return out
