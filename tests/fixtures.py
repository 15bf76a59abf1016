"""
Helpers that build small worksheets and workbooks in memory for the tests.
"""

from __future__ import annotations

import zipfile
from io import BytesIO
from typing import Optional, Sequence
from xml.sax.saxutils import escape

NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"

HEADER = ["Term", "Course", "Format", "Meeting Pattern", "Location", "Instructor", "Mode of Delivery"]


def sheet_xml(rows: Sequence[Sequence[str]], namespace: str = NS) -> str:
    """
    Worksheet XML with every cell stored as an inline string.
    """
    out = [f'<?xml version="1.0" encoding="UTF-8"?><worksheet xmlns="{namespace}"><sheetData>']
    for r, row in enumerate(rows, start=1):
        out.append(f'<row r="{r}">')
        for value in row:
            out.append(f'<c t="inlineStr"><is><t>{escape(value)}</t></is></c>')
        out.append("</row>")
    out.append("</sheetData></worksheet>")
    return "".join(out)


def workbook_bytes(sheet: Optional[str], shared_strings: Optional[str] = None) -> bytes:
    """
    A minimal .xlsx archive holding the given sheet (and shared strings).
    """
    buf = BytesIO()
    with zipfile.ZipFile(buf, "w") as archive:
        archive.writestr("[Content_Types].xml", "<Types/>")
        if sheet is not None:
            archive.writestr("xl/worksheets/sheet1.xml", sheet)
        if shared_strings is not None:
            archive.writestr("xl/sharedStrings.xml", shared_strings)
    return buf.getvalue()


REGISTRATION_ROWS = [
    HEADER,
    ["2024 Fall A Term (08/22/2024-10/11/2024)", "CS 2102 - Object-Oriented Design", "Lecture",
     "M-T-R-F|10:00 AM - 10:50 AM", "Fuller Labs 320", "Jane Smith", "In-Person"],
    ["2024 Fall A Term (08/22/2024-10/11/2024)", "MA 2051 - Differential Equations", "Lecture",
     "M-W-F|1:00 PM - 1:50 PM", "Stratton Hall 202", "Alan Turing", "In-Person"],
    ["2024 Fall B Term (10/21/2024-12/13/2024)", "PH 1120 - Electricity and Magnetism", "Lecture",
     "T-R|9:00 AM - 10:50 AM", "Olin Hall 107", "Marie Curie", "In-Person"],
    ["2024 Fall AA Term", "ID 2050 - Global Projects", "Seminar",
     "W|3:00 PM - 4:50 PM", "Online", "Ada Lovelace", "Online"],
]
