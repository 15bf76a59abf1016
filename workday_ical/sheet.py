"""
Worksheet parsing (spreadsheet XML -> rows of cell text).

Reads a single SpreadsheetML sheet (xl/worksheets/sheet1.xml of an .xlsx)
and returns its rows in document order, each row a list of cell strings
in column order.

Rules:
- inline-string cells (t="inlineStr") -> text of the nested <is> element
- every other cell -> text of its <v> element
- anything missing -> "" (never an error)
- shared-string cells (t="s") stay as their index unless a table is given
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from bs4 import BeautifulSoup, Tag

from workday_ical.config import SPREADSHEET_NS
from workday_ical.log import get_logger

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _local_name(tag: Tag) -> str:
    # Prefixed elements keep "prefix:name" as their name
    return tag.name.rsplit(":", 1)[-1]


def _matcher(local: str, namespace: str):
    """
    Build a find_all() filter for elements with this local name in namespace.
    """

    def match(tag: Tag) -> bool:
        return _local_name(tag) == local and tag.namespace == namespace

    return match


def _joined_text(parent: Tag, namespace: str) -> str:
    """
    Concatenate all <t> texts below parent (plain or rich-text runs).

    Phonetic hints (<rPh>) are not part of the cell value.
    """
    return "".join(
        t.get_text()
        for t in parent.find_all(_matcher("t", namespace))
        if _local_name(t.parent) != "rPh"
    )


def _cell_text(
    cell: Tag,
    namespace: str,
    shared_strings: Optional[Sequence[str]],
) -> str:
    cell_type = cell.get("t")

    if cell_type == "inlineStr":
        inline = cell.find(_matcher("is", namespace))
        return _joined_text(inline, namespace) if inline else ""

    value = cell.find(_matcher("v", namespace))
    raw = value.get_text() if value else ""

    if cell_type == "s" and shared_strings is not None:
        try:
            return shared_strings[int(raw)]
        except (ValueError, IndexError):
            logger.debug("shared_string_unresolved", index=raw)
            return raw

    return raw


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def extract_rows(
    xml: str,
    namespace: str = SPREADSHEET_NS,
    shared_strings: Optional[Sequence[str]] = None,
) -> List[List[str]]:
    """
    Parse worksheet XML into an ordered list of rows of cell strings.

    Only <row>/<c> elements in the given namespace are considered.
    """
    soup = BeautifulSoup(xml, "xml")

    rows: List[List[str]] = []
    for row in soup.find_all(_matcher("row", namespace)):
        cells = row.find_all(_matcher("c", namespace), recursive=False)
        rows.append([_cell_text(c, namespace, shared_strings) for c in cells])

    logger.debug("rows_extracted", count=len(rows))
    return rows


def parse_shared_strings(xml: str, namespace: str = SPREADSHEET_NS) -> List[str]:
    """
    Parse xl/sharedStrings.xml into a list indexed like the t="s" cells.
    """
    soup = BeautifulSoup(xml, "xml")
    return [_joined_text(si, namespace) for si in soup.find_all(_matcher("si", namespace))]
