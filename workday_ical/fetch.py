from __future__ import annotations

import zipfile
import zlib
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Callable, List, Optional

import requests

from workday_ical.config import Settings, get_settings
from workday_ical.errors import FetchError
from workday_ical.log import get_logger
from workday_ical.sheet import parse_shared_strings

logger = get_logger(__name__)


@dataclass(frozen=True)
class Worksheet:
    """
    The registration sheet of one workbook, plus its shared-string table
    when the workbook has one.
    """

    xml: str
    shared_strings: Optional[List[str]] = None


# Anything that turns a source (URL or path) into a Worksheet
Fetcher = Callable[[str], Worksheet]


# ---------------------------------------------------------------------------
# Core logic
# ---------------------------------------------------------------------------


def unpack_workbook(data: bytes, settings: Settings | None = None) -> Worksheet:
    """
    Pull the worksheet (and shared strings, if any) out of .xlsx bytes.
    """
    cfg = settings or get_settings()

    try:
        with zipfile.ZipFile(BytesIO(data)) as archive:
            names = set(archive.namelist())
            if cfg.worksheet_member not in names:
                raise FetchError(f"Workbook has no {cfg.worksheet_member}")
            xml = archive.read(cfg.worksheet_member).decode("utf-8")

            shared: Optional[List[str]] = None
            if cfg.shared_strings_member in names:
                shared = parse_shared_strings(
                    archive.read(cfg.shared_strings_member).decode("utf-8"),
                    cfg.spreadsheet_namespace,
                )
    except (zipfile.BadZipFile, zlib.error, EOFError) as e:
        raise FetchError(f"Not a valid .xlsx archive: {e}") from e
    except UnicodeDecodeError as e:
        raise FetchError(f"Worksheet is not UTF-8 text: {e}") from e

    return Worksheet(xml=xml, shared_strings=shared)


def fetch_worksheet(url: str, settings: Settings | None = None) -> Worksheet:
    """
    Download an .xlsx export and return its registration sheet.
    """
    cfg = settings or get_settings()

    logger.info("fetching_workbook", url=url)
    try:
        resp = requests.get(url, timeout=cfg.request_timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(f"Could not download {url}: {e}") from e

    return unpack_workbook(resp.content, cfg)


def fetch_worksheet_xml(url: str, settings: Settings | None = None) -> str:
    """
    Given a document URL, return the worksheet XML.
    """
    return fetch_worksheet(url, settings).xml


def read_worksheet(path: str | Path, settings: Settings | None = None) -> Worksheet:
    """
    Load a local .xlsx export, or a bare worksheet .xml file.
    """
    p = Path(path)
    try:
        data = p.read_bytes()
    except OSError as e:
        raise FetchError(f"Could not read {p}: {e}") from e

    if p.suffix.lower() == ".xml":
        try:
            return Worksheet(xml=data.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise FetchError(f"Worksheet is not UTF-8 text: {e}") from e

    return unpack_workbook(data, settings)


def load_worksheet(source: str, settings: Settings | None = None) -> Worksheet:
    """
    Default fetcher: http(s) sources are downloaded, anything else is a path.
    """
    if source.lower().startswith(("http://", "https://")):
        return fetch_worksheet(source, settings)
    return read_worksheet(source, settings)
