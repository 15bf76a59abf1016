"""Runtime configuration loaded from environment variables.

All settings can be overridden with WORKDAY_ICAL_<FIELD> variables or a
local .env file. The CLI overrides single fields from its flags.
"""

from __future__ import annotations

import pytz
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

SPREADSHEET_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"


class Settings(BaseSettings):
    """Settings for one conversion run."""

    # Wall-clock timezone the meeting times are given in
    timezone: str = Field(
        default="America/New_York",
        description="IANA timezone used to convert class times to UTC",
    )

    # Workbook layout
    spreadsheet_namespace: str = Field(
        default=SPREADSHEET_NS,
        description="XML namespace of the worksheet markup",
    )
    worksheet_member: str = Field(
        default="xl/worksheets/sheet1.xml",
        description="Archive member holding the registration sheet",
    )
    shared_strings_member: str = Field(
        default="xl/sharedStrings.xml",
        description="Archive member holding the shared-string table",
    )

    # Calendar output
    product_id: str = Field(
        default="-//workday-ical//Registered Classes Export//EN",
        description="PRODID written into every calendar",
    )
    institution: str = Field(
        default="WPI",
        description="Prefix of the schedule label, e.g. 'WPI A Term'",
    )

    # Network
    request_timeout: float = Field(
        default=30.0,
        description="Seconds to wait for the workbook download",
    )

    # Logging
    log_json: bool = Field(default=False, description="Output logs as JSON lines")
    log_level: str = Field(default="WARNING", description="Log level name")

    model_config = {
        "env_prefix": "WORKDAY_ICAL_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        if value not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {value!r}")
        return value

    def tzinfo(self) -> pytz.BaseTzInfo:
        return pytz.timezone(self.timezone)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
