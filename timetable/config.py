"""Runtime settings read from the environment, plus logging setup."""

from __future__ import annotations

import logging
import os
import re
from datetime import date

from pydantic import BaseModel, field_validator

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class Settings(BaseModel):
    day_start: str = "07:30"
    day_end: str = "22:30"
    # Monday of the fixed week every weekly session is projected onto.
    reference_monday: date = date(2024, 1, 1)
    log_level: str = "INFO"
    # Author recorded in the edit history when a request names no user.
    user: str = "system"

    @field_validator("day_start", "day_end")
    @classmethod
    def _must_be_hhmm(cls, value: str) -> str:
        if not _HHMM.match(value):
            raise ValueError(f"expected HH:MM, got {value!r}")
        return value

    @field_validator("reference_monday")
    @classmethod
    def _must_be_monday(cls, value: date) -> date:
        if value.weekday() != 0:
            raise ValueError("reference_monday must fall on a Monday")
        return value


def load_settings() -> Settings:
    """Build Settings from ``TIMETABLE_*`` environment variables."""
    defaults = Settings()
    return Settings(
        day_start=os.getenv("TIMETABLE_DAY_START", defaults.day_start),
        day_end=os.getenv("TIMETABLE_DAY_END", defaults.day_end),
        reference_monday=os.getenv(
            "TIMETABLE_REFERENCE_MONDAY", defaults.reference_monday.isoformat()
        ),
        log_level=os.getenv("TIMETABLE_LOG_LEVEL", defaults.log_level).upper(),
        user=os.getenv("TIMETABLE_USER", defaults.user),
    )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
