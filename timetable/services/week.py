"""Canonical reference week.

The timetable is a recurring weekly schedule, so every session is pinned to
one fixed week: each weekday name resolves to a single calendar date, and any
datetime can be projected onto that week by weekday and time of day. Two
"Monday" sessions are then comparable no matter which concrete date each
one nominally carries.
"""

from __future__ import annotations

import re
import unicodedata
from datetime import date, datetime, time, timedelta

from dateutil.relativedelta import FR, MO, SA, SU, TH, TU, WE, relativedelta

REFERENCE_MONDAY = date(2024, 1, 1)

_DAY_MAP = {
    "monday": MO,
    "tuesday": TU,
    "wednesday": WE,
    "thursday": TH,
    "friday": FR,
    "saturday": SA,
    "sunday": SU,
    # Portuguese names used by the timetable forms
    "segunda": MO,
    "terca": TU,
    "quarta": WE,
    "quinta": TH,
    "sexta": FR,
    "sabado": SA,
    "domingo": SU,
}

DAY_NAMES = ["Segunda", "Terça", "Quarta", "Quinta", "Sexta", "Sábado", "Domingo"]

_HHMM = re.compile(r"^(\d{1,2}):(\d{2})$")


def _normalize_day(name: str) -> str:
    decomposed = unicodedata.normalize("NFKD", name.strip().lower())
    plain = "".join(c for c in decomposed if not unicodedata.combining(c))
    return plain.removesuffix("-feira").removesuffix(" feira")


def weekday_from_name(name: str | None) -> int | None:
    """Return 0 (Monday) .. 6 (Sunday), or None for an unknown name.

    Accepts English and Portuguese names, any case, with or without
    accents, and three-letter abbreviations.
    """
    if not name:
        return None
    key = _normalize_day(name)
    if key in _DAY_MAP:
        return _DAY_MAP[key].weekday
    for day_name, day_const in _DAY_MAP.items():
        if len(key) == 3 and day_name.startswith(key):
            return day_const.weekday
    return None


def reference_date(weekday: int, reference_monday: date = REFERENCE_MONDAY) -> date:
    return reference_monday + relativedelta(weekday=weekday)


def parse_hhmm(value: str | None) -> time | None:
    """Parse ``HH:MM`` into a time, or return None if malformed."""
    if not value:
        return None
    m = _HHMM.match(value.strip())
    if not m:
        return None
    hours, minutes = int(m.group(1)), int(m.group(2))
    if hours > 23 or minutes > 59:
        return None
    return time(hours, minutes)


def to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def minutes_to_hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def event_window(
    day: str,
    start_time: str,
    end_time: str,
    reference_monday: date = REFERENCE_MONDAY,
) -> tuple[datetime, datetime]:
    """Resolve a day name and two ``HH:MM`` strings onto the reference week.

    Raises ``ValueError`` for an unknown day or a malformed time.
    """
    weekday = weekday_from_name(day)
    if weekday is None:
        raise ValueError(f"Unknown day name: {day!r}")
    start = parse_hhmm(start_time)
    end = parse_hhmm(end_time)
    if start is None or end is None:
        raise ValueError(f"Malformed time range: {start_time!r} - {end_time!r}")
    on = reference_date(weekday, reference_monday)
    return datetime.combine(on, start), datetime.combine(on, end)


def canonical_start(
    moment: datetime, reference_monday: date = REFERENCE_MONDAY
) -> datetime:
    """Project a datetime onto the reference week, keeping its wall-clock time."""
    return datetime.combine(
        reference_date(moment.weekday(), reference_monday), moment.time()
    )


def canonical_window(
    start: datetime | None,
    end: datetime | None,
    reference_monday: date = REFERENCE_MONDAY,
) -> tuple[datetime, datetime] | None:
    """Return the projected ``(start, end)``, or None unless both bounds exist
    and ``end`` is strictly after ``start``.

    Bounds are compared on wall-clock time; ``tzinfo`` is dropped from both,
    so an aware bound can pair with a naive one.
    """
    if start is None or end is None:
        return None
    start, end = start.replace(tzinfo=None), end.replace(tzinfo=None)
    duration: timedelta = end - start
    if duration <= timedelta(0):
        return None
    projected = canonical_start(start, reference_monday)
    return projected, projected + duration


def day_name(moment: datetime) -> str:
    """Portuguese weekday label used by the timetable forms."""
    return DAY_NAMES[moment.weekday()]
