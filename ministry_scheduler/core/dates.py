# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Calendar-date helpers. Everything in the scheduler compares plain dates,
so datetimes and ISO strings are normalized here before any comparison.
"""

import re
from datetime import date, datetime, timedelta
from typing import Union

from ministry_scheduler.core.errors import ValidationError

WEEKDAY_NAMES: tuple[str, ...] = (
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
)

_TIME_RE = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")

DateLike = Union[date, datetime, str]


def as_calendar_date(value: DateLike) -> date:
    """Return the calendar date of ``value``, dropping time and offset.

    An aware datetime keeps the calendar day of its own offset, so
    ``2026-03-01T00:30+01:00`` is March 1st, not the UTC February 28th.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if len(text) == 10:
                return date.fromisoformat(text)
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError as exc:
            raise ValidationError(f"Invalid date '{value}'") from exc
    raise ValidationError(f"Unsupported date value {value!r}")


def weekday_index(name: str) -> int:
    """Map a weekday name ("sunday", "Sun") to ``date.weekday()`` numbering."""
    key = name.strip().lower()
    for index, weekday in enumerate(WEEKDAY_NAMES):
        if weekday == key or weekday[:3] == key:
            return index
    raise ValidationError(f"Unknown weekday '{name}'")


def normalize_time(value: str) -> str:
    """Validate a 24h ``H:MM``/``HH:MM`` string and zero-pad it."""
    if value is None or not value.strip():
        raise ValidationError("Service time is required")
    match = _TIME_RE.match(value.strip())
    if not match:
        raise ValidationError(f"Invalid service time '{value}', expected HH:MM")
    return f"{int(match.group(1)):02d}:{match.group(2)}"


def week_start(day: DateLike, week_starts_on: str = "sunday") -> date:
    """First day of the week containing ``day``."""
    day = as_calendar_date(day)
    offset = (day.weekday() - weekday_index(week_starts_on)) % 7
    return day - timedelta(days=offset)


def week_dates(start: DateLike) -> list[date]:
    start = as_calendar_date(start)
    return [start + timedelta(days=i) for i in range(7)]


def previous_week(start: DateLike) -> date:
    return as_calendar_date(start) - timedelta(days=7)


def next_week(start: DateLike) -> date:
    return as_calendar_date(start) + timedelta(days=7)
