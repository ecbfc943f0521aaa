from __future__ import annotations

from datetime import MAXYEAR, MINYEAR, date, datetime
from typing import Union

from ..core.constants import DISPLAY_DATE_FORMAT, ISO_DATE_FORMAT
from ..core.exceptions import ValidationError

DateLike = Union[date, datetime, str]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, ISO_DATE_FORMAT).date()


def as_date(value: DateLike, field_name: str = "Date") -> date:
    """Normalize a date-like value to a calendar day (time of day is dropped)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        v = value.strip()
        try:
            # Accept full ISO timestamps coming from JSON payloads as well.
            return parse_iso_date(v[:10])
        except ValueError:
            raise ValidationError(f"{field_name} invalide (AAAA-MM-JJ)")
    raise ValidationError(f"{field_name} invalide")


def require_year(value, field_name: str = "Année") -> int:
    try:
        year = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} invalide")
    if not MINYEAR <= year <= MAXYEAR:
        raise ValidationError(f"{field_name} hors limites ({MINYEAR}-{MAXYEAR})")
    return year


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def leave_duration(start: DateLike, end: DateLike) -> int:
    """Inclusive whole-day count: both endpoints are leave days."""
    a = as_date(start)
    b = as_date(end)
    lo, hi = min(a, b), max(a, b)
    return (hi - lo).days + 1


def format_date(value: date) -> str:
    return value.strftime(DISPLAY_DATE_FORMAT)


def format_date_range(start: date, end: date) -> str:
    if start == end:
        return f"le {format_date(start)}"
    return f"du {format_date(start)} au {format_date(end)}"
