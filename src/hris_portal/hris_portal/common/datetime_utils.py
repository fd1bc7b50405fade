from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional

from ..core.constants import DATE_FORMAT, TIME_FORMAT
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def parse_hhmm(value: Optional[str]) -> Optional[time]:
    """Parse HH:MM into a time; blank input means "no time"."""
    v = (value or "").strip()
    if not v:
        return None
    try:
        return datetime.strptime(v[:5], TIME_FORMAT).time()
    except ValueError:
        raise ValidationError(f"Invalid time (HH:MM): {value!r}")


def date_key(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def inclusive_days(start: date, end: date) -> int:
    """Day count between two dates, both ends included."""
    return abs((end - start).days) + 1


def format_hours_worked(time_in: Optional[datetime], time_out: Optional[datetime]) -> Optional[str]:
    """Render ``time_out - time_in`` as ``XhYm``; None when either side is missing."""
    if not isinstance(time_in, datetime) or not isinstance(time_out, datetime):
        return None
    minutes = int((time_out - time_in).total_seconds() // 60)
    return f"{minutes // 60}h{minutes % 60}m"


def format_12h(value: Optional[datetime]) -> str:
    if not isinstance(value, datetime):
        return ""
    return value.strftime("%I:%M %p")


def seconds_until_next_midnight(now: datetime) -> float:
    midnight = datetime.combine(now.date() + timedelta(days=1), time.min)
    return (midnight - now).total_seconds()
