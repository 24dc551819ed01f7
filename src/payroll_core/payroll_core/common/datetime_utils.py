from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: Optional[str]) -> Optional[time]:
    """Parse 'HH:MM' (or 'HH:MM:SS') into time; blank means no punch."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"Expected an HH:MM string, got {value!r}")
    v = value.strip()
    if not v:
        return None
    fmt = "%H:%M:%S" if v.count(":") == 2 else "%H:%M"
    return datetime.strptime(v, fmt).time()


def format_hhmm(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M") if value else None


def minutes_of_day(value: time) -> int:
    return value.hour * 60 + value.minute


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every calendar day from start to end, inclusive."""
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


def is_sunday(day: date) -> bool:
    return day.weekday() == 6


def count_working_days(start: date, end: date) -> int:
    """Calendar days in range excluding Sundays."""
    return sum(1 for d in iter_days(start, end) if not is_sunday(d))


def overlap(start: date, end: date, other_start: date, other_end: date) -> Optional[tuple[date, date]]:
    lo = max(start, other_start)
    hi = min(end, other_end)
    if lo > hi:
        return None
    return lo, hi


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
