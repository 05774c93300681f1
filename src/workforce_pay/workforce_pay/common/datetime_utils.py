from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Iterable, Iterator, Optional, Tuple

from ..core.enums import WeekDay


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp (seconds optional)."""
    return datetime.fromisoformat(value.strip())


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end; 0 when end is not after start."""
    seconds = (end - start).total_seconds()
    if seconds <= 0:
        return 0
    return int(seconds // 60)


def hours_between(start: datetime, end: datetime) -> float:
    seconds = (end - start).total_seconds()
    return max(seconds, 0.0) / 3600


def break_minutes(breaks: Iterable) -> int:
    """Sum of `duration_minutes` over a break list."""
    return sum(int(b.duration_minutes or 0) for b in breaks)


def overlap_minutes(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> int:
    """Minutes shared by the two intervals (0 if disjoint)."""
    return minutes_between(max(a_start, b_start), min(a_end, b_end))


def format_hours(hours: Optional[float]) -> str:
    """Human readable duration: '8h 30m', '45m', '8h', '0m'."""
    if not hours:
        return "0m"
    h = int(hours)
    m = int(round((hours - h) * 60))
    if m == 60:
        h, m = h + 1, 0
    if h == 0:
        return f"{m}m"
    if m == 0:
        return f"{h}h"
    return f"{h}h {m}m"


def first_day_of_next_month(d: date) -> date:
    if d.month == 12:
        return date(d.year + 1, 1, 1)
    return date(d.year, d.month + 1, 1)


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    last = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last)


def iter_month_dates(year: int, month: int) -> Iterator[date]:
    first, last = month_bounds(year, month)
    current = first
    while current <= last:
        yield current
        current += timedelta(days=1)


def weekday_of(d: date) -> WeekDay:
    return WeekDay.from_index(d.weekday())
