from datetime import date, datetime

from src.workforce_pay.workforce_pay.common.datetime_utils import (
    first_day_of_next_month,
    format_hours,
    iter_month_dates,
    minutes_between,
    overlap_minutes,
    weekday_of,
)
from src.workforce_pay.workforce_pay.core.enums import WeekDay


def test_first_day_of_next_month_rolls_over_year():
    assert first_day_of_next_month(date(2026, 12, 15)) == date(2027, 1, 1)
    assert first_day_of_next_month(date(2026, 1, 31)) == date(2026, 2, 1)


def test_minutes_between_never_negative():
    assert minutes_between(datetime(2026, 1, 1, 10, 0), datetime(2026, 1, 1, 9, 0)) == 0
    assert minutes_between(datetime(2026, 1, 1, 9, 0), datetime(2026, 1, 1, 9, 45)) == 45


def test_overlap_minutes():
    a = (datetime(2026, 1, 1, 12, 0), datetime(2026, 1, 1, 13, 0))
    b = (datetime(2026, 1, 1, 12, 30), datetime(2026, 1, 1, 14, 0))
    c = (datetime(2026, 1, 1, 13, 0), datetime(2026, 1, 1, 13, 30))

    assert overlap_minutes(*a, *b) == 30
    assert overlap_minutes(*a, *c) == 0


def test_format_hours():
    assert format_hours(8.5) == "8h 30m"
    assert format_hours(0.75) == "45m"
    assert format_hours(8) == "8h"
    assert format_hours(0) == "0m"


def test_month_iteration_and_weekdays():
    days = list(iter_month_dates(2026, 2))

    assert len(days) == 28
    assert weekday_of(date(2026, 3, 2)) is WeekDay.MONDAY
