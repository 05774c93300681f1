from __future__ import annotations

from typing import Iterable

from ...common.datetime_utils import iter_month_dates, weekday_of
from ...core.enums import WeekDay
from ...core.exceptions import ComputationError
from .base import EarningsCalculator


class StandardEarningsCalculator(EarningsCalculator):
    """Pro-rata rule: base × valid / expected, capped at the base salary."""

    def monthly_working_days(self, working_days: Iterable[WeekDay], month: int, year: int) -> int:
        days = set(working_days)
        return sum(1 for d in iter_month_dates(year, month) if weekday_of(d) in days)

    def monthly_expected_hours(self, working_days: Iterable[WeekDay], daily_hours: float, month: int, year: int) -> float:
        return round(self.monthly_working_days(working_days, month, year) * float(daily_hours), 2)

    def hourly_rate(self, base_salary: float, expected_hours: float) -> float:
        if expected_hours <= 0:
            raise ComputationError("Hourly rate is undefined when no hours are expected")
        return round(float(base_salary) / float(expected_hours), 2)

    def earned_salary(self, valid_hours: float, expected_hours: float, base_salary: float) -> float:
        if expected_hours <= 0:
            return 0.0
        base = float(base_salary)
        earned = base * float(valid_hours) / float(expected_hours)
        # No overtime pay: a month never earns more than its base.
        return round(min(base, earned), 2)
