from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import FrozenSet, Iterable, Optional

from ..core.enums import SalaryStatus, WeekDay
from ..core.exceptions import ValidationError


def as_working_days(values: Iterable) -> FrozenSet[WeekDay]:
    return frozenset(v if isinstance(v, WeekDay) else WeekDay(str(v).strip().lower()) for v in values)


@dataclass(frozen=True)
class WorkingSchedule:
    """Working-schedule configuration of an employee profile."""

    working_days: FrozenSet[WeekDay] = field(default_factory=frozenset)
    daily_hours: float = 8.0
    base_salary: Optional[float] = None

    def sorted_days(self) -> list[WeekDay]:
        return sorted(self.working_days, key=lambda d: d.index)

    def differs_from(self, other: "WorkingSchedule") -> bool:
        return (
            set(self.working_days) != set(other.working_days)
            or float(self.daily_hours) != float(other.daily_hours)
            or float(self.base_salary or 0) != float(other.base_salary or 0)
        )


def validate_schedule(schedule: WorkingSchedule) -> None:
    if float(schedule.daily_hours) <= 0:
        raise ValidationError("Daily hours must be greater than 0")
    if schedule.base_salary is not None:
        if float(schedule.base_salary) < 0:
            raise ValidationError("Base salary cannot be negative")
        if not schedule.working_days:
            raise ValidationError("At least one working day is required when a base salary is set")


@dataclass(frozen=True)
class MonthlyEarnings:
    """Derived read-model; recomputed on demand, never the source of truth."""

    user_id: int
    year: int
    month: int
    period_start: date
    period_end: date
    total_hours_worked: float
    valid_days: int
    expected_hours: float
    base_salary: float
    hourly_rate: Optional[float]
    earned_salary: float
    progress: float
    is_final: bool
    # Days the schedule in force on the 1st puts to work this month.
    scheduled_days: int = 0


@dataclass(frozen=True)
class SalarySlip:
    slip_id: int
    user_id: int
    month: int
    year: int
    base_salary: float
    earned_salary: float
    allowances: float
    deductions: float
    bonus: float
    working_days: int
    present_days: int
    status: SalaryStatus
    created_by: int
    created_at: datetime
    approved_by: Optional[int] = None
    payment_date: Optional[date] = None
    notes: Optional[str] = None

    @property
    def net_salary(self) -> float:
        return round(self.earned_salary + self.allowances + self.bonus - self.deductions, 2)
