from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Sequence

from ..attendance import resolver
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, today_local
from ..common.validators import optional_text, require_hr, require_non_negative
from ..core.constants import DEFAULT_MINIMUM_VALID_HOURS
from ..core.enums import AttendanceStatus, Role, SalaryStatus
from ..core.exceptions import ComputationError, ConcurrencyConflict, NotFoundError, ValidationError
from ..salary_history import ledger
from ..salary_history.repository import SalaryHistoryRepository
from ..users.model import Employee
from ..users.repository import EmployeeRepository
from .calculator.base import EarningsCalculator
from .calculator.standard_calculator import StandardEarningsCalculator
from .model import MonthlyEarnings, SalarySlip
from .repository import SalarySlipRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrganizationStats:
    rows: list[dict]
    employee_count: int
    total_earned: float
    total_hours: float
    total_expected_hours: float
    average_earned: float
    average_hours: float


class EarningsService:
    """Monthly earnings computed on read from attendance and the salary ledger."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        history: SalaryHistoryRepository,
        *,
        calculator: Optional[EarningsCalculator] = None,
        minimum_hours: float = DEFAULT_MINIMUM_VALID_HOURS,
    ):
        self._attendance = attendance
        self._employees = employees
        self._history = history
        self._calculator = calculator or StandardEarningsCalculator()
        self._minimum_hours = float(minimum_hours)

    def _get_employee(self, user_id: int) -> Employee:
        employee = self._employees.get_by_id(int(user_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def monthly_earnings(self, user_id: int, year: int, month: int, today: Optional[date] = None) -> MonthlyEarnings:
        employee = self._get_employee(user_id)
        return self._earnings_for(employee, year, month, today or today_local())

    def current_month_earnings(self, user_id: int, today: Optional[date] = None) -> MonthlyEarnings:
        today = today or today_local()
        return self.monthly_earnings(user_id, today.year, today.month, today)

    def _earnings_for(self, employee: Employee, year: int, month: int, today: date) -> MonthlyEarnings:
        month_start, month_end = month_bounds(year, month)

        # The schedule in force on the 1st governs the whole month.
        schedule = ledger.current_effective(
            self._history.list_for_user(employee.user_id), month_start, employee.schedule
        )
        base_salary = float(schedule.base_salary or 0.0)
        expected = self._calculator.monthly_expected_hours(schedule.working_days, schedule.daily_hours, month, year)

        if today < month_start:
            period_end = month_start - timedelta(days=1)
            records = []
        else:
            period_end = min(today, month_end)
            records = self._attendance.list_for_user_between(employee.user_id, month_start, period_end)

        valid_hours = resolver.valid_hours_sum(records, self._minimum_hours)
        valid_days = sum(1 for r in records if resolver.is_valid_day(r, self._minimum_hours))

        try:
            hourly_rate: Optional[float] = self._calculator.hourly_rate(base_salary, expected)
        except ComputationError:
            hourly_rate = None

        return MonthlyEarnings(
            user_id=employee.user_id,
            year=year,
            month=month,
            period_start=month_start,
            period_end=period_end,
            total_hours_worked=valid_hours,
            valid_days=valid_days,
            expected_hours=expected,
            base_salary=base_salary,
            hourly_rate=hourly_rate,
            earned_salary=self._calculator.earned_salary(valid_hours, expected, base_salary),
            progress=round(min(valid_hours / expected, 1.0), 4) if expected > 0 else 0.0,
            is_final=today > month_end,
            scheduled_days=self._calculator.monthly_working_days(schedule.working_days, month, year),
        )

    def organization_stats(
        self,
        organization_id: int,
        year: int,
        month: int,
        today: Optional[date] = None,
    ) -> OrganizationStats:
        today = today or today_local()
        rows: list[dict] = []
        for employee in self._employees.list_by_organization(int(organization_id)):
            e = self._earnings_for(employee, year, month, today)
            rows.append(
                {
                    "user_id": employee.user_id,
                    "full_name": employee.full_name,
                    "base_salary": e.base_salary,
                    "expected_hours": e.expected_hours,
                    "total_hours_worked": e.total_hours_worked,
                    "valid_days": e.valid_days,
                    "earned_salary": e.earned_salary,
                    "progress": e.progress,
                }
            )

        rows.sort(key=lambda x: x["earned_salary"], reverse=True)
        count = len(rows)
        total_earned = round(sum(r["earned_salary"] for r in rows), 2)
        total_hours = round(sum(r["total_hours_worked"] for r in rows), 2)
        return OrganizationStats(
            rows=rows,
            employee_count=count,
            total_earned=total_earned,
            total_hours=total_hours,
            total_expected_hours=round(sum(r["expected_hours"] for r in rows), 2),
            average_earned=round(total_earned / count, 2) if count else 0.0,
            average_hours=round(total_hours / count, 2) if count else 0.0,
        )


# Allowed salary slip transitions.
_SLIP_TRANSITIONS = {
    SalaryStatus.DRAFT: {SalaryStatus.PENDING},
    SalaryStatus.PENDING: {SalaryStatus.APPROVED, SalaryStatus.DRAFT},
    SalaryStatus.APPROVED: {SalaryStatus.PAID},
    SalaryStatus.PAID: set(),
}


class SalarySlipService:
    def __init__(self, slips: SalarySlipRepository, earnings: EarningsService, attendance: AttendanceRepository):
        self._slips = slips
        self._earnings = earnings
        self._attendance = attendance

    def get(self, slip_id: int) -> SalarySlip:
        slip = self._slips.get_by_id(int(slip_id))
        if not slip:
            raise NotFoundError("Salary slip not found")
        return slip

    def create_draft(
        self,
        *,
        current_role: Role,
        created_by: int,
        user_id: int,
        year: int,
        month: int,
        allowances: float = 0.0,
        deductions: float = 0.0,
        bonus: float = 0.0,
        notes: Optional[str] = None,
        today: Optional[date] = None,
    ) -> SalarySlip:
        require_hr(current_role)
        if not 1 <= int(month) <= 12:
            raise ValidationError("Month must be between 1 and 12")
        if self._slips.get_for_user_and_month(int(user_id), int(year), int(month)):
            raise ValidationError("A salary slip already exists for this month")

        earnings = self._earnings.monthly_earnings(user_id, int(year), int(month), today)
        records = self._attendance.list_for_user_between(int(user_id), earnings.period_start, earnings.period_end)
        present_days = sum(1 for r in records if resolver.resolve_status(r) is AttendanceStatus.PRESENT)

        slip_id = self._slips.create(
            user_id=int(user_id),
            year=int(year),
            month=int(month),
            base_salary=earnings.base_salary,
            earned_salary=earnings.earned_salary,
            allowances=require_non_negative(allowances, "Allowances"),
            deductions=require_non_negative(deductions, "Deductions"),
            bonus=require_non_negative(bonus, "Bonus"),
            working_days=earnings.scheduled_days,
            present_days=present_days,
            created_by=int(created_by),
            notes=optional_text(notes),
        )
        logger.info("Salary slip %s drafted for user %s (%s-%02d)", slip_id, user_id, year, int(month))
        return self.get(slip_id)

    def update_draft(
        self,
        *,
        current_role: Role,
        slip_id: int,
        allowances: float,
        deductions: float,
        bonus: float,
        notes: Optional[str] = None,
    ) -> SalarySlip:
        require_hr(current_role)
        slip = self.get(slip_id)
        if slip.status is not SalaryStatus.DRAFT:
            raise ValidationError("Only draft salary slips can be edited")
        ok = self._slips.update_amounts(
            slip.slip_id,
            allowances=require_non_negative(allowances, "Allowances"),
            deductions=require_non_negative(deductions, "Deductions"),
            bonus=require_non_negative(bonus, "Bonus"),
            notes=optional_text(notes),
        )
        if not ok:
            raise ValidationError("Only draft salary slips can be edited")
        return self.get(slip.slip_id)

    def advance_status(
        self,
        *,
        current_role: Role,
        actor_id: int,
        slip_id: int,
        status: SalaryStatus,
        payment_date: Optional[date] = None,
    ) -> SalarySlip:
        require_hr(current_role)
        slip = self.get(slip_id)
        target = SalaryStatus(status)
        if target not in _SLIP_TRANSITIONS[slip.status]:
            raise ValidationError(f"Cannot move salary slip from {slip.status.value} to {target.value}")

        approved_by = slip.approved_by
        paid_on = slip.payment_date
        if target is SalaryStatus.APPROVED:
            approved_by = int(actor_id)
        elif target is SalaryStatus.PAID:
            approved_by = approved_by or int(actor_id)
            paid_on = payment_date or today_local()
        elif target is SalaryStatus.DRAFT:
            approved_by = None

        ok = self._slips.update_status(
            slip.slip_id,
            expected_status=slip.status,
            status=target,
            approved_by=approved_by,
            payment_date=paid_on,
        )
        if not ok:
            raise ConcurrencyConflict("Salary slip status changed concurrently; reload and retry")
        logger.info("Salary slip %s moved %s -> %s by %s", slip.slip_id, slip.status.value, target.value, actor_id)
        return self.get(slip.slip_id)

    def delete_draft(self, *, current_role: Role, slip_id: int) -> None:
        require_hr(current_role)
        slip = self.get(slip_id)
        if slip.status is not SalaryStatus.DRAFT or not self._slips.delete_draft(slip.slip_id):
            raise ValidationError("Only draft salary slips can be deleted")

    def list_for_user(self, user_id: int, *, year: Optional[int] = None) -> Sequence[SalarySlip]:
        return self._slips.list_slips(user_id=int(user_id), year=year)

    def list_for_month(self, *, current_role: Role, year: int, month: int) -> Sequence[SalarySlip]:
        require_hr(current_role)
        return self._slips.list_slips(year=int(year), month=int(month))
