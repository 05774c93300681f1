from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import today_local
from ..common.validators import optional_text, require_hr, require_non_negative
from ..core.enums import Role, WeekDay
from ..core.exceptions import ComputationError, NotFoundError, ValidationError
from ..database.transaction import TransactionManager
from ..payroll.calculator.base import EarningsCalculator
from ..payroll.calculator.standard_calculator import StandardEarningsCalculator
from ..payroll.model import WorkingSchedule, as_working_days, validate_schedule
from ..users.model import Employee
from ..users.repository import EmployeeRepository
from . import ledger
from .model import SalaryHistoryEntry
from .repository import SalaryHistoryRepository

logger = logging.getLogger(__name__)


class SalaryHistoryService:
    """Effective-dated salary and working-schedule changes.

    Every change is appended to the ledger. The employee profile keeps the
    currently-effective values plus a "pending" projection of the latest
    future-dated change; a future-dated change never alters today's values.
    """

    def __init__(
        self,
        history: SalaryHistoryRepository,
        employees: EmployeeRepository,
        tx: TransactionManager,
        *,
        calculator: Optional[EarningsCalculator] = None,
    ):
        self._history = history
        self._employees = employees
        self._tx = tx
        self._calculator = calculator or StandardEarningsCalculator()

    def _get_employee(self, user_id: int) -> Employee:
        employee = self._employees.get_by_id(int(user_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def _hourly_rate(self, schedule: WorkingSchedule, effective_from: date) -> Optional[float]:
        expected = self._calculator.monthly_expected_hours(
            schedule.working_days, schedule.daily_hours, effective_from.month, effective_from.year
        )
        try:
            return self._calculator.hourly_rate(schedule.base_salary or 0.0, expected)
        except ComputationError:
            return None

    def record_change(
        self,
        *,
        current_role: Role,
        user_id: int,
        new_base_salary: float,
        new_working_days: Iterable[WeekDay],
        new_daily_hours: float,
        changed_by: int,
        reason: Optional[str] = None,
        notes: Optional[str] = None,
        effective_from: Optional[date] = None,
        today: Optional[date] = None,
    ) -> SalaryHistoryEntry:
        require_hr(current_role)
        today = today or today_local()
        effective_from = effective_from or ledger.next_effective_date(today)
        if effective_from.day != 1:
            raise ValidationError("Effective date must be the first day of a month")

        try:
            working_days = as_working_days(new_working_days)
        except ValueError as exc:
            raise ValidationError("Unknown working day") from exc
        schedule = WorkingSchedule(
            working_days=working_days,
            daily_hours=float(new_daily_hours),
            base_salary=require_non_negative(new_base_salary, "Base salary"),
        )
        validate_schedule(schedule)

        employee = self._get_employee(user_id)
        entries = self._history.list_for_user(employee.user_id)
        current = ledger.current_effective(entries, today, employee.schedule)

        reason = optional_text(reason)
        if schedule.differs_from(current) and not reason:
            raise ValidationError("A reason is required when changing salary or working schedule")

        hourly_rate = self._hourly_rate(schedule, effective_from)

        with self._tx.atomic():
            entry_id = self._history.append(
                user_id=employee.user_id,
                previous_base_salary=current.base_salary,
                previous_schedule=current,
                schedule=schedule,
                hourly_rate=hourly_rate,
                effective_from=effective_from,
                change_reason=reason,
                notes=optional_text(notes),
                changed_by=int(changed_by),
            )
            if effective_from <= today:
                # Backdated or same-day changes are already in force.
                in_force = ledger.current_effective(
                    self._history.list_for_user(employee.user_id), today, employee.schedule
                )
                self._employees.set_schedule(employee.user_id, schedule=in_force)
            self._sync_pending(employee.user_id, today)

        entry = self._history.get_by_id(entry_id)
        if entry is None:
            raise NotFoundError("Salary history entry not found")
        logger.info(
            "Salary change %s recorded for user %s by %s (effective %s)",
            entry_id,
            employee.user_id,
            changed_by,
            effective_from.isoformat(),
        )
        return entry

    def _sync_pending(self, user_id: int, today: date) -> None:
        upcoming = ledger.pending(self._history.list_for_user(user_id), today)
        if upcoming is None:
            self._employees.set_pending(user_id, schedule=None, effective_from=None)
        else:
            self._employees.set_pending(user_id, schedule=upcoming.schedule, effective_from=upcoming.effective_from)

    def current_effective(self, user_id: int, as_of: Optional[date] = None) -> WorkingSchedule:
        employee = self._get_employee(user_id)
        return ledger.current_effective(
            self._history.list_for_user(employee.user_id), as_of or today_local(), employee.schedule
        )

    def pending(self, user_id: int, today: Optional[date] = None) -> Optional[SalaryHistoryEntry]:
        employee = self._get_employee(user_id)
        return ledger.pending(self._history.list_for_user(employee.user_id), today or today_local())

    def history(self, user_id: int) -> Sequence[SalaryHistoryEntry]:
        employee = self._get_employee(user_id)
        return self._history.list_for_user(employee.user_id)

    def apply_due_changes(self, today: Optional[date] = None) -> int:
        """Promote pending projections whose effective date has arrived."""

        today = today or today_local()
        applied = 0
        for employee in self._employees.list_with_pending_due(today):
            entries = self._history.list_for_user(employee.user_id)
            with self._tx.atomic():
                self._employees.set_schedule(
                    employee.user_id,
                    schedule=ledger.current_effective(entries, today, employee.schedule),
                )
                self._sync_pending(employee.user_id, today)
            applied += 1
            logger.info("Applied due salary change for user %s", employee.user_id)
        return applied

    def update_notes(self, *, current_role: Role, entry_id: int, notes: Optional[str]) -> SalaryHistoryEntry:
        require_hr(current_role)
        if not self._history.get_by_id(int(entry_id)):
            raise NotFoundError("Salary history entry not found")
        self._history.update_notes(int(entry_id), notes=optional_text(notes))
        return self._history.get_by_id(int(entry_id))

    def delete_pending(self, *, current_role: Role, entry_id: int, today: Optional[date] = None) -> None:
        require_hr(current_role)
        today = today or today_local()
        entry = self._history.get_by_id(int(entry_id))
        if not entry:
            raise NotFoundError("Salary history entry not found")
        if entry.effective_from <= today:
            raise ValidationError("Only changes that are not yet effective can be deleted")

        with self._tx.atomic():
            self._history.delete(entry.entry_id)
            self._sync_pending(entry.user_id, today)
        logger.info("Deleted pending salary change %s for user %s", entry.entry_id, entry.user_id)
