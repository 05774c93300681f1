from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import SalaryStatus
from .model import SalarySlip


class SalarySlipRepository(Protocol):
    def get_by_id(self, slip_id: int) -> Optional[SalarySlip]:
        raise NotImplementedError

    def get_for_user_and_month(self, user_id: int, year: int, month: int) -> Optional[SalarySlip]:
        raise NotImplementedError

    def list_slips(
        self,
        *,
        user_id: Optional[int] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
        status: Optional[SalaryStatus] = None,
        limit: int = 200,
    ) -> Sequence[SalarySlip]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        year: int,
        month: int,
        base_salary: float,
        earned_salary: float,
        allowances: float,
        deductions: float,
        bonus: float,
        working_days: int,
        present_days: int,
        created_by: int,
        notes: Optional[str],
    ) -> int:
        raise NotImplementedError

    def update_amounts(
        self,
        slip_id: int,
        *,
        allowances: float,
        deductions: float,
        bonus: float,
        notes: Optional[str],
    ) -> bool:
        """Only applies while the slip is DRAFT."""

        raise NotImplementedError

    def update_status(
        self,
        slip_id: int,
        *,
        expected_status: SalaryStatus,
        status: SalaryStatus,
        approved_by: Optional[int],
        payment_date: Optional[date],
    ) -> bool:
        raise NotImplementedError

    def delete_draft(self, slip_id: int) -> bool:
        raise NotImplementedError
