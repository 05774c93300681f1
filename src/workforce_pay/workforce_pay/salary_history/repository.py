from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..payroll.model import WorkingSchedule
from .model import SalaryHistoryEntry


class SalaryHistoryRepository(Protocol):
    def get_by_id(self, entry_id: int) -> Optional[SalaryHistoryEntry]:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[SalaryHistoryEntry]:
        """Newest first."""

        raise NotImplementedError

    def append(
        self,
        *,
        user_id: int,
        previous_base_salary: Optional[float],
        previous_schedule: Optional[WorkingSchedule],
        schedule: WorkingSchedule,
        hourly_rate: Optional[float],
        effective_from: date,
        change_reason: Optional[str],
        notes: Optional[str],
        changed_by: int,
    ) -> int:
        raise NotImplementedError

    def update_notes(self, entry_id: int, *, notes: Optional[str]) -> bool:
        raise NotImplementedError

    def delete(self, entry_id: int) -> bool:
        raise NotImplementedError
