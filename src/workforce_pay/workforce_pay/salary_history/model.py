from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..payroll.model import WorkingSchedule


@dataclass(frozen=True)
class SalaryHistoryEntry:
    """Append-only ledger row: a salary/schedule change and the month it takes effect."""

    entry_id: int
    user_id: int
    previous_base_salary: Optional[float]
    new_base_salary: float
    schedule: WorkingSchedule
    hourly_rate: Optional[float]
    effective_from: date
    change_reason: Optional[str]
    changed_by: int
    created_at: datetime
    notes: Optional[str] = None
    # Schedule in force when the change was recorded; None on rows written before it was tracked.
    previous_schedule: Optional[WorkingSchedule] = None
