from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import Role
from ..payroll.model import WorkingSchedule


@dataclass(frozen=True)
class Employee:
    """Domain entity: employee profile.

    `schedule` holds the currently-effective baseline values. A change recorded
    with a future effective date only lands in the `pending_*` projection until
    it becomes due.
    """

    user_id: int
    full_name: str
    role: Role
    organization_id: Optional[int]
    schedule: WorkingSchedule
    wifi_verification_required: bool = False
    pending_schedule: Optional[WorkingSchedule] = None
    pending_effective_from: Optional[date] = None
    is_active: bool = True
