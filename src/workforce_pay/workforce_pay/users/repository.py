from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..payroll.model import WorkingSchedule
from .model import Employee


class EmployeeRepository(Protocol):
    """Repository port for employee profiles.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_by_organization(self, organization_id: int) -> Sequence[Employee]:
        raise NotImplementedError

    def list_with_pending_due(self, today: date) -> Sequence[Employee]:
        raise NotImplementedError

    def set_schedule(self, user_id: int, *, schedule: WorkingSchedule) -> bool:
        """Overwrite the currently-effective values."""

        raise NotImplementedError

    def set_pending(self, user_id: int, *, schedule: Optional[WorkingSchedule], effective_from: Optional[date]) -> bool:
        raise NotImplementedError

    def set_wifi_verification_required(self, user_id: int, *, required: bool) -> bool:
        raise NotImplementedError
