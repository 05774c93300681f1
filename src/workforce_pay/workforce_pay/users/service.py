from __future__ import annotations

from typing import Sequence

from ..common.validators import require_hr
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError
from .model import Employee
from .repository import EmployeeRepository


class EmployeeService:
    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def get(self, user_id: int) -> Employee:
        employee = self._employees.get_by_id(int(user_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def get_for_caller(self, *, current_role: Role, caller_id: int, user_id: int) -> Employee:
        """Employees may read their own profile; HR may read anyone's."""
        if int(caller_id) != int(user_id) and not Role(current_role).is_hr:
            raise AuthorizationError("You can only view your own profile")
        return self.get(user_id)

    def list_for_organization(self, *, current_role: Role, organization_id: int) -> Sequence[Employee]:
        require_hr(current_role)
        return self._employees.list_by_organization(int(organization_id))

    def to_ui(self, employee: Employee) -> dict:
        s = employee.schedule
        pending = employee.pending_schedule
        return {
            "user_id": employee.user_id,
            "full_name": employee.full_name,
            "role": employee.role.value,
            "organization_id": employee.organization_id,
            "base_salary": s.base_salary,
            "working_days": [d.value for d in s.sorted_days()],
            "daily_hours": s.daily_hours,
            "wifi_verification_required": employee.wifi_verification_required,
            "pending": (
                {
                    "base_salary": pending.base_salary,
                    "working_days": [d.value for d in pending.sorted_days()],
                    "daily_hours": pending.daily_hours,
                    "effective_from": employee.pending_effective_from.isoformat(),
                }
                if pending is not None and employee.pending_effective_from is not None
                else None
            ),
        }
