from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, dump_json, fetchall, fetchone, load_json
from ..payroll.model import WorkingSchedule, as_working_days
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    user_id, full_name, role, organization_id,
    base_salary, working_days, daily_hours,
    pending_base_salary, pending_working_days, pending_daily_hours, pending_effective_from,
    wifi_verification_required, is_active
"""


def _schedule(base_salary: Any, working_days: Any, daily_hours: Any) -> WorkingSchedule:
    return WorkingSchedule(
        working_days=as_working_days(load_json(working_days, [])),
        daily_hours=float(daily_hours) if daily_hours is not None else 8.0,
        base_salary=float(base_salary) if base_salary is not None else None,
    )


def _row_to_employee(r: Dict[str, Any]) -> Employee:
    pending = None
    if r.get("pending_effective_from") is not None:
        pending = _schedule(r.get("pending_base_salary"), r.get("pending_working_days"), r.get("pending_daily_hours"))
    return Employee(
        user_id=int(r["user_id"]),
        full_name=r["full_name"],
        role=Role(r["role"]),
        organization_id=r.get("organization_id"),
        schedule=_schedule(r.get("base_salary"), r.get("working_days"), r.get("daily_hours")),
        wifi_verification_required=as_bool(r.get("wifi_verification_required")),
        pending_schedule=pending,
        pending_effective_from=r.get("pending_effective_from"),
        is_active=as_bool(r.get("is_active", 1)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def list_by_organization(self, organization_id: int) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE organization_id=%s AND is_active=1 ORDER BY full_name",
                (int(organization_id),),
            )
            return [_row_to_employee(r) for r in fetchall(cur)]

    def list_with_pending_due(self, today: date) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE pending_effective_from IS NOT NULL AND pending_effective_from<=%s",
                (today,),
            )
            return [_row_to_employee(r) for r in fetchall(cur)]

    def set_schedule(self, user_id: int, *, schedule: WorkingSchedule) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET base_salary=%s, working_days=%s, daily_hours=%s
                WHERE user_id=%s
                """,
                (
                    schedule.base_salary,
                    dump_json([d.value for d in schedule.sorted_days()]),
                    float(schedule.daily_hours),
                    int(user_id),
                ),
            )
            return cur.rowcount > 0

    def set_pending(self, user_id: int, *, schedule: Optional[WorkingSchedule], effective_from: Optional[date]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET pending_base_salary=%s, pending_working_days=%s, pending_daily_hours=%s,
                    pending_effective_from=%s
                WHERE user_id=%s
                """,
                (
                    schedule.base_salary if schedule else None,
                    dump_json([d.value for d in schedule.sorted_days()]) if schedule else None,
                    float(schedule.daily_hours) if schedule else None,
                    effective_from,
                    int(user_id),
                ),
            )
            return cur.rowcount > 0

    def set_wifi_verification_required(self, user_id: int, *, required: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET wifi_verification_required=%s WHERE user_id=%s",
                (1 if required else 0, int(user_id)),
            )
            return cur.rowcount > 0
