from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from ..payroll.model import WorkingSchedule, as_working_days
from .model import SalaryHistoryEntry
from .repository import SalaryHistoryRepository

_COLUMNS = """
    entry_id, user_id, previous_base_salary, previous_working_days, previous_daily_hours,
    new_base_salary, working_days, daily_hours,
    hourly_rate, effective_from, change_reason, notes, changed_by, created_at
"""


def _previous_schedule(r: Dict[str, Any]) -> Optional[WorkingSchedule]:
    if r.get("previous_working_days") is None or r.get("previous_daily_hours") is None:
        return None
    base = r.get("previous_base_salary")
    return WorkingSchedule(
        working_days=as_working_days(load_json(r["previous_working_days"], [])),
        daily_hours=float(r["previous_daily_hours"]),
        base_salary=float(base) if base is not None else None,
    )


def _row_to_entry(r: Dict[str, Any]) -> SalaryHistoryEntry:
    return SalaryHistoryEntry(
        entry_id=int(r["entry_id"]),
        user_id=int(r["user_id"]),
        previous_base_salary=float(r["previous_base_salary"]) if r.get("previous_base_salary") is not None else None,
        new_base_salary=float(r["new_base_salary"]),
        schedule=WorkingSchedule(
            working_days=as_working_days(load_json(r.get("working_days"), [])),
            daily_hours=float(r["daily_hours"]),
            base_salary=float(r["new_base_salary"]),
        ),
        hourly_rate=float(r["hourly_rate"]) if r.get("hourly_rate") is not None else None,
        effective_from=r["effective_from"],
        change_reason=r.get("change_reason"),
        notes=r.get("notes"),
        changed_by=int(r["changed_by"]),
        created_at=r["created_at"],
        previous_schedule=_previous_schedule(r),
    )


class MySQLSalaryHistoryRepository(SalaryHistoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, entry_id: int) -> Optional[SalaryHistoryEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM salary_history WHERE entry_id=%s", (int(entry_id),))
            r = fetchone(cur)
            return _row_to_entry(r) if r else None

    def list_for_user(self, user_id: int) -> Sequence[SalaryHistoryEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM salary_history
                WHERE user_id=%s
                ORDER BY effective_from DESC, created_at DESC, entry_id DESC
                """,
                (int(user_id),),
            )
            return [_row_to_entry(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO salary_history(
                    user_id, previous_base_salary, previous_working_days, previous_daily_hours,
                    new_base_salary, working_days, daily_hours,
                    hourly_rate, effective_from, change_reason, notes, changed_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    previous_base_salary,
                    dump_json([d.value for d in previous_schedule.sorted_days()]) if previous_schedule else None,
                    float(previous_schedule.daily_hours) if previous_schedule else None,
                    float(schedule.base_salary or 0),
                    dump_json([d.value for d in schedule.sorted_days()]),
                    float(schedule.daily_hours),
                    hourly_rate,
                    effective_from,
                    change_reason,
                    notes,
                    int(changed_by),
                ),
            )
            return int(cur.lastrowid)

    def update_notes(self, entry_id: int, *, notes: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE salary_history SET notes=%s WHERE entry_id=%s", (notes, int(entry_id)))
            return cur.rowcount > 0

    def delete(self, entry_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM salary_history WHERE entry_id=%s", (int(entry_id),))
            return cur.rowcount > 0
