from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import SalaryStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import SalarySlip
from .repository import SalarySlipRepository

_COLUMNS = """
    slip_id, user_id, month, year, base_salary, earned_salary, allowances, deductions, bonus,
    working_days, present_days, status, created_by, created_at, approved_by, payment_date, notes
"""


def _row_to_slip(r: Dict[str, Any]) -> SalarySlip:
    return SalarySlip(
        slip_id=int(r["slip_id"]),
        user_id=int(r["user_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        base_salary=float(r["base_salary"]),
        earned_salary=float(r["earned_salary"]),
        allowances=float(r["allowances"] or 0),
        deductions=float(r["deductions"] or 0),
        bonus=float(r["bonus"] or 0),
        working_days=int(r["working_days"] or 0),
        present_days=int(r["present_days"] or 0),
        status=SalaryStatus(r["status"]),
        created_by=int(r["created_by"]),
        created_at=r["created_at"],
        approved_by=r.get("approved_by"),
        payment_date=r.get("payment_date"),
        notes=r.get("notes"),
    )


class MySQLSalarySlipRepository(SalarySlipRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, slip_id: int) -> Optional[SalarySlip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM salary_slips WHERE slip_id=%s", (int(slip_id),))
            r = fetchone(cur)
            return _row_to_slip(r) if r else None

    def get_for_user_and_month(self, user_id: int, year: int, month: int) -> Optional[SalarySlip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM salary_slips WHERE user_id=%s AND year=%s AND month=%s",
                (int(user_id), int(year), int(month)),
            )
            r = fetchone(cur)
            return _row_to_slip(r) if r else None

    def list_slips(
        self,
        *,
        user_id: Optional[int] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
        status: Optional[SalaryStatus] = None,
        limit: int = 200,
    ) -> Sequence[SalarySlip]:
        clauses = ["1=1"]
        params: list[object] = []

        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))
        if year is not None:
            clauses.append("year=%s")
            params.append(int(year))
        if month is not None:
            clauses.append("month=%s")
            params.append(int(month))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM salary_slips
                WHERE {where}
                ORDER BY year DESC, month DESC, slip_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_row_to_slip(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO salary_slips(
                    user_id, year, month, base_salary, earned_salary, allowances, deductions, bonus,
                    working_days, present_days, status, created_by, notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    int(year),
                    int(month),
                    base_salary,
                    earned_salary,
                    allowances,
                    deductions,
                    bonus,
                    int(working_days),
                    int(present_days),
                    SalaryStatus.DRAFT.value,
                    int(created_by),
                    notes,
                ),
            )
            return int(cur.lastrowid)

    def update_amounts(
        self,
        slip_id: int,
        *,
        allowances: float,
        deductions: float,
        bonus: float,
        notes: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE salary_slips
                SET allowances=%s, deductions=%s, bonus=%s, notes=%s
                WHERE slip_id=%s AND status=%s
                """,
                (allowances, deductions, bonus, notes, int(slip_id), SalaryStatus.DRAFT.value),
            )
            return cur.rowcount > 0

    def update_status(
        self,
        slip_id: int,
        *,
        expected_status: SalaryStatus,
        status: SalaryStatus,
        approved_by: Optional[int],
        payment_date: Optional[date],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE salary_slips
                SET status=%s, approved_by=%s, payment_date=%s
                WHERE slip_id=%s AND status=%s
                """,
                (status.value, approved_by, payment_date, int(slip_id), expected_status.value),
            )
            return cur.rowcount > 0

    def delete_draft(self, slip_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM salary_slips WHERE slip_id=%s AND status=%s",
                (int(slip_id), SalaryStatus.DRAFT.value),
            )
            return cur.rowcount > 0
