from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import BreakRequest
from .repository import BreakRequestRepository

_COLUMNS = """
    request_id, user_id, attendance_id, request_date,
    requested_start, requested_end, reason, status, requested_by, created_at,
    approved_start, approved_end, duration_minutes, break_id, notes,
    reviewed_by, reviewed_at, reviewer_notes
"""


def _row_to_request(r: Dict[str, Any]) -> BreakRequest:
    return BreakRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        attendance_id=int(r["attendance_id"]),
        request_date=r["request_date"],
        requested_start=r.get("requested_start"),
        requested_end=r.get("requested_end"),
        reason=r.get("reason"),
        status=RequestStatus(r["status"]),
        requested_by=int(r["requested_by"]),
        created_at=r["created_at"],
        approved_start=r.get("approved_start"),
        approved_end=r.get("approved_end"),
        duration_minutes=r.get("duration_minutes"),
        break_id=r.get("break_id"),
        notes=r.get("notes"),
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=r.get("reviewed_at"),
        reviewer_notes=r.get("reviewer_notes"),
    )


class MySQLBreakRequestRepository(BreakRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, request_id: int) -> Optional[BreakRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM break_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _row_to_request(r) if r else None

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        user_id: Optional[int] = None,
        attendance_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[BreakRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))
        if attendance_id is not None:
            clauses.append("attendance_id=%s")
            params.append(int(attendance_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM break_requests
                WHERE {where}
                ORDER BY created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_row_to_request(r) for r in fetchall(cur)]

    def list_pending_started_before(self, moment: datetime) -> Sequence[BreakRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM break_requests
                WHERE status=%s AND requested_start IS NOT NULL AND requested_start<=%s
                """,
                (RequestStatus.PENDING.value, moment),
            )
            return [_row_to_request(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        user_id: int,
        attendance_id: int,
        request_date: date,
        requested_start: Optional[datetime],
        requested_end: Optional[datetime],
        reason: Optional[str],
        requested_by: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO break_requests(
                    user_id, attendance_id, request_date, requested_start, requested_end,
                    reason, status, requested_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    int(attendance_id),
                    request_date,
                    requested_start,
                    requested_end,
                    reason,
                    RequestStatus.PENDING.value,
                    int(requested_by),
                ),
            )
            return int(cur.lastrowid)

    def create_approved(
        self,
        *,
        user_id: int,
        attendance_id: int,
        request_date: date,
        approved_start: datetime,
        approved_end: datetime,
        duration_minutes: int,
        break_id: str,
        reason: str,
        notes: Optional[str],
        assigned_by: int,
        reviewed_at: datetime,
        reviewer_notes: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO break_requests(
                    user_id, attendance_id, request_date, requested_start, requested_end,
                    approved_start, approved_end, duration_minutes, break_id,
                    reason, notes, status, requested_by, reviewed_by, reviewed_at, reviewer_notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    int(attendance_id),
                    request_date,
                    approved_start,
                    approved_end,
                    approved_start,
                    approved_end,
                    int(duration_minutes),
                    break_id,
                    reason,
                    notes,
                    RequestStatus.APPROVED.value,
                    int(assigned_by),
                    int(assigned_by),
                    reviewed_at,
                    reviewer_notes,
                ),
            )
            return int(cur.lastrowid)

    def mark_approved(
        self,
        *,
        request_id: int,
        approved_start: datetime,
        approved_end: datetime,
        duration_minutes: int,
        break_id: str,
        reviewed_by: int,
        reviewed_at: datetime,
        reviewer_notes: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE break_requests
                SET status=%s, approved_start=%s, approved_end=%s, duration_minutes=%s, break_id=%s,
                    reviewed_by=%s, reviewed_at=%s, reviewer_notes=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    RequestStatus.APPROVED.value,
                    approved_start,
                    approved_end,
                    int(duration_minutes),
                    break_id,
                    int(reviewed_by),
                    reviewed_at,
                    reviewer_notes,
                    int(request_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def mark_rejected(
        self,
        *,
        request_id: int,
        reviewed_by: Optional[int],
        reviewed_at: datetime,
        reviewer_notes: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE break_requests
                SET status=%s, reviewed_by=%s, reviewed_at=%s, reviewer_notes=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    RequestStatus.REJECTED.value,
                    reviewed_by,
                    reviewed_at,
                    reviewer_notes,
                    int(request_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def update_approved(
        self,
        *,
        request_id: int,
        approved_start: datetime,
        approved_end: datetime,
        duration_minutes: int,
        notes: Optional[str],
        reviewed_by: int,
        reviewed_at: datetime,
        reviewer_notes: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE break_requests
                SET approved_start=%s, approved_end=%s, duration_minutes=%s, notes=%s,
                    reviewed_by=%s, reviewed_at=%s, reviewer_notes=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    approved_start,
                    approved_end,
                    int(duration_minutes),
                    notes,
                    int(reviewed_by),
                    reviewed_at,
                    reviewer_notes,
                    int(request_id),
                    RequestStatus.APPROVED.value,
                ),
            )
            return cur.rowcount > 0

    def delete_pending(self, *, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM break_requests WHERE request_id=%s AND status=%s",
                (int(request_id), RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0
