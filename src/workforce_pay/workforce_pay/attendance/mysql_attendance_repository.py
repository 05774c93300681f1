from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import CheckInMethod, MarkedBy
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, dump_json, fetchall, fetchone, load_json
from .model import AttendanceRecord, Break
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, user_id, work_date, check_in_time, check_out_time, breaks, notes,
    marked_by, marked_by_role, check_in_method, wifi_ssid, wifi_verified,
    total_hours, is_valid_day, version
"""


def _breaks_to_json(breaks: Sequence[Break]) -> str:
    return dump_json(
        [
            {
                "break_id": b.break_id,
                "start_time": b.start_time.isoformat(),
                "end_time": b.end_time.isoformat(),
                "duration_minutes": int(b.duration_minutes),
                "notes": b.notes,
            }
            for b in breaks
        ]
    )


def _breaks_from_json(value: Any, attendance_id: int) -> tuple[Break, ...]:
    out: list[Break] = []
    for index, item in enumerate(load_json(value, []) or []):
        out.append(
            Break(
                # Rows written before break ids existed get a stable positional id.
                break_id=str(item.get("break_id") or f"{attendance_id}-{index}"),
                start_time=datetime.fromisoformat(item["start_time"]),
                end_time=datetime.fromisoformat(item["end_time"]),
                duration_minutes=int(item.get("duration_minutes") or 0),
                notes=item.get("notes"),
            )
        )
    return tuple(out)


def _row_to_record(r: Dict[str, Any]) -> AttendanceRecord:
    attendance_id = int(r["attendance_id"])
    return AttendanceRecord(
        attendance_id=attendance_id,
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        breaks=_breaks_from_json(r.get("breaks"), attendance_id),
        notes=r.get("notes"),
        marked_by=r.get("marked_by"),
        marked_by_role=MarkedBy(r.get("marked_by_role") or MarkedBy.SELF.value),
        check_in_method=CheckInMethod(r.get("check_in_method") or CheckInMethod.SELF.value),
        wifi_ssid=r.get("wifi_ssid"),
        wifi_verified=as_bool(r.get("wifi_verified")),
        total_hours=float(r.get("total_hours") or 0),
        is_valid_day=as_bool(r.get("is_valid_day")),
        version=int(r.get("version") or 0),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE user_id=%s AND work_date=%s",
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list_for_user_between(self, user_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date
                """,
                (int(user_id), start_date, end_date),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        marked_by: int,
        marked_by_role: MarkedBy,
        check_in_method: CheckInMethod,
        check_out_time: Optional[datetime] = None,
        notes: Optional[str] = None,
        wifi_ssid: Optional[str] = None,
        wifi_verified: bool = False,
        total_hours: float = 0.0,
        is_valid_day: bool = False,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    user_id, work_date, check_in_time, check_out_time, breaks, notes,
                    marked_by, marked_by_role, check_in_method, wifi_ssid, wifi_verified,
                    total_hours, is_valid_day, version
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,0)
                """,
                (
                    int(user_id),
                    work_date,
                    check_in_time,
                    check_out_time,
                    _breaks_to_json(()),
                    notes,
                    int(marked_by),
                    marked_by_role.value,
                    check_in_method.value,
                    wifi_ssid,
                    1 if wifi_verified else 0,
                    float(total_hours),
                    1 if is_valid_day else 0,
                ),
            )
            return int(cur.lastrowid)

    def update_times(
        self,
        *,
        attendance_id: int,
        expected_version: int,
        check_in_time: Optional[datetime],
        check_out_time: Optional[datetime],
        notes: Optional[str],
        total_hours: float,
        is_valid_day: bool,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, check_out_time=%s, notes=%s,
                    total_hours=%s, is_valid_day=%s, version=version+1
                WHERE attendance_id=%s AND version=%s
                """,
                (
                    check_in_time,
                    check_out_time,
                    notes,
                    float(total_hours),
                    1 if is_valid_day else 0,
                    int(attendance_id),
                    int(expected_version),
                ),
            )
            return cur.rowcount > 0

    def update_breaks(
        self,
        *,
        attendance_id: int,
        expected_version: int,
        breaks: Sequence[Break],
        total_hours: float,
        is_valid_day: bool,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET breaks=%s, total_hours=%s, is_valid_day=%s, version=version+1
                WHERE attendance_id=%s AND version=%s
                """,
                (
                    _breaks_to_json(breaks),
                    float(total_hours),
                    1 if is_valid_day else 0,
                    int(attendance_id),
                    int(expected_version),
                ),
            )
            return cur.rowcount > 0
