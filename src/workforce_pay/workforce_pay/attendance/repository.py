from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import CheckInMethod, MarkedBy
from .model import AttendanceRecord, Break


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_user_between(self, user_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

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
        raise NotImplementedError

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
        """Conditional update; returns False when `expected_version` is stale."""

        raise NotImplementedError

    def update_breaks(
        self,
        *,
        attendance_id: int,
        expected_version: int,
        breaks: Sequence[Break],
        total_hours: float,
        is_valid_day: bool,
    ) -> bool:
        """Conditional update of the break list; returns False when `expected_version` is stale."""

        raise NotImplementedError
