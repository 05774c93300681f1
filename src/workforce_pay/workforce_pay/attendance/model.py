from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Optional, Tuple

from ..common.datetime_utils import minutes_between
from ..core.enums import AttendanceStatus, CheckInMethod, MarkedBy


@dataclass(frozen=True)
class Break:
    """Break embedded in an attendance record.

    `duration_minutes` is always derived from the start/end pair.
    """

    break_id: str
    start_time: datetime
    end_time: datetime
    duration_minutes: int
    notes: Optional[str] = None

    @classmethod
    def create(cls, start_time: datetime, end_time: datetime, notes: Optional[str] = None) -> "Break":
        return cls(
            break_id=uuid.uuid4().hex,
            start_time=start_time,
            end_time=end_time,
            duration_minutes=minutes_between(start_time, end_time),
            notes=notes,
        )

    def moved_to(self, start_time: datetime, end_time: datetime, notes: Optional[str] = None) -> "Break":
        return replace(
            self,
            start_time=start_time,
            end_time=end_time,
            duration_minutes=minutes_between(start_time, end_time),
            notes=notes,
        )


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance day per (employee, date).

    `total_hours` and `is_valid_day` mirror the persisted derived columns; they are
    informational only, `attendance.resolver` is authoritative.
    """

    attendance_id: int
    user_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    breaks: Tuple[Break, ...] = field(default_factory=tuple)
    notes: Optional[str] = None
    marked_by: Optional[int] = None
    marked_by_role: MarkedBy = MarkedBy.SELF
    check_in_method: CheckInMethod = CheckInMethod.SELF
    wifi_ssid: Optional[str] = None
    wifi_verified: bool = False
    total_hours: float = 0.0
    is_valid_day: bool = False
    version: int = 0

    def find_break(self, break_id: str) -> Optional[Break]:
        for b in self.breaks:
            if b.break_id == break_id:
                return b
        return None


@dataclass(frozen=True)
class DayResolution:
    status: AttendanceStatus
    net_hours: float
    is_valid_day: bool


@dataclass(frozen=True)
class MonthlyAttendanceSummary:
    user_id: int
    year: int
    month: int
    total_days: int
    present_days: int
    incomplete_days: int
    valid_days: int
    total_hours: float
    avg_hours: float
