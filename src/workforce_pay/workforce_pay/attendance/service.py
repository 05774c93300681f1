from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, Optional

from ..common.datetime_utils import format_hours, month_bounds, now_local, weekday_of
from ..common.retry import retry_on_conflict
from ..common.validators import optional_text, require_hr
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_MINIMUM_VALID_HOURS
from ..core.enums import AttendanceStatus, CheckInMethod, MarkedBy, Role
from ..core.exceptions import ConcurrencyConflict, NotFoundError, ValidationError
from ..users.model import Employee
from ..users.repository import EmployeeRepository
from ..wifi.gate import WiFiGate
from ..wifi.repository import OfficeNetworkRepository
from . import resolver
from .model import AttendanceRecord, Break, MonthlyAttendanceSummary
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def ensure_breaks_within(check_in: Optional[datetime], check_out: Optional[datetime], breaks: Iterable[Break]) -> None:
    for b in breaks:
        if check_in is not None and b.start_time < check_in:
            raise ValidationError("Attendance window would exclude an existing break")
        if check_out is not None and b.end_time > check_out:
            raise ValidationError("Check-out cannot be before the end of an existing break")


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        networks: OfficeNetworkRepository,
        *,
        gate: Optional[WiFiGate] = None,
        minimum_hours: float = DEFAULT_MINIMUM_VALID_HOURS,
    ):
        self._attendance = attendance
        self._employees = employees
        self._networks = networks
        self._gate = gate or WiFiGate()
        self._minimum_hours = float(minimum_hours)

    def _get_employee(self, user_id: int) -> Employee:
        employee = self._employees.get_by_id(int(user_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def _allowed_ssids(self, employee: Employee) -> list[str]:
        if employee.organization_id is None:
            return []
        return [n.ssid for n in self._networks.list_for_organization(employee.organization_id, active_only=True)]

    def check_in(
        self,
        user_id: int,
        *,
        now: Optional[datetime] = None,
        current_ssid: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        now = now or now_local()
        today = now.date()

        employee = self._get_employee(user_id)
        verification = self._gate.verify(employee, current_ssid, self._allowed_ssids(employee))

        if self._attendance.get_for_user_and_date(employee.user_id, today):
            raise ValidationError("You have already checked in today")

        attendance_id = self._attendance.create_checkin(
            user_id=employee.user_id,
            work_date=today,
            check_in_time=now,
            marked_by=employee.user_id,
            marked_by_role=MarkedBy.SELF,
            check_in_method=CheckInMethod.SELF,
            notes=optional_text(notes),
            wifi_ssid=verification.current_ssid,
            wifi_verified=verification.is_verified and verification.is_required,
        )
        logger.info("User %s checked in at %s (record %s)", employee.user_id, now.isoformat(), attendance_id)
        return attendance_id

    def check_out(self, user_id: int, *, now: Optional[datetime] = None, notes: Optional[str] = None) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()

        def _attempt() -> AttendanceRecord:
            record = self._attendance.get_for_user_and_date(int(user_id), today)
            if not record:
                raise NotFoundError("You have not checked in today")
            if record.check_out_time is not None:
                raise ValidationError("You have already checked out")
            if record.check_in_time is None or now <= record.check_in_time:
                raise ValidationError("Check-out must be after check-in")
            ensure_breaks_within(record.check_in_time, now, record.breaks)

            updated = replace(record, check_out_time=now, notes=optional_text(notes) or record.notes)
            day = resolver.resolve_day(updated, self._minimum_hours)
            ok = self._attendance.update_times(
                attendance_id=record.attendance_id,
                expected_version=record.version,
                check_in_time=updated.check_in_time,
                check_out_time=updated.check_out_time,
                notes=updated.notes,
                total_hours=day.net_hours,
                is_valid_day=day.is_valid_day,
            )
            if not ok:
                raise ConcurrencyConflict("Attendance record changed during check-out")
            return replace(updated, total_hours=day.net_hours, is_valid_day=day.is_valid_day, version=record.version + 1)

        record = retry_on_conflict(_attempt, label="check-out")
        logger.info("User %s checked out at %s (%.2fh)", user_id, now.isoformat(), record.total_hours)
        return record

    def mark_attendance(
        self,
        *,
        current_role: Role,
        marked_by: int,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        check_out_time: Optional[datetime] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> int:
        """HR create-or-update of an employee's attendance day."""

        require_hr(current_role)
        now = now or now_local()

        employee = self._get_employee(user_id)
        working_days = employee.schedule.working_days
        if working_days and weekday_of(work_date) not in working_days:
            raise ValidationError("Cannot mark attendance on a non-working day")
        if check_in_time.date() != work_date:
            raise ValidationError("Check-in time must fall on the attendance date")
        if check_out_time is not None:
            if check_out_time > now:
                raise ValidationError("Check-out time cannot be in the future")
            if check_out_time <= check_in_time:
                raise ValidationError("Check-out time must be after check-in time")

        def _attempt() -> int:
            existing = self._attendance.get_for_user_and_date(employee.user_id, work_date)
            if existing is None:
                draft = AttendanceRecord(
                    attendance_id=0,
                    user_id=employee.user_id,
                    work_date=work_date,
                    check_in_time=check_in_time,
                    check_out_time=check_out_time,
                )
                day = resolver.resolve_day(draft, self._minimum_hours)
                return self._attendance.create_checkin(
                    user_id=employee.user_id,
                    work_date=work_date,
                    check_in_time=check_in_time,
                    check_out_time=check_out_time,
                    marked_by=int(marked_by),
                    marked_by_role=MarkedBy.HR,
                    check_in_method=CheckInMethod.MANUAL,
                    notes=optional_text(notes),
                    total_hours=day.net_hours,
                    is_valid_day=day.is_valid_day,
                )

            ensure_breaks_within(check_in_time, check_out_time, existing.breaks)
            updated = replace(
                existing,
                check_in_time=check_in_time,
                check_out_time=check_out_time,
                notes=optional_text(notes) if notes is not None else existing.notes,
            )
            day = resolver.resolve_day(updated, self._minimum_hours)
            ok = self._attendance.update_times(
                attendance_id=existing.attendance_id,
                expected_version=existing.version,
                check_in_time=updated.check_in_time,
                check_out_time=updated.check_out_time,
                notes=updated.notes,
                total_hours=day.net_hours,
                is_valid_day=day.is_valid_day,
            )
            if not ok:
                raise ConcurrencyConflict("Attendance record changed while being marked")
            return existing.attendance_id

        attendance_id = retry_on_conflict(_attempt, label="mark-attendance")
        logger.info("HR %s marked attendance for user %s on %s", marked_by, employee.user_id, work_date)
        return attendance_id

    def get_record(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def get_today_record(self, user_id: int, today: date) -> Optional[AttendanceRecord]:
        """Get today's attendance record for a user"""
        return self._attendance.get_for_user_and_date(int(user_id), today)

    def get_history_ui(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> list[dict]:
        rows = self._attendance.get_recent_for_user(int(user_id), limit)
        return [self._to_ui(r) for r in rows]

    def monthly_summary(self, user_id: int, *, year: int, month: int) -> MonthlyAttendanceSummary:
        start, end = month_bounds(year, month)
        records = self._attendance.list_for_user_between(int(user_id), start, end)

        present = incomplete = valid = 0
        for r in records:
            status = resolver.resolve_status(r)
            if status is AttendanceStatus.PRESENT:
                present += 1
            elif status is AttendanceStatus.INCOMPLETE:
                incomplete += 1
            if resolver.is_valid_day(r, self._minimum_hours):
                valid += 1

        total_hours = resolver.valid_hours_sum(records, self._minimum_hours)
        return MonthlyAttendanceSummary(
            user_id=int(user_id),
            year=year,
            month=month,
            total_days=len(records),
            present_days=present,
            incomplete_days=incomplete,
            valid_days=valid,
            total_hours=total_hours,
            avg_hours=round(total_hours / valid, 2) if valid else 0.0,
        )

    def _to_ui(self, r: AttendanceRecord) -> dict:
        day = resolver.resolve_day(r, self._minimum_hours)
        return {
            "attendance_id": r.attendance_id,
            "date": r.work_date.strftime("%Y-%m-%d"),
            "check_in": r.check_in_time.strftime("%H:%M:%S") if r.check_in_time else "-",
            "check_out": r.check_out_time.strftime("%H:%M:%S") if r.check_out_time else "-",
            "status": resolver.status_label(day.status),
            "breaks": len(r.breaks),
            "net_hours": day.net_hours,
            "net_hours_label": format_hours(day.net_hours),
            "is_valid_day": day.is_valid_day,
        }
