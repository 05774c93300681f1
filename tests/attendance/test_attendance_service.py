from __future__ import annotations

from datetime import date, datetime

import pytest

from src.workforce_pay.workforce_pay.attendance.model import AttendanceRecord, Break
from src.workforce_pay.workforce_pay.attendance.service import AttendanceService
from src.workforce_pay.workforce_pay.core.enums import CheckInMethod, MarkedBy, Role
from src.workforce_pay.workforce_pay.core.exceptions import (
    AuthorizationError,
    ConcurrencyConflict,
    NotFoundError,
    ValidationError,
)

from tests.fakes import InMemoryAttendance, InMemoryEmployees, InMemoryNetworks, make_employee

MONDAY = date(2026, 3, 2)


def _service(attendance=None, employees=None):
    attendance = attendance or InMemoryAttendance()
    employees = employees or InMemoryEmployees(make_employee(1))
    return AttendanceService(attendance, employees, InMemoryNetworks(), minimum_hours=6), attendance


def test_check_in_creates_single_record_per_day():
    service, attendance = _service()

    attendance_id = service.check_in(1, now=datetime(2026, 3, 2, 9, 0))

    record = attendance.get_by_id(attendance_id)
    assert record.check_in_time == datetime(2026, 3, 2, 9, 0)
    assert record.marked_by_role is MarkedBy.SELF
    assert record.check_in_method is CheckInMethod.SELF

    with pytest.raises(ValidationError):
        service.check_in(1, now=datetime(2026, 3, 2, 9, 5))


def test_check_in_unknown_employee_is_not_found():
    service, _ = _service()

    with pytest.raises(NotFoundError):
        service.check_in(99, now=datetime(2026, 3, 2, 9, 0))


def test_check_out_resolves_hours_and_validity():
    service, attendance = _service()
    service.check_in(1, now=datetime(2026, 3, 2, 9, 0))

    record = service.check_out(1, now=datetime(2026, 3, 2, 17, 30))

    assert record.total_hours == 8.5
    assert record.is_valid_day is True
    assert attendance.get_by_id(record.attendance_id).version == 1


def test_check_out_twice_is_rejected():
    service, _ = _service()
    service.check_in(1, now=datetime(2026, 3, 2, 9, 0))
    service.check_out(1, now=datetime(2026, 3, 2, 17, 0))

    with pytest.raises(ValidationError):
        service.check_out(1, now=datetime(2026, 3, 2, 18, 0))


def test_check_out_without_check_in_is_not_found():
    service, _ = _service()

    with pytest.raises(NotFoundError):
        service.check_out(1, now=datetime(2026, 3, 2, 17, 0))


def test_check_out_cannot_cut_off_an_approved_break():
    lunch = Break.create(datetime(2026, 3, 2, 16, 0), datetime(2026, 3, 2, 16, 30))
    attendance = InMemoryAttendance(
        AttendanceRecord(
            attendance_id=1,
            user_id=1,
            work_date=MONDAY,
            check_in_time=datetime(2026, 3, 2, 9, 0),
            check_out_time=None,
            breaks=(lunch,),
        )
    )
    service, _ = _service(attendance)

    with pytest.raises(ValidationError):
        service.check_out(1, now=datetime(2026, 3, 2, 16, 15))


def test_check_out_retries_once_on_lost_update():
    service, attendance = _service()
    service.check_in(1, now=datetime(2026, 3, 2, 9, 0))
    attendance.conflicts_to_inject = 1

    record = service.check_out(1, now=datetime(2026, 3, 2, 17, 0))

    assert record.check_out_time == datetime(2026, 3, 2, 17, 0)


def test_check_out_surfaces_second_conflict():
    service, attendance = _service()
    service.check_in(1, now=datetime(2026, 3, 2, 9, 0))
    attendance.conflicts_to_inject = 2

    with pytest.raises(ConcurrencyConflict):
        service.check_out(1, now=datetime(2026, 3, 2, 17, 0))


def test_mark_attendance_requires_hr():
    service, _ = _service()

    with pytest.raises(AuthorizationError):
        service.mark_attendance(
            current_role=Role.EMPLOYEE,
            marked_by=1,
            user_id=1,
            work_date=MONDAY,
            check_in_time=datetime(2026, 3, 2, 9, 0),
            now=datetime(2026, 3, 3, 9, 0),
        )


def test_mark_attendance_creates_then_updates_record():
    service, attendance = _service()
    now = datetime(2026, 3, 3, 9, 0)

    attendance_id = service.mark_attendance(
        current_role=Role.HR,
        marked_by=7,
        user_id=1,
        work_date=MONDAY,
        check_in_time=datetime(2026, 3, 2, 9, 0),
        now=now,
    )
    created = attendance.get_by_id(attendance_id)
    assert created.marked_by_role is MarkedBy.HR
    assert created.check_in_method is CheckInMethod.MANUAL
    assert created.check_out_time is None

    same_id = service.mark_attendance(
        current_role=Role.HR,
        marked_by=7,
        user_id=1,
        work_date=MONDAY,
        check_in_time=datetime(2026, 3, 2, 9, 0),
        check_out_time=datetime(2026, 3, 2, 16, 0),
        now=now,
    )
    updated = attendance.get_by_id(same_id)
    assert same_id == attendance_id
    assert updated.total_hours == 7.0
    assert updated.is_valid_day is True


def test_mark_attendance_rejects_non_working_day_and_future_check_out():
    service, _ = _service()
    saturday = date(2026, 3, 7)

    with pytest.raises(ValidationError):
        service.mark_attendance(
            current_role=Role.HR,
            marked_by=7,
            user_id=1,
            work_date=saturday,
            check_in_time=datetime(2026, 3, 7, 9, 0),
            now=datetime(2026, 3, 9, 9, 0),
        )

    with pytest.raises(ValidationError):
        service.mark_attendance(
            current_role=Role.HR,
            marked_by=7,
            user_id=1,
            work_date=MONDAY,
            check_in_time=datetime(2026, 3, 2, 9, 0),
            check_out_time=datetime(2026, 3, 2, 18, 0),
            now=datetime(2026, 3, 2, 12, 0),
        )


def test_monthly_summary_counts_statuses():
    service, _ = _service()
    service.check_in(1, now=datetime(2026, 3, 2, 9, 0))
    service.check_out(1, now=datetime(2026, 3, 2, 17, 0))
    service.check_in(1, now=datetime(2026, 3, 3, 9, 0))
    service.check_out(1, now=datetime(2026, 3, 3, 11, 0))
    service.check_in(1, now=datetime(2026, 3, 4, 9, 0))

    summary = service.monthly_summary(1, year=2026, month=3)

    assert summary.total_days == 3
    assert summary.present_days == 2
    assert summary.incomplete_days == 1
    assert summary.valid_days == 1
    assert summary.total_hours == 8.0
    assert summary.avg_hours == 8.0


def test_history_rows_are_ui_ready():
    service, _ = _service()
    service.check_in(1, now=datetime(2026, 3, 2, 9, 0))
    service.check_out(1, now=datetime(2026, 3, 2, 17, 30))

    rows = service.get_history_ui(1)

    assert rows[0]["date"] == "2026-03-02"
    assert rows[0]["status"] == "Present"
    assert rows[0]["net_hours_label"] == "8h 30m"
