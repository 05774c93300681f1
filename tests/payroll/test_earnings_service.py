from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.workforce_pay.workforce_pay.attendance.model import AttendanceRecord
from src.workforce_pay.workforce_pay.core.enums import Role, WeekDay
from src.workforce_pay.workforce_pay.payroll.model import WorkingSchedule
from src.workforce_pay.workforce_pay.payroll.service import EarningsService
from src.workforce_pay.workforce_pay.salary_history.model import SalaryHistoryEntry
from src.workforce_pay.workforce_pay.salary_history.service import SalaryHistoryService

from tests.fakes import (
    CREATED,
    WEEKDAYS,
    InMemoryAttendance,
    InMemoryEmployees,
    InMemorySalaryHistory,
    InMemoryTransactionManager,
    make_employee,
)


def _day(user_id, rid, d: date, hours: float):
    start = datetime(d.year, d.month, d.day, 9, 0)
    return AttendanceRecord(
        attendance_id=rid,
        user_id=user_id,
        work_date=d,
        check_in_time=start,
        check_out_time=start + timedelta(hours=hours),
    )


def _service(records=(), employees=None, history=None):
    return EarningsService(
        InMemoryAttendance(*records),
        employees or InMemoryEmployees(make_employee(1)),
        history or InMemorySalaryHistory(),
        minimum_hours=6,
    )


def test_month_in_progress_counts_only_valid_days():
    records = [
        _day(1, 1, date(2026, 3, 2), 8),
        _day(1, 2, date(2026, 3, 3), 8),
        _day(1, 3, date(2026, 3, 4), 4),
        _day(1, 4, date(2026, 3, 20), 8),
    ]
    service = _service(records)

    e = service.monthly_earnings(1, 2026, 3, today=date(2026, 3, 10))

    assert e.expected_hours == 176.0
    assert e.period_end == date(2026, 3, 10)
    assert e.total_hours_worked == 16.0
    assert e.valid_days == 2
    assert e.hourly_rate == 113.64
    assert e.earned_salary == round(20000 * 16 / 176, 2)
    assert e.progress == round(16 / 176, 4)
    assert e.is_final is False


def test_closed_month_is_final():
    service = _service([_day(1, 1, date(2026, 1, 5), 8)])

    e = service.monthly_earnings(1, 2026, 1, today=date(2026, 2, 3))

    assert e.is_final is True
    assert e.period_end == date(2026, 1, 31)


def test_future_month_has_no_hours():
    service = _service([_day(1, 1, date(2026, 3, 2), 8)])

    e = service.monthly_earnings(1, 2026, 4, today=date(2026, 3, 10))

    assert e.total_hours_worked == 0.0
    assert e.earned_salary == 0.0
    assert e.period_end == date(2026, 3, 31)


def test_schedule_change_applies_from_its_month():
    history = InMemorySalaryHistory()
    history.add(
        SalaryHistoryEntry(
            entry_id=1,
            user_id=1,
            previous_base_salary=20000.0,
            new_base_salary=30000.0,
            schedule=WorkingSchedule(
                working_days=frozenset({WeekDay.MONDAY, WeekDay.TUESDAY}), daily_hours=8.0, base_salary=30000.0
            ),
            hourly_rate=None,
            effective_from=date(2026, 4, 1),
            change_reason="promotion",
            changed_by=7,
            created_at=CREATED,
        )
    )
    service = _service(history=history)

    march = service.monthly_earnings(1, 2026, 3, today=date(2026, 4, 15))
    april = service.monthly_earnings(1, 2026, 4, today=date(2026, 4, 15))

    assert march.base_salary == 20000.0
    assert april.base_salary == 30000.0
    # April 2026: four Mondays and four Tuesdays.
    assert april.expected_hours == 64.0


def test_no_schedule_yields_no_rate():
    employees = InMemoryEmployees(make_employee(1, base_salary=None, working_days=()))
    service = _service(employees=employees)

    e = service.monthly_earnings(1, 2026, 3, today=date(2026, 3, 10))

    assert e.expected_hours == 0.0
    assert e.hourly_rate is None
    assert e.earned_salary == 0.0
    assert e.progress == 0.0


def test_organization_stats_sorted_by_earned():
    employees = InMemoryEmployees(
        make_employee(1),
        make_employee(2, base_salary=40000.0),
        make_employee(3, organization_id=99),
    )
    records = [_day(1, 1, date(2026, 3, 2), 8), _day(2, 2, date(2026, 3, 2), 8)]
    service = _service(records, employees=employees)

    stats = service.organization_stats(10, 2026, 3, today=date(2026, 3, 31))

    assert stats.employee_count == 2
    assert [r["user_id"] for r in stats.rows] == [2, 1]
    assert stats.total_hours == 16.0
    assert stats.average_hours == 8.0
    assert stats.total_earned == pytest.approx(2727.27)


def _raise_salary(employees, history, *, today, **kwargs):
    changes = SalaryHistoryService(history, employees, InMemoryTransactionManager(employees, history))
    params = dict(
        current_role=Role.HR,
        user_id=1,
        new_base_salary=40000,
        new_working_days=WEEKDAYS,
        new_daily_hours=8,
        changed_by=7,
        reason="promotion",
        today=today,
    )
    params.update(kwargs)
    changes.record_change(**params)
    return changes


def test_closed_month_keeps_old_salary_after_change_is_applied():
    employees = InMemoryEmployees(make_employee(1))
    history = InMemorySalaryHistory()
    changes = _raise_salary(employees, history, today=date(2026, 10, 17))
    assert changes.apply_due_changes(today=date(2026, 11, 2)) == 1
    assert employees.get_by_id(1).schedule.base_salary == 40000.0

    service = _service([_day(1, 1, date(2026, 10, 5), 8)], employees=employees, history=history)
    october = service.monthly_earnings(1, 2026, 10, today=date(2026, 11, 2))
    november = service.monthly_earnings(1, 2026, 11, today=date(2026, 11, 2))

    assert october.base_salary == 20000.0
    assert october.earned_salary == round(20000 * 8 / october.expected_hours, 2)
    assert november.base_salary == 40000.0


def test_months_before_a_backdated_change_keep_the_original_schedule():
    employees = InMemoryEmployees(make_employee(1))
    history = InMemorySalaryHistory()
    _raise_salary(
        employees,
        history,
        today=date(2026, 10, 17),
        new_working_days={WeekDay.MONDAY, WeekDay.TUESDAY},
        effective_from=date(2026, 9, 1),
    )
    assert employees.get_by_id(1).schedule.base_salary == 40000.0

    service = _service(employees=employees, history=history)
    august = service.monthly_earnings(1, 2026, 8, today=date(2026, 10, 17))
    september = service.monthly_earnings(1, 2026, 9, today=date(2026, 10, 17))

    assert august.base_salary == 20000.0
    assert august.scheduled_days == 21
    assert september.base_salary == 40000.0
    # September 2026: five Tuesdays and four Mondays.
    assert september.scheduled_days == 9
