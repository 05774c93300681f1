from __future__ import annotations

from datetime import date

import pytest

from src.workforce_pay.workforce_pay.core.enums import Role, WeekDay
from src.workforce_pay.workforce_pay.core.exceptions import AuthorizationError, ValidationError
from src.workforce_pay.workforce_pay.salary_history.service import SalaryHistoryService

from tests.fakes import WEEKDAYS, InMemoryEmployees, InMemorySalaryHistory, InMemoryTransactionManager, make_employee

TODAY = date(2026, 3, 17)


@pytest.fixture
def setup():
    employees = InMemoryEmployees(make_employee(1))
    history = InMemorySalaryHistory()
    service = SalaryHistoryService(history, employees, InMemoryTransactionManager(employees, history))
    return service, employees, history


def _change(service, **kwargs):
    params = dict(
        current_role=Role.HR,
        user_id=1,
        new_base_salary=25000,
        new_working_days=WEEKDAYS,
        new_daily_hours=8,
        changed_by=7,
        reason="annual review",
        today=TODAY,
    )
    params.update(kwargs)
    return service.record_change(**params)


def test_default_change_waits_for_next_month(setup):
    service, employees, _ = setup

    entry = _change(service)

    assert entry.effective_from == date(2026, 4, 1)
    assert entry.previous_base_salary == 20000.0
    # April 2026 has 22 weekdays.
    assert entry.hourly_rate == round(25000 / 176, 2)
    assert service.current_effective(1, as_of=TODAY).base_salary == 20000.0
    assert service.current_effective(1, as_of=date(2026, 4, 1)).base_salary == 25000.0

    employee = employees.get_by_id(1)
    assert employee.schedule.base_salary == 20000.0
    assert employee.pending_schedule.base_salary == 25000.0
    assert employee.pending_effective_from == date(2026, 4, 1)


def test_effective_date_must_be_first_of_month(setup):
    service, _, _ = setup

    with pytest.raises(ValidationError):
        _change(service, effective_from=date(2026, 4, 2))


def test_reason_required_only_when_something_changes(setup):
    service, _, _ = setup

    with pytest.raises(ValidationError):
        _change(service, reason="  ")

    entry = _change(service, new_base_salary=20000, reason=None)
    assert entry.change_reason is None


def test_invalid_schedule_is_refused(setup):
    service, _, _ = setup

    with pytest.raises(ValidationError):
        _change(service, new_working_days=["funday"])
    with pytest.raises(ValidationError):
        _change(service, new_daily_hours=0)
    with pytest.raises(ValidationError):
        _change(service, new_base_salary=-1)
    with pytest.raises(ValidationError):
        _change(service, new_working_days=[])
    with pytest.raises(AuthorizationError):
        _change(service, current_role=Role.EMPLOYEE)


def test_backdated_change_applies_immediately(setup):
    service, employees, _ = setup

    _change(service, effective_from=date(2026, 3, 1), new_working_days=["monday", "tuesday"])

    schedule = employees.get_by_id(1).schedule
    assert schedule.base_salary == 25000.0
    assert schedule.working_days == frozenset({WeekDay.MONDAY, WeekDay.TUESDAY})
    assert employees.get_by_id(1).pending_schedule is None


def test_backdated_change_does_not_override_a_later_effective_one(setup):
    service, employees, _ = setup
    _change(service, effective_from=date(2026, 3, 1), new_base_salary=30000)

    _change(service, effective_from=date(2026, 2, 1), new_base_salary=22000)

    assert employees.get_by_id(1).schedule.base_salary == 30000.0


def test_latest_future_change_becomes_the_pending_projection(setup):
    service, employees, _ = setup
    _change(service, effective_from=date(2026, 5, 1), new_base_salary=27000)
    _change(service, effective_from=date(2026, 4, 1), new_base_salary=25000)

    assert service.pending(1, today=TODAY).new_base_salary == 27000.0
    assert employees.get_by_id(1).pending_effective_from == date(2026, 5, 1)


def test_apply_due_changes_promotes_pending(setup):
    service, employees, _ = setup
    _change(service)

    assert service.apply_due_changes(today=date(2026, 3, 31)) == 0
    assert service.apply_due_changes(today=date(2026, 4, 1)) == 1

    employee = employees.get_by_id(1)
    assert employee.schedule.base_salary == 25000.0
    assert employee.pending_schedule is None
    assert employee.pending_effective_from is None


def test_delete_pending_restores_previous_projection(setup):
    service, employees, history = setup
    first = _change(service, effective_from=date(2026, 4, 1), new_base_salary=25000)
    second = _change(service, effective_from=date(2026, 5, 1), new_base_salary=27000)

    service.delete_pending(current_role=Role.HR, entry_id=second.entry_id, today=TODAY)

    assert history.get_by_id(second.entry_id) is None
    assert employees.get_by_id(1).pending_effective_from == first.effective_from

    with pytest.raises(ValidationError):
        service.delete_pending(current_role=Role.HR, entry_id=first.entry_id, today=date(2026, 4, 2))


def test_history_is_newest_first_and_notes_editable(setup):
    service, _, _ = setup
    first = _change(service, effective_from=date(2026, 4, 1))
    second = _change(service, effective_from=date(2026, 6, 1), new_base_salary=26000)

    assert [e.entry_id for e in service.history(1)] == [second.entry_id, first.entry_id]

    updated = service.update_notes(current_role=Role.HR, entry_id=first.entry_id, notes=" approved by board ")
    assert updated.notes == "approved by board"
