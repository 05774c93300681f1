from __future__ import annotations

from datetime import date

import pytest

from src.workforce_pay.workforce_pay.core.enums import LeaveType, RequestStatus, Role
from src.workforce_pay.workforce_pay.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.workforce_pay.workforce_pay.leave.service import LeaveService

from tests.fakes import InMemoryLeaveRequests


@pytest.fixture
def setup():
    requests = InMemoryLeaveRequests()
    return LeaveService(requests, allowances={LeaveType.SICK: 10, LeaveType.CASUAL: 2}), requests


def _request(service, start=date(2026, 3, 2), end=date(2026, 3, 4), leave_type=LeaveType.SICK, user_id=1):
    return service.create(user_id=user_id, leave_type=leave_type, start_date=start, end_date=end, reason="flu")


def test_create_validates_input(setup):
    service, _ = setup

    with pytest.raises(ValidationError):
        _request(service, start=date(2026, 3, 5), end=date(2026, 3, 4))
    with pytest.raises(ValidationError):
        _request(service, leave_type="vacation")
    with pytest.raises(ValidationError):
        service.create(user_id=1, leave_type="sick", start_date=date(2026, 3, 2), end_date=date(2026, 3, 2), reason=" ")

    request_id = _request(service, leave_type="casual")
    assert service.get(request_id).leave_type is LeaveType.CASUAL
    assert service.get(request_id).days == 3


def test_owner_edits_and_cancels_pending(setup):
    service, _ = setup
    request_id = _request(service)

    updated = service.update_pending(
        user_id=1,
        request_id=request_id,
        leave_type=LeaveType.CASUAL,
        start_date=date(2026, 3, 9),
        end_date=date(2026, 3, 9),
        reason="errand",
    )
    assert updated.start_date == date(2026, 3, 9)

    with pytest.raises(AuthorizationError):
        service.cancel(user_id=2, request_id=request_id)

    service.cancel(user_id=1, request_id=request_id)
    assert service.get(request_id).status is RequestStatus.CANCELLED
    with pytest.raises(ValidationError):
        service.cancel(user_id=1, request_id=request_id)


def test_hr_decides_once(setup):
    service, _ = setup
    request_id = _request(service)

    with pytest.raises(AuthorizationError):
        service.approve(current_role=Role.EMPLOYEE, reviewer_id=1, request_id=request_id)

    service.approve(current_role=Role.HR, reviewer_id=7, request_id=request_id, reviewer_notes=" get well ")
    req = service.get(request_id)
    assert req.status is RequestStatus.APPROVED
    assert req.reviewed_by == 7
    assert req.reviewer_notes == "get well"

    with pytest.raises(ValidationError):
        service.reject(current_role=Role.HR, reviewer_id=7, request_id=request_id)


def test_delete_pending(setup):
    service, requests = setup
    mine = _request(service)
    other = _request(service, user_id=2)

    with pytest.raises(AuthorizationError):
        service.delete_pending(current_role=Role.EMPLOYEE, user_id=1, request_id=other)

    service.delete_pending(current_role=Role.EMPLOYEE, user_id=1, request_id=mine)
    service.delete_pending(current_role=Role.HR, user_id=7, request_id=other)
    assert requests.rows == {}
    with pytest.raises(NotFoundError):
        service.get(mine)


def test_balance_counts_approved_days_clipped_to_year(setup):
    service, _ = setup
    across_new_year = _request(service, start=date(2025, 12, 30), end=date(2026, 1, 2))
    march = _request(service, start=date(2026, 3, 2), end=date(2026, 3, 4))
    casual = _request(service, start=date(2026, 5, 4), end=date(2026, 5, 8), leave_type=LeaveType.CASUAL)
    _request(service, start=date(2026, 6, 1), end=date(2026, 6, 1))
    for request_id in (across_new_year, march, casual):
        service.approve(current_role=Role.HR, reviewer_id=7, request_id=request_id)

    balances = {b.leave_type: b for b in service.leave_balance(1, 2026)}

    assert len(balances) == len(LeaveType)
    assert balances[LeaveType.SICK].used == 5
    assert balances[LeaveType.SICK].remaining == 5
    assert balances[LeaveType.CASUAL].used == 5
    assert balances[LeaveType.CASUAL].remaining == 0
    assert balances[LeaveType.EARNED].allowance == 0
