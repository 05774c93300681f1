from __future__ import annotations

from datetime import date, datetime

import pytest

from src.workforce_pay.workforce_pay.attendance.service import AttendanceService
from src.workforce_pay.workforce_pay.breaks.service import BreakRequestService
from src.workforce_pay.workforce_pay.common.http import status_for
from src.workforce_pay.workforce_pay.container import Container
from src.workforce_pay.workforce_pay.core import exceptions as errors
from src.workforce_pay.workforce_pay.core.enums import CheckInMethod, MarkedBy
from src.workforce_pay.workforce_pay.leave.service import LeaveService
from src.workforce_pay.workforce_pay.main import create_app
from src.workforce_pay.workforce_pay.payroll.service import EarningsService, SalarySlipService
from src.workforce_pay.workforce_pay.salary_history.service import SalaryHistoryService
from src.workforce_pay.workforce_pay.users.service import EmployeeService
from src.workforce_pay.workforce_pay.wifi.service import WiFiNetworkService

from tests.fakes import (
    InMemoryAttendance,
    InMemoryBreakRequests,
    InMemoryEmployees,
    InMemoryLeaveRequests,
    InMemoryNetworks,
    InMemorySalaryHistory,
    InMemorySalarySlips,
    InMemoryTransactionManager,
    make_employee,
)

EMPLOYEE = {"X-User-Id": "1", "X-User-Role": "employee"}
HR = {"X-User-Id": "7", "X-User-Role": "hr"}


@pytest.fixture
def stores():
    return {
        "employees": InMemoryEmployees(make_employee(1), make_employee(7, wifi_required=True)),
        "attendance": InMemoryAttendance(),
        "breaks": InMemoryBreakRequests(),
        "history": InMemorySalaryHistory(),
        "slips": InMemorySalarySlips(),
        "networks": InMemoryNetworks(),
        "leave": InMemoryLeaveRequests(),
    }


@pytest.fixture
def client(monkeypatch, stores):
    monkeypatch.setenv("APP_ENV", "testing")
    employees, attendance = stores["employees"], stores["attendance"]
    earnings = EarningsService(attendance, employees, stores["history"], minimum_hours=6)
    container = Container(
        employee_service=EmployeeService(employees),
        attendance_service=AttendanceService(attendance, employees, stores["networks"], minimum_hours=6),
        break_service=BreakRequestService(
            stores["breaks"], attendance, InMemoryTransactionManager(attendance, stores["breaks"]), minimum_hours=6
        ),
        salary_history_service=SalaryHistoryService(
            stores["history"], employees, InMemoryTransactionManager(employees, stores["history"])
        ),
        earnings_service=earnings,
        salary_slip_service=SalarySlipService(stores["slips"], earnings, attendance),
        wifi_service=WiFiNetworkService(stores["networks"], employees),
        leave_service=LeaveService(stores["leave"]),
    )
    app = create_app(container=container)
    return app.test_client()


def test_check_in_then_duplicate_is_bad_request(client):
    first = client.post("/api/attendance/check-in", json={}, headers=EMPLOYEE)
    second = client.post("/api/attendance/check-in", json={}, headers=EMPLOYEE)

    assert first.status_code == 201
    assert first.get_json()["success"] is True
    assert second.status_code == 400
    assert second.get_json() == {
        "success": False,
        "error": "ValidationError",
        "message": "You have already checked in today",
    }


def test_wifi_gate_refusal_is_forbidden(client):
    resp = client.post("/api/attendance/check-in", json={"current_ssid": "Cafe"}, headers=HR)

    assert resp.status_code == 403
    assert resp.get_json()["error"] == "LocationVerificationError"


def test_missing_identity_is_forbidden(client):
    assert client.get("/api/attendance/history").status_code == 403
    assert client.get("/api/attendance/history", headers={"X-User-Id": "1", "X-User-Role": "boss"}).status_code == 403


def test_hr_only_endpoint_refuses_employee(client):
    resp = client.get("/api/breaks/requests/pending", headers=EMPLOYEE)

    assert resp.status_code == 403
    assert client.get("/api/breaks/requests/pending", headers=HR).status_code == 200


def test_unknown_employee_is_not_found(client):
    resp = client.get("/api/employees/42", headers=HR)

    assert resp.status_code == 404


def test_mark_attendance_and_read_summary(client, stores):
    resp = client.post(
        "/api/attendance/mark",
        json={
            "user_id": 1,
            "work_date": "2026-03-02",
            "check_in_time": "2026-03-02T09:00:00",
            "check_out_time": "2026-03-02T17:30:00",
        },
        headers=HR,
    )
    assert resp.status_code == 200

    summary = client.get("/api/attendance/summary?year=2026&month=3", headers=EMPLOYEE).get_json()["data"]
    assert summary["valid_days"] == 1
    assert summary["total_hours"] == 8.5


def test_break_approval_round_trip(client, stores):
    stores["attendance"].create_checkin(
        user_id=1,
        work_date=date(2026, 3, 2),
        check_in_time=datetime(2026, 3, 2, 9, 0),
        check_out_time=datetime(2026, 3, 2, 18, 0),
        marked_by=1,
        marked_by_role=MarkedBy.SELF,
        check_in_method=CheckInMethod.SELF,
    )
    created = client.post("/api/breaks/requests", json={"attendance_id": 1, "reason": "lunch"}, headers=EMPLOYEE)
    request_id = created.get_json()["data"]["request_id"]

    approved = client.post(
        f"/api/breaks/requests/{request_id}/approve",
        json={"approved_start": "2026-03-02T13:00:00", "approved_end": "2026-03-02T13:30:00"},
        headers=HR,
    )

    assert approved.status_code == 200
    assert approved.get_json()["data"]["status"] == "APPROVED"
    assert stores["attendance"].get_by_id(1).total_hours == 8.5


def test_invalid_payload_is_bad_request(client):
    resp = client.post("/api/salary-slips", json={"user_id": 1, "year": 2026, "month": 1, "bonus": "lots"}, headers=HR)

    assert resp.status_code == 400


def test_leave_balance_lists_every_type(client):
    resp = client.get("/api/leave/balance?year=2026", headers=EMPLOYEE)

    data = resp.get_json()["data"]
    assert resp.status_code == 200
    assert {row["leave_type"] for row in data} >= {"sick", "casual"}
    assert all("remaining" in row for row in data)


@pytest.mark.parametrize(
    "exc, status",
    [
        (errors.ValidationError("x"), 400),
        (errors.AuthorizationError("x"), 403),
        (errors.LocationVerificationError("x"), 403),
        (errors.NotFoundError("x"), 404),
        (errors.ConcurrencyConflict("x"), 409),
        (errors.ComputationError("x"), 422),
        (errors.ReconciliationRequired("x"), 500),
    ],
)
def test_status_mapping(exc, status):
    assert status_for(exc) == status


def test_record_detail_and_its_break_requests(client, stores):
    stores["attendance"].create_checkin(
        user_id=1,
        work_date=date(2026, 3, 2),
        check_in_time=datetime(2026, 3, 2, 9, 0),
        marked_by=1,
        marked_by_role=MarkedBy.SELF,
        check_in_method=CheckInMethod.SELF,
    )
    client.post("/api/breaks/requests", json={"attendance_id": 1}, headers=EMPLOYEE)

    detail = client.get("/api/attendance/1", headers=EMPLOYEE)
    requests = client.get("/api/attendance/1/break-requests", headers=HR)

    assert detail.get_json()["data"]["check_in_time"] == "2026-03-02T09:00:00"
    assert [r["status"] for r in requests.get_json()["data"]] == ["PENDING"]
    assert client.get("/api/attendance/1", headers={"X-User-Id": "2", "X-User-Role": "employee"}).status_code == 403
    assert client.get("/api/attendance/99", headers=HR).status_code == 404


def test_current_earnings_and_month_slips(client):
    earnings = client.get("/api/earnings/current", headers=EMPLOYEE)
    slip = client.post("/api/salary-slips", json={"user_id": 1, "year": 2026, "month": 1}, headers=HR)
    listing = client.get("/api/salary-slips?year=2026&month=1", headers=HR)

    assert earnings.status_code == 200
    assert earnings.get_json()["data"]["base_salary"] == 20000.0
    assert slip.status_code == 201
    assert [s["slip_id"] for s in listing.get_json()["data"]] == [slip.get_json()["data"]["slip_id"]]
    assert client.get("/api/salary-slips?year=2026&month=1", headers=EMPLOYEE).status_code == 403
