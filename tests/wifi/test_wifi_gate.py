from datetime import datetime

import pytest

from src.workforce_pay.workforce_pay.attendance.service import AttendanceService
from src.workforce_pay.workforce_pay.core.exceptions import LocationVerificationError
from src.workforce_pay.workforce_pay.wifi.gate import WiFiGate, is_admitted, normalize_ssid
from src.workforce_pay.workforce_pay.wifi.model import OfficeNetwork

from tests.fakes import CREATED, InMemoryAttendance, InMemoryEmployees, InMemoryNetworks, make_employee


def _network(network_id, ssid, *, active=True, organization_id=10):
    return OfficeNetwork(
        network_id=network_id,
        organization_id=organization_id,
        ssid=ssid,
        is_active=active,
        created_by=7,
        created_at=CREATED,
    )


@pytest.mark.parametrize(
    "raw, expected",
    [('"Office-5G"', "Office-5G"), ("  Office  ", "Office"), ("''", None), ("", None), (None, None)],
)
def test_normalize_ssid(raw, expected):
    assert normalize_ssid(raw) == expected


def test_is_admitted_is_exact_after_normalizing():
    assert is_admitted('"HQ"', ["HQ", "Guest"])
    assert not is_admitted("hq", ["HQ"])
    assert not is_admitted(None, ["HQ"])


def test_opted_out_employee_bypasses_the_gate():
    result = WiFiGate().verify(make_employee(wifi_required=False), None, [])

    assert result.is_required is False
    assert result.is_verified is True


def test_required_check_without_network_refuses_check_in():
    attendance = InMemoryAttendance()
    service = AttendanceService(
        attendance,
        InMemoryEmployees(make_employee(1, wifi_required=True)),
        InMemoryNetworks(_network(1, "HQ")),
    )

    with pytest.raises(LocationVerificationError):
        service.check_in(1, now=datetime(2026, 3, 2, 9, 0), current_ssid=None)
    assert attendance.records == {}


def test_inactive_or_foreign_networks_do_not_admit():
    attendance = InMemoryAttendance()
    networks = InMemoryNetworks(_network(1, "HQ", active=False), _network(2, "Branch", organization_id=99))
    service = AttendanceService(attendance, InMemoryEmployees(make_employee(1, wifi_required=True)), networks)

    for ssid in ("HQ", "Branch"):
        with pytest.raises(LocationVerificationError):
            service.check_in(1, now=datetime(2026, 3, 2, 9, 0), current_ssid=ssid)


def test_office_network_admits_and_is_recorded():
    attendance = InMemoryAttendance()
    service = AttendanceService(
        attendance,
        InMemoryEmployees(make_employee(1, wifi_required=True)),
        InMemoryNetworks(_network(1, "HQ")),
    )

    attendance_id = service.check_in(1, now=datetime(2026, 3, 2, 9, 0), current_ssid='"HQ"')

    record = attendance.get_by_id(attendance_id)
    assert record.wifi_ssid == "HQ"
    assert record.wifi_verified is True
