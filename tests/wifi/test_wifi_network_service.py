import pytest

from src.workforce_pay.workforce_pay.core.enums import Role
from src.workforce_pay.workforce_pay.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.workforce_pay.workforce_pay.wifi.service import WiFiNetworkService

from tests.fakes import InMemoryEmployees, InMemoryNetworks, make_employee


@pytest.fixture
def setup():
    employees = InMemoryEmployees(make_employee(1))
    networks = InMemoryNetworks()
    return WiFiNetworkService(networks, employees), networks, employees


def test_add_normalizes_and_rejects_duplicates(setup):
    service, networks, _ = setup

    nid = service.add_network(current_role=Role.HR, organization_id=10, ssid=' "HQ" ', created_by=7)

    assert networks.get_by_id(nid).ssid == "HQ"
    with pytest.raises(ValidationError):
        service.add_network(current_role=Role.HR, organization_id=10, ssid="HQ", created_by=7)
    # Same SSID in another organization is fine.
    service.add_network(current_role=Role.HR, organization_id=11, ssid="HQ", created_by=7)


def test_only_hr_manages_networks(setup):
    service, _, _ = setup

    with pytest.raises(AuthorizationError):
        service.add_network(current_role=Role.EMPLOYEE, organization_id=10, ssid="HQ", created_by=1)


def test_deactivated_network_drops_out_of_active_list(setup):
    service, _, _ = setup
    hq = service.add_network(current_role=Role.HR, organization_id=10, ssid="HQ", created_by=7)
    service.add_network(current_role=Role.HR, organization_id=10, ssid="Lab", created_by=7)

    service.update_network(current_role=Role.HR, network_id=hq, is_active=False)

    assert service.active_ssids(10) == ["Lab"]
    assert service.active_ssids(None) == []
    assert len(service.list_networks(10)) == 2


def test_delete_and_missing_network(setup):
    service, _, _ = setup
    nid = service.add_network(current_role=Role.HR, organization_id=10, ssid="HQ", created_by=7)

    service.delete_network(current_role=Role.HR, network_id=nid)

    with pytest.raises(NotFoundError):
        service.delete_network(current_role=Role.HR, network_id=nid)
    with pytest.raises(NotFoundError):
        service.update_network(current_role=Role.HR, network_id=nid, ssid="X")


def test_employee_requirement_toggle(setup):
    service, _, employees = setup

    service.set_employee_requirement(current_role=Role.HR, user_id=1, required=True)

    assert employees.get_by_id(1).wifi_verification_required is True
    with pytest.raises(NotFoundError):
        service.set_employee_requirement(current_role=Role.HR, user_id=2, required=True)
