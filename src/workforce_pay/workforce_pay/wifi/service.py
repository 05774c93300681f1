from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import optional_text, require_hr, require_non_empty
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..users.repository import EmployeeRepository
from .gate import normalize_ssid
from .model import OfficeNetwork
from .repository import OfficeNetworkRepository

logger = logging.getLogger(__name__)


class WiFiNetworkService:
    """HR management of the office network allow-list and per-employee opt-in."""

    def __init__(self, networks: OfficeNetworkRepository, employees: EmployeeRepository):
        self._networks = networks
        self._employees = employees

    def list_networks(self, organization_id: int) -> Sequence[OfficeNetwork]:
        return self._networks.list_for_organization(int(organization_id))

    def active_ssids(self, organization_id: Optional[int]) -> list[str]:
        if organization_id is None:
            return []
        return [n.ssid for n in self._networks.list_for_organization(int(organization_id), active_only=True)]

    def _require_unique(self, organization_id: int, ssid: str, *, exclude_id: Optional[int] = None) -> None:
        for n in self._networks.list_for_organization(organization_id):
            if n.ssid == ssid and n.network_id != exclude_id:
                raise ValidationError(f"Network '{ssid}' is already registered")

    def add_network(
        self,
        *,
        current_role: Role,
        organization_id: int,
        ssid: str,
        created_by: int,
        description: Optional[str] = None,
    ) -> int:
        require_hr(current_role)

        clean = normalize_ssid(require_non_empty(ssid, "SSID"))
        if not clean:
            raise ValidationError("SSID is required")
        self._require_unique(int(organization_id), clean)

        network_id = self._networks.create(
            organization_id=int(organization_id),
            ssid=clean,
            description=optional_text(description),
            created_by=int(created_by),
        )
        logger.info("Office network %r added to organization %s", clean, organization_id)
        return network_id

    def update_network(
        self,
        *,
        current_role: Role,
        network_id: int,
        ssid: Optional[str] = None,
        description: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> None:
        require_hr(current_role)

        network = self._networks.get_by_id(int(network_id))
        if not network:
            raise NotFoundError("Office network not found")

        new_ssid = network.ssid
        if ssid is not None:
            new_ssid = normalize_ssid(ssid)
            if not new_ssid:
                raise ValidationError("SSID is required")
            self._require_unique(network.organization_id, new_ssid, exclude_id=network.network_id)

        self._networks.update(
            network_id=network.network_id,
            ssid=new_ssid,
            description=optional_text(description) if description is not None else network.description,
            is_active=network.is_active if is_active is None else bool(is_active),
        )

    def delete_network(self, *, current_role: Role, network_id: int) -> None:
        require_hr(current_role)
        if not self._networks.delete(network_id=int(network_id)):
            raise NotFoundError("Office network not found")

    def set_employee_requirement(self, *, current_role: Role, user_id: int, required: bool) -> None:
        require_hr(current_role)
        if not self._employees.get_by_id(int(user_id)):
            raise NotFoundError("Employee not found")
        self._employees.set_wifi_verification_required(int(user_id), required=bool(required))
        logger.info("WiFi verification %s for user %s", "enabled" if required else "disabled", user_id)
