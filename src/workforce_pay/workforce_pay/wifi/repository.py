from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import OfficeNetwork


class OfficeNetworkRepository(Protocol):
    def get_by_id(self, network_id: int) -> Optional[OfficeNetwork]:
        raise NotImplementedError

    def list_for_organization(self, organization_id: int, *, active_only: bool = False) -> Sequence[OfficeNetwork]:
        raise NotImplementedError

    def create(self, *, organization_id: int, ssid: str, description: Optional[str], created_by: int) -> int:
        raise NotImplementedError

    def update(self, *, network_id: int, ssid: str, description: Optional[str], is_active: bool) -> bool:
        raise NotImplementedError

    def delete(self, *, network_id: int) -> bool:
        raise NotImplementedError
