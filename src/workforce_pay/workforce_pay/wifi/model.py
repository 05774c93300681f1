from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class OfficeNetwork:
    network_id: int
    organization_id: int
    ssid: str
    is_active: bool
    created_by: int
    created_at: datetime
    description: Optional[str] = None


@dataclass(frozen=True)
class WiFiVerification:
    """Outcome of the admission gate, stored alongside the check-in."""

    current_ssid: Optional[str]
    is_required: bool
    is_verified: bool
    office_networks: Tuple[str, ...] = ()
