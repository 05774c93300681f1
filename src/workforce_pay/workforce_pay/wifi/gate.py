"""WiFi location gate: decides whether a check-in may proceed."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..core.exceptions import LocationVerificationError
from ..users.model import Employee
from .model import WiFiVerification

logger = logging.getLogger(__name__)

# Some platforms report the SSID wrapped in quotes.
_QUOTE_CHARS = "\"'"


def normalize_ssid(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    ssid = value.strip()
    if len(ssid) >= 2 and ssid[0] == ssid[-1] and ssid[0] in _QUOTE_CHARS:
        ssid = ssid[1:-1]
    return ssid or None


def is_admitted(current_ssid: Optional[str], allowed_ssids: Iterable[str]) -> bool:
    ssid = normalize_ssid(current_ssid)
    if ssid is None:
        return False
    allowed = {normalize_ssid(s) for s in allowed_ssids}
    allowed.discard(None)
    return ssid in allowed


def requires_wifi_check(employee: Employee) -> bool:
    return bool(employee.wifi_verification_required)


class WiFiGate:
    def verify(self, employee: Employee, current_ssid: Optional[str], allowed_ssids: Iterable[str]) -> WiFiVerification:
        """Return the verification outcome or raise `LocationVerificationError`.

        When the employee is not opted in the gate is bypassed: no network state
        is consulted and the check-in proceeds.
        """

        ssid = normalize_ssid(current_ssid)
        allowed = tuple(s for s in (normalize_ssid(a) for a in allowed_ssids) if s)

        if not requires_wifi_check(employee):
            return WiFiVerification(current_ssid=ssid, is_required=False, is_verified=True, office_networks=allowed)

        if ssid is None:
            logger.info("Check-in refused for user %s: no WiFi network detected", employee.user_id)
            raise LocationVerificationError("Connect to an office WiFi network to check in")

        if not is_admitted(ssid, allowed):
            logger.info("Check-in refused for user %s: network %r is not an office network", employee.user_id, ssid)
            raise LocationVerificationError(f"Network '{ssid}' is not an approved office network")

        return WiFiVerification(current_ssid=ssid, is_required=True, is_verified=True, office_networks=allowed)
