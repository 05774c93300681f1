from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None


def require_positive(value: float, field_name: str) -> float:
    if value is None or float(value) <= 0:
        raise ValidationError(f"{field_name} must be greater than 0")
    return float(value)


def require_non_negative(value: float, field_name: str) -> float:
    if value is None or float(value) < 0:
        raise ValidationError(f"{field_name} cannot be negative")
    return float(value)


def require_time_range(start: Optional[datetime], end: Optional[datetime], *, label: str = "Break") -> None:
    if start is None or end is None:
        raise ValidationError(f"{label} start and end time are required")
    if end <= start:
        raise ValidationError(f"{label} end time must be after start time")


def require_hr(role: Role) -> None:
    if not Role(role).is_hr:
        raise AuthorizationError("Only HR can perform this action")
