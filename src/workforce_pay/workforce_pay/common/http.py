"""Helpers shared by the Flask controllers.

Caller identity comes from the `X-User-Id` / `X-User-Role` headers set by the
upstream gateway; this service does not authenticate.
"""

from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Tuple

from flask import Flask, jsonify, request

from ..core.enums import Role, WeekDay
from ..core.exceptions import (
    AuthorizationError,
    ComputationError,
    ConcurrencyConflict,
    DomainError,
    LocationVerificationError,
    NotFoundError,
    ReconciliationRequired,
    ValidationError,
)
from .datetime_utils import parse_iso_date, parse_iso_datetime

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (LocationVerificationError, 403),
    (ValidationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConcurrencyConflict, 409),
    (ComputationError, 422),
    (ReconciliationRequired, 500),
)


def status_for(exc: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain_error(exc: DomainError):
        status = status_for(exc)
        if status >= 500:
            logger.error("Request failed: %s", exc)
        return jsonify({"success": False, "error": type(exc).__name__, "message": str(exc)}), status


def current_identity() -> Tuple[int, Role]:
    raw_id = request.headers.get("X-User-Id", "").strip()
    raw_role = request.headers.get("X-User-Role", Role.EMPLOYEE.value).strip().lower()
    if not raw_id.isdigit():
        raise AuthorizationError("Missing caller identity")
    try:
        role = Role(raw_role)
    except ValueError as exc:
        raise AuthorizationError(f"Unknown role: {raw_role}") from exc
    return int(raw_id), role


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def required(data: dict, key: str) -> Any:
    value = data.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{key} is required")
    return value


def as_date(value: Optional[str], key: str) -> Optional[date]:
    if value is None or value == "":
        return None
    try:
        return parse_iso_date(str(value))
    except ValueError as exc:
        raise ValidationError(f"{key} must be a date (YYYY-MM-DD)") from exc


def as_datetime(value: Optional[str], key: str) -> Optional[datetime]:
    if value is None or value == "":
        return None
    try:
        return parse_iso_datetime(str(value))
    except ValueError as exc:
        raise ValidationError(f"{key} must be an ISO-8601 timestamp") from exc


def as_int(value: Any, key: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{key} must be an integer") from exc


def as_float(value: Any, key: str, default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{key} must be a number") from exc


def to_json(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        out = {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
        for name in ("net_salary", "remaining", "days"):
            if hasattr(type(value), name) and isinstance(getattr(type(value), name), property):
                out[name] = getattr(value, name)
        return out
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k.value if isinstance(k, Enum) else k): to_json(v) for k, v in value.items()}
    if isinstance(value, (set, frozenset)):
        return [to_json(v) for v in sorted(value, key=lambda v: v.index if isinstance(v, WeekDay) else str(v))]
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value


def ok(data: Any = None, status: int = 200, **extra: Any):
    payload = {"success": True, "data": to_json(data)}
    payload.update(extra)
    return jsonify(payload), status
