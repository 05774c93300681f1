"""Attendance state resolver.

Pure functions over a fetched `AttendanceRecord`: day status, net worked hours
and day validity. Nothing here reads or writes storage.
"""

from __future__ import annotations

from typing import Iterable

from ..common.datetime_utils import break_minutes, hours_between
from ..core.constants import DEFAULT_MINIMUM_VALID_HOURS
from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, DayResolution


def resolve_status(record: AttendanceRecord) -> AttendanceStatus:
    if record.check_in_time is None:
        return AttendanceStatus.ABSENT
    if record.check_out_time is None:
        return AttendanceStatus.INCOMPLETE
    return AttendanceStatus.PRESENT


def net_hours(record: AttendanceRecord) -> float:
    """Gross check-in to check-out span minus breaks, never below zero."""

    status = resolve_status(record)
    if status is AttendanceStatus.ABSENT or status is AttendanceStatus.INCOMPLETE:
        return 0.0
    if status is AttendanceStatus.PRESENT:
        gross = hours_between(record.check_in_time, record.check_out_time)
        return round(max(0.0, gross - break_minutes(record.breaks) / 60), 2)
    raise ValueError(f"Unhandled attendance status: {status!r}")


def is_valid_day(record: AttendanceRecord, minimum_hours: float = DEFAULT_MINIMUM_VALID_HOURS) -> bool:
    if record.check_out_time is None:
        return False
    return net_hours(record) >= float(minimum_hours)


def resolve_day(record: AttendanceRecord, minimum_hours: float = DEFAULT_MINIMUM_VALID_HOURS) -> DayResolution:
    return DayResolution(
        status=resolve_status(record),
        net_hours=net_hours(record),
        is_valid_day=is_valid_day(record, minimum_hours),
    )


def valid_hours_sum(records: Iterable[AttendanceRecord], minimum_hours: float = DEFAULT_MINIMUM_VALID_HOURS) -> float:
    """Sum of net hours over valid days only; incomplete days never count."""

    return round(sum(net_hours(r) for r in records if is_valid_day(r, minimum_hours)), 2)


def status_label(status: AttendanceStatus) -> str:
    labels = {
        AttendanceStatus.ABSENT: "Absent",
        AttendanceStatus.INCOMPLETE: "Incomplete",
        AttendanceStatus.PRESENT: "Present",
    }
    try:
        return labels[status]
    except KeyError:
        raise ValueError(f"Unhandled attendance status: {status!r}") from None
