from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller role used for authorization checks."""

    EMPLOYEE = "employee"
    HR = "hr"
    ADMIN = "admin"

    @property
    def is_hr(self) -> bool:
        return self in {Role.HR, Role.ADMIN}


class AttendanceStatus(str, Enum):
    """Completeness of an attendance day (derived, never stored from input)."""

    ABSENT = "ABSENT"
    INCOMPLETE = "INCOMPLETE"
    PRESENT = "PRESENT"


class MarkedBy(str, Enum):
    SELF = "self"
    HR = "hr"


class CheckInMethod(str, Enum):
    SELF = "self"
    MANUAL = "manual"


class RequestStatus(str, Enum):
    """Review workflow status shared by break and leave requests."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class LeaveType(str, Enum):
    SICK = "sick"
    CASUAL = "casual"
    EARNED = "earned"
    UNPAID = "unpaid"
    MATERNITY = "maternity"
    PATERNITY = "paternity"


class SalaryStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    PAID = "paid"


class WeekDay(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_index(cls, weekday: int) -> "WeekDay":
        """Map `date.weekday()` (Monday == 0) to a member."""
        return _WEEKDAY_ORDER[weekday]

    @property
    def index(self) -> int:
        return _WEEKDAY_ORDER.index(self)


_WEEKDAY_ORDER = [
    WeekDay.MONDAY,
    WeekDay.TUESDAY,
    WeekDay.WEDNESDAY,
    WeekDay.THURSDAY,
    WeekDay.FRIDAY,
    WeekDay.SATURDAY,
    WeekDay.SUNDAY,
]
