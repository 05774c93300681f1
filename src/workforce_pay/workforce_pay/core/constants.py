"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import LeaveType

DEFAULT_MINIMUM_VALID_HOURS = 6.0
DEFAULT_DAILY_HOURS = 8.0
DEFAULT_HISTORY_LIMIT = 30
DEFAULT_LIST_LIMIT = 200
CONFLICT_RETRY_ATTEMPTS = 2

CANCELLED_BY_EMPLOYEE_NOTE = "Cancelled by employee"
EXPIRED_BREAK_NOTE = "Automatically rejected: Break request expired (not approved before start time)"
HR_ASSIGNED_REASON = "Assigned by HR"
HR_ASSIGNED_NOTE = "Break assigned directly by HR"

DEFAULT_LEAVE_ALLOWANCES = {
    LeaveType.SICK: 12,
    LeaveType.CASUAL: 12,
    LeaveType.EARNED: 15,
    LeaveType.UNPAID: 0,
    LeaveType.MATERNITY: 180,
    LeaveType.PATERNITY: 15,
}
