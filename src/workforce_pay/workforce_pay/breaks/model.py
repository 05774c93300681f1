from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class BreakRequest:
    """Proposal to add a break to an attendance record.

    `break_id` links an approved request to the `Break` it produced.
    """

    request_id: int
    user_id: int
    attendance_id: int
    request_date: date
    requested_start: Optional[datetime]
    requested_end: Optional[datetime]
    reason: Optional[str]
    status: RequestStatus
    requested_by: int
    created_at: datetime
    approved_start: Optional[datetime] = None
    approved_end: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    break_id: Optional[str] = None
    notes: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    reviewer_notes: Optional[str] = None
