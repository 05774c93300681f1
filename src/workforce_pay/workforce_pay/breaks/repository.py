from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import BreakRequest


class BreakRequestRepository(Protocol):
    def get_by_id(self, request_id: int) -> Optional[BreakRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        user_id: Optional[int] = None,
        attendance_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[BreakRequest]:
        raise NotImplementedError

    def list_pending_started_before(self, moment: datetime) -> Sequence[BreakRequest]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        attendance_id: int,
        request_date: date,
        requested_start: Optional[datetime],
        requested_end: Optional[datetime],
        reason: Optional[str],
        requested_by: int,
    ) -> int:
        raise NotImplementedError

    def create_approved(
        self,
        *,
        user_id: int,
        attendance_id: int,
        request_date: date,
        approved_start: datetime,
        approved_end: datetime,
        duration_minutes: int,
        break_id: str,
        reason: str,
        notes: Optional[str],
        assigned_by: int,
        reviewed_at: datetime,
        reviewer_notes: Optional[str],
    ) -> int:
        raise NotImplementedError

    # Decisions only apply while the request is still PENDING; they return False otherwise.
    def mark_approved(
        self,
        *,
        request_id: int,
        approved_start: datetime,
        approved_end: datetime,
        duration_minutes: int,
        break_id: str,
        reviewed_by: int,
        reviewed_at: datetime,
        reviewer_notes: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def mark_rejected(
        self,
        *,
        request_id: int,
        reviewed_by: Optional[int],
        reviewed_at: datetime,
        reviewer_notes: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def update_approved(
        self,
        *,
        request_id: int,
        approved_start: datetime,
        approved_end: datetime,
        duration_minutes: int,
        notes: Optional[str],
        reviewed_by: int,
        reviewed_at: datetime,
        reviewer_notes: Optional[str],
    ) -> bool:
        """Only applies while the request is APPROVED."""

        raise NotImplementedError

    def delete_pending(self, *, request_id: int) -> bool:
        raise NotImplementedError
