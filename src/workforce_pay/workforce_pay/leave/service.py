from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_hr, require_non_empty
from ..core.constants import DEFAULT_LEAVE_ALLOWANCES, DEFAULT_LIST_LIMIT
from ..core.enums import LeaveType, RequestStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import LeaveBalance, LeaveRequest
from .repository import LeaveRequestRepository

logger = logging.getLogger(__name__)


def _leave_type(value) -> LeaveType:
    try:
        return LeaveType(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown leave type: {value}") from exc


def _require_range(start_date: date, end_date: date) -> None:
    if end_date < start_date:
        raise ValidationError("End date must be on or after start date")


class LeaveService:
    """Leave requests and yearly balances.

    Leave is tracked on its own; it never creates attendance records and has no
    effect on earnings.
    """

    def __init__(
        self,
        requests: LeaveRequestRepository,
        *,
        allowances: Optional[Mapping[LeaveType, int]] = None,
    ):
        self._requests = requests
        self._allowances = dict(allowances or DEFAULT_LEAVE_ALLOWANCES)

    def get(self, request_id: int) -> LeaveRequest:
        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Leave request not found")
        return req

    def _get_own_pending(self, user_id: int, request_id: int) -> LeaveRequest:
        req = self.get(request_id)
        if req.user_id != int(user_id):
            raise AuthorizationError("You can only change your own leave requests")
        if req.status is not RequestStatus.PENDING:
            raise ValidationError("Request has already been processed")
        return req

    def create(self, *, user_id: int, leave_type: LeaveType, start_date: date, end_date: date, reason: str) -> int:
        _require_range(start_date, end_date)
        request_id = self._requests.create(
            user_id=int(user_id),
            leave_type=_leave_type(leave_type),
            start_date=start_date,
            end_date=end_date,
            reason=require_non_empty(reason, "Reason"),
        )
        logger.info("Leave request %s created by user %s (%s..%s)", request_id, user_id, start_date, end_date)
        return request_id

    def update_pending(
        self,
        *,
        user_id: int,
        request_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> LeaveRequest:
        req = self._get_own_pending(user_id, request_id)
        _require_range(start_date, end_date)
        ok = self._requests.update_pending(
            request_id=req.request_id,
            leave_type=_leave_type(leave_type),
            start_date=start_date,
            end_date=end_date,
            reason=require_non_empty(reason, "Reason"),
        )
        if not ok:
            raise ValidationError("Request has already been processed")
        return self.get(req.request_id)

    def cancel(self, *, user_id: int, request_id: int, now: Optional[datetime] = None) -> None:
        req = self._get_own_pending(user_id, request_id)
        ok = self._requests.decide(
            request_id=req.request_id,
            status=RequestStatus.CANCELLED,
            reviewed_by=None,
            reviewed_at=now or now_local(),
            reviewer_notes=None,
        )
        if not ok:
            raise ValidationError("Request has already been processed")
        logger.info("Leave request %s cancelled by user %s", req.request_id, user_id)

    def _decide(
        self,
        *,
        current_role: Role,
        reviewer_id: int,
        request_id: int,
        status: RequestStatus,
        reviewer_notes: Optional[str],
        now: Optional[datetime],
    ) -> None:
        require_hr(current_role)
        req = self.get(request_id)
        if req.status is not RequestStatus.PENDING:
            raise ValidationError("Request has already been processed")
        ok = self._requests.decide(
            request_id=req.request_id,
            status=status,
            reviewed_by=int(reviewer_id),
            reviewed_at=now or now_local(),
            reviewer_notes=optional_text(reviewer_notes),
        )
        if not ok:
            raise ValidationError("Request has already been processed")
        logger.info("Leave request %s %s by %s", req.request_id, status.value.lower(), reviewer_id)

    def approve(
        self,
        *,
        current_role: Role,
        reviewer_id: int,
        request_id: int,
        reviewer_notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> None:
        self._decide(
            current_role=current_role,
            reviewer_id=reviewer_id,
            request_id=request_id,
            status=RequestStatus.APPROVED,
            reviewer_notes=reviewer_notes,
            now=now,
        )

    def reject(
        self,
        *,
        current_role: Role,
        reviewer_id: int,
        request_id: int,
        reviewer_notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> None:
        self._decide(
            current_role=current_role,
            reviewer_id=reviewer_id,
            request_id=request_id,
            status=RequestStatus.REJECTED,
            reviewer_notes=reviewer_notes,
            now=now,
        )

    def delete_pending(self, *, current_role: Role, user_id: int, request_id: int) -> None:
        req = self.get(request_id)
        if req.user_id != int(user_id) and not Role(current_role).is_hr:
            raise AuthorizationError("You can only delete your own leave requests")
        if req.status is not RequestStatus.PENDING or not self._requests.delete_pending(request_id=req.request_id):
            raise ValidationError("Only pending requests can be deleted")

    def list_for_user(self, user_id: int, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[LeaveRequest]:
        return self._requests.list_requests(user_id=int(user_id), limit=limit)

    def list_pending(self, *, current_role: Role, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[LeaveRequest]:
        require_hr(current_role)
        return self._requests.list_requests(status=RequestStatus.PENDING, limit=limit)

    def leave_balance(self, user_id: int, year: int) -> list[LeaveBalance]:
        """Approved leave days per type within `year`, against the configured allowances."""

        year_start, year_end = date(year, 1, 1), date(year, 12, 31)
        used = {t: 0 for t in LeaveType}
        for req in self._requests.list_approved_overlapping(int(user_id), year_start, year_end):
            start = max(req.start_date, year_start)
            end = min(req.end_date, year_end)
            if end >= start:
                used[req.leave_type] += (end - start).days + 1

        return [LeaveBalance(leave_type=t, allowance=int(self._allowances.get(t, 0)), used=used[t]) for t in LeaveType]
