from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

from ..attendance import resolver
from ..attendance.model import AttendanceRecord, Break
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local, overlap_minutes
from ..common.retry import retry_on_conflict
from ..common.validators import optional_text, require_hr, require_time_range
from ..core.constants import (
    CANCELLED_BY_EMPLOYEE_NOTE,
    DEFAULT_LIST_LIMIT,
    DEFAULT_MINIMUM_VALID_HOURS,
    EXPIRED_BREAK_NOTE,
    HR_ASSIGNED_NOTE,
    HR_ASSIGNED_REASON,
)
from ..core.enums import RequestStatus, Role
from ..core.exceptions import AuthorizationError, ConcurrencyConflict, NotFoundError, ValidationError
from ..database.transaction import TransactionManager
from .model import BreakRequest
from .repository import BreakRequestRepository

logger = logging.getLogger(__name__)


def ensure_break_fits(
    record: AttendanceRecord,
    start: datetime,
    end: datetime,
    *,
    ignore_break_id: Optional[str] = None,
) -> None:
    """Validate a break against its attendance window and sibling breaks.

    The check-out bound only applies once the day has been checked out.
    """

    require_time_range(start, end)
    if record.check_in_time is None:
        raise ValidationError("Cannot add a break to a day without check-in")
    if start < record.check_in_time:
        raise ValidationError("Break cannot start before check-in time")
    if record.check_out_time is not None and end > record.check_out_time:
        raise ValidationError("Break cannot end after check-out time")
    for other in record.breaks:
        if other.break_id == ignore_break_id:
            continue
        if overlap_minutes(start, end, other.start_time, other.end_time) > 0:
            raise ValidationError("Break overlaps an existing break")


class BreakRequestService:
    """Break request workflow: pending -> approved | rejected.

    Approval, HR edits and HR direct-assign change two rows (the request and the
    attendance record's break list); each runs inside one transaction and is
    retried once when the record's version moved underneath it.
    """

    def __init__(
        self,
        requests: BreakRequestRepository,
        attendance: AttendanceRepository,
        tx: TransactionManager,
        *,
        minimum_hours: float = DEFAULT_MINIMUM_VALID_HOURS,
    ):
        self._requests = requests
        self._attendance = attendance
        self._tx = tx
        self._minimum_hours = float(minimum_hours)

    def _get_request(self, request_id: int) -> BreakRequest:
        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Break request not found")
        return req

    def _get_record(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def _save_breaks(self, record: AttendanceRecord, breaks: tuple[Break, ...]) -> None:
        day = resolver.resolve_day(replace(record, breaks=breaks), self._minimum_hours)
        ok = self._attendance.update_breaks(
            attendance_id=record.attendance_id,
            expected_version=record.version,
            breaks=breaks,
            total_hours=day.net_hours,
            is_valid_day=day.is_valid_day,
        )
        if not ok:
            raise ConcurrencyConflict(f"Attendance record {record.attendance_id} was modified concurrently")

    # -------- Employee actions --------
    def create_request(
        self,
        *,
        user_id: int,
        attendance_id: int,
        requested_start: Optional[datetime] = None,
        requested_end: Optional[datetime] = None,
        reason: Optional[str] = None,
    ) -> int:
        record = self._get_record(attendance_id)
        if record.user_id != int(user_id):
            raise AuthorizationError("You can only request breaks for your own attendance")
        if record.check_in_time is None:
            raise ValidationError("Check in before requesting a break")

        if requested_start is not None or requested_end is not None:
            require_time_range(requested_start, requested_end)
            if requested_start < record.check_in_time:
                raise ValidationError("Break cannot start before check-in time")

        request_id = self._requests.create(
            user_id=record.user_id,
            attendance_id=record.attendance_id,
            request_date=record.work_date,
            requested_start=requested_start,
            requested_end=requested_end,
            reason=optional_text(reason),
            requested_by=int(user_id),
        )
        logger.info("Break request %s created by user %s for record %s", request_id, user_id, attendance_id)
        return request_id

    def cancel(self, *, user_id: int, request_id: int, now: Optional[datetime] = None) -> None:
        req = self._get_request(request_id)
        if req.user_id != int(user_id):
            raise AuthorizationError("You can only cancel your own break requests")
        if req.status is not RequestStatus.PENDING:
            raise ValidationError("Only pending break requests can be cancelled")

        ok = self._requests.mark_rejected(
            request_id=req.request_id,
            reviewed_by=None,
            reviewed_at=now or now_local(),
            reviewer_notes=CANCELLED_BY_EMPLOYEE_NOTE,
        )
        if not ok:
            raise ValidationError("Break request has already been processed")
        logger.info("Break request %s cancelled by user %s", request_id, user_id)

    def delete(self, *, current_role: Role, user_id: int, request_id: int) -> None:
        req = self._get_request(request_id)
        if req.user_id != int(user_id) and not Role(current_role).is_hr:
            raise AuthorizationError("You cannot delete this break request")
        if req.status is not RequestStatus.PENDING:
            raise ValidationError("Only pending break requests can be deleted")
        if not self._requests.delete_pending(request_id=req.request_id):
            raise ValidationError("Break request has already been processed")

    # -------- HR actions --------
    def approve(
        self,
        *,
        current_role: Role,
        reviewer_id: int,
        request_id: int,
        approved_start: datetime,
        approved_end: datetime,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> BreakRequest:
        require_hr(current_role)
        require_time_range(approved_start, approved_end)
        now = now or now_local()
        notes = optional_text(notes)

        def _attempt() -> None:
            with self._tx.atomic():
                req = self._get_request(request_id)
                if req.status is not RequestStatus.PENDING:
                    raise ValidationError(f"Break request is already {req.status.value.lower()}")

                record = self._get_record(req.attendance_id)
                ensure_break_fits(record, approved_start, approved_end)
                new_break = Break.create(approved_start, approved_end, notes)

                ok = self._requests.mark_approved(
                    request_id=req.request_id,
                    approved_start=approved_start,
                    approved_end=approved_end,
                    duration_minutes=new_break.duration_minutes,
                    break_id=new_break.break_id,
                    reviewed_by=int(reviewer_id),
                    reviewed_at=now,
                    reviewer_notes=notes,
                )
                if not ok:
                    raise ConcurrencyConflict(f"Break request {req.request_id} was decided concurrently")
                self._save_breaks(record, record.breaks + (new_break,))

        retry_on_conflict(_attempt, label=f"approve break request {request_id}")
        logger.info("Break request %s approved by %s", request_id, reviewer_id)
        return self._get_request(request_id)

    def reject(
        self,
        *,
        current_role: Role,
        reviewer_id: int,
        request_id: int,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> None:
        require_hr(current_role)
        req = self._get_request(request_id)
        if req.status is not RequestStatus.PENDING:
            raise ValidationError(f"Break request is already {req.status.value.lower()}")

        ok = self._requests.mark_rejected(
            request_id=req.request_id,
            reviewed_by=int(reviewer_id),
            reviewed_at=now or now_local(),
            reviewer_notes=optional_text(notes),
        )
        if not ok:
            raise ValidationError("Break request has already been processed")
        logger.info("Break request %s rejected by %s", request_id, reviewer_id)

    def edit_approved(
        self,
        *,
        current_role: Role,
        editor_id: int,
        request_id: int,
        approved_start: datetime,
        approved_end: datetime,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> BreakRequest:
        require_hr(current_role)
        require_time_range(approved_start, approved_end)
        now = now or now_local()
        notes = optional_text(notes)

        def _attempt() -> None:
            with self._tx.atomic():
                req = self._get_request(request_id)
                if req.status is not RequestStatus.APPROVED or not req.break_id:
                    raise ValidationError("Only approved breaks can be edited")

                record = self._get_record(req.attendance_id)
                current = record.find_break(req.break_id)
                if current is None:
                    raise NotFoundError("Break linked to this request is missing from the attendance record")
                ensure_break_fits(record, approved_start, approved_end, ignore_break_id=current.break_id)

                moved = current.moved_to(approved_start, approved_end, notes)
                ok = self._requests.update_approved(
                    request_id=req.request_id,
                    approved_start=approved_start,
                    approved_end=approved_end,
                    duration_minutes=moved.duration_minutes,
                    notes=notes,
                    reviewed_by=int(editor_id),
                    reviewed_at=now,
                    reviewer_notes=f"Updated by HR at {now.isoformat(timespec='seconds')}",
                )
                if not ok:
                    raise ConcurrencyConflict(f"Break request {req.request_id} changed concurrently")
                breaks = tuple(moved if b.break_id == current.break_id else b for b in record.breaks)
                self._save_breaks(record, breaks)

        retry_on_conflict(_attempt, label=f"edit break request {request_id}")
        logger.info("Approved break request %s edited by %s", request_id, editor_id)
        return self._get_request(request_id)

    def assign_by_hr(
        self,
        *,
        current_role: Role,
        assigned_by: int,
        user_id: int,
        attendance_id: int,
        start: datetime,
        end: datetime,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> int:
        """Create an already-approved request and append its break in one step."""

        require_hr(current_role)
        require_time_range(start, end)
        now = now or now_local()
        notes = optional_text(notes)

        def _attempt() -> int:
            with self._tx.atomic():
                record = self._get_record(attendance_id)
                if record.user_id != int(user_id):
                    raise ValidationError("Attendance record belongs to another employee")
                ensure_break_fits(record, start, end)
                new_break = Break.create(start, end, notes)

                request_id = self._requests.create_approved(
                    user_id=record.user_id,
                    attendance_id=record.attendance_id,
                    request_date=record.work_date,
                    approved_start=start,
                    approved_end=end,
                    duration_minutes=new_break.duration_minutes,
                    break_id=new_break.break_id,
                    reason=HR_ASSIGNED_REASON,
                    notes=notes,
                    assigned_by=int(assigned_by),
                    reviewed_at=now,
                    reviewer_notes=HR_ASSIGNED_NOTE,
                )
                self._save_breaks(record, record.breaks + (new_break,))
                return request_id

        request_id = retry_on_conflict(_attempt, label=f"assign break to record {attendance_id}")
        logger.info("HR %s assigned break %s to user %s", assigned_by, request_id, user_id)
        return request_id

    def reject_expired(self, *, now: Optional[datetime] = None) -> int:
        """Reject pending requests whose requested start has already passed."""

        now = now or now_local()
        count = 0
        for req in self._requests.list_pending_started_before(now):
            if self._requests.mark_rejected(
                request_id=req.request_id,
                reviewed_by=None,
                reviewed_at=now,
                reviewer_notes=EXPIRED_BREAK_NOTE,
            ):
                count += 1
        if count:
            logger.info("Auto-rejected %d expired break request(s)", count)
        return count

    # -------- Queries --------
    def list_for_user(self, user_id: int, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[BreakRequest]:
        return self._requests.list_requests(user_id=int(user_id), limit=limit)

    def list_pending(self, *, current_role: Role, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[BreakRequest]:
        require_hr(current_role)
        return self._requests.list_requests(status=RequestStatus.PENDING, limit=limit)

    def list_for_record(self, attendance_id: int) -> Sequence[BreakRequest]:
        return self._requests.list_requests(attendance_id=int(attendance_id))

