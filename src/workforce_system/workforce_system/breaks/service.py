from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..attendance import calculations
from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.query_keys import AttendanceKeys, BreakKeys, MutationResult, mutation_result
from ..common.validators import clean_optional
from ..core.constants import AUTO_REJECT_BREAK_NOTE, HR_ASSIGNED_BREAK_NOTE
from ..core.enums import BreakStatus
from ..core.exceptions import AuthorizationError, InvalidTransitionError, NotFoundError, ValidationError
from .model import BreakRequest
from .repository import BreakRequestRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BreakTimeline:
    """Approved break in progress and the next one to come, for one attendance row."""

    active: Optional[BreakRequest] = None
    upcoming: Optional[BreakRequest] = None


class BreakRequestService:
    def __init__(self, breaks: BreakRequestRepository, attendance: AttendanceRepository):
        self._breaks = breaks
        self._attendance = attendance

    def _load(self, request_id: int) -> BreakRequest:
        req = self._breaks.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Break request not found")
        return req

    def _record(self, record_id: int) -> AttendanceRecord:
        rec = self._attendance.get_by_id(int(record_id))
        if not rec:
            raise NotFoundError("Attendance record not found")
        return rec

    @staticmethod
    def _keys(req: BreakRequest):
        return [
            BreakKeys.mine(req.user_id),
            BreakKeys.pending(),
            BreakKeys.by_attendance(req.attendance_record_id),
            AttendanceKeys.detail(req.attendance_record_id),
        ]

    @staticmethod
    def _require_pending(req: BreakRequest) -> None:
        if req.status != BreakStatus.PENDING:
            raise InvalidTransitionError("Break request has already been processed")

    def create(
        self,
        *,
        user_id: int,
        attendance_record_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        reason: Optional[str] = None,
        request_date: Optional[date] = None,
    ) -> MutationResult[BreakRequest]:
        rec = self._record(attendance_record_id)
        if rec.user_id != int(user_id):
            raise AuthorizationError("Attendance record belongs to another employee")
        if start and end and end <= start:
            raise ValidationError("Break end time must be after start time")
        if self._breaks.has_pending(int(user_id), rec.record_id):
            raise ValidationError("You already have a pending break request")

        request_id = self._breaks.create(
            user_id=int(user_id),
            attendance_record_id=rec.record_id,
            request_date=request_date or rec.work_date,
            requested_start_time=start,
            requested_end_time=end,
            reason=clean_optional(reason),
            requested_by=int(user_id),
        )
        logger.info("User %s requested break %s", user_id, request_id)
        req = self._load(request_id)
        return mutation_result(req, self._keys(req))

    def approve(
        self,
        request_id: int,
        *,
        start: datetime,
        end: datetime,
        reviewed_by: int,
        notes: Optional[str] = None,
        now: datetime | None = None,
    ) -> MutationResult[BreakRequest]:
        req = self._load(request_id)
        self._require_pending(req)

        rec = self._record(req.attendance_record_id)
        calculations.validate_break_window(start, end, rec.check_in_time, rec.check_out_time)

        self._breaks.set_review(
            request_id=req.request_id,
            status=BreakStatus.APPROVED,
            reviewed_by=int(reviewed_by),
            reviewed_at=now or datetime.now(),
            reviewer_notes=clean_optional(notes),
            approved_start_time=start,
            approved_end_time=end,
            duration_minutes=calculations.break_duration_minutes(start, end),
        )
        logger.info("Break %s approved by %s", req.request_id, reviewed_by)
        req = self._load(req.request_id)
        return mutation_result(req, self._keys(req))

    def reject(
        self,
        request_id: int,
        *,
        reviewed_by: Optional[int],
        notes: Optional[str] = None,
        now: datetime | None = None,
    ) -> MutationResult[BreakRequest]:
        req = self._load(request_id)
        self._require_pending(req)

        self._breaks.set_review(
            request_id=req.request_id,
            status=BreakStatus.REJECTED,
            reviewed_by=reviewed_by,
            reviewed_at=now or datetime.now(),
            reviewer_notes=clean_optional(notes),
        )
        logger.info("Break %s rejected", req.request_id)
        req = self._load(req.request_id)
        return mutation_result(req, self._keys(req))

    def cancel(self, request_id: int, *, user_id: int) -> MutationResult[BreakRequest]:
        req = self._load(request_id)
        if req.user_id != int(user_id):
            raise AuthorizationError("You can only cancel your own break requests")
        self._require_pending(req)

        self._breaks.set_review(
            request_id=req.request_id,
            status=BreakStatus.CANCELLED,
            reviewed_by=None,
            reviewed_at=None,
            reviewer_notes=None,
        )
        logger.info("Break %s cancelled by user %s", req.request_id, user_id)
        req = self._load(req.request_id)
        return mutation_result(req, self._keys(req))

    def delete_pending(self, request_id: int, *, user_id: Optional[int] = None) -> MutationResult[None]:
        req = self._load(request_id)
        if user_id is not None and req.user_id != int(user_id):
            raise AuthorizationError("You can only delete your own break requests")
        self._require_pending(req)
        if not self._breaks.delete_pending(req.request_id):
            raise ValidationError("Deleting break request failed")
        logger.info("Break %s deleted", req.request_id)
        return mutation_result(None, self._keys(req))

    def update_approved(
        self,
        request_id: int,
        *,
        start: datetime,
        end: datetime,
        updated_by: int,
        notes: Optional[str] = None,
        now: datetime | None = None,
    ) -> MutationResult[BreakRequest]:
        now = now or datetime.now()
        req = self._load(request_id)
        if req.status != BreakStatus.APPROVED:
            raise InvalidTransitionError("Only approved breaks can be edited")

        rec = self._record(req.attendance_record_id)
        calculations.validate_break_window(start, end, rec.check_in_time, rec.check_out_time)

        self._breaks.set_review(
            request_id=req.request_id,
            status=BreakStatus.APPROVED,
            reviewed_by=int(updated_by),
            reviewed_at=now,
            reviewer_notes=f"Updated by HR at {now.isoformat()}",
            approved_start_time=start,
            approved_end_time=end,
            duration_minutes=calculations.break_duration_minutes(start, end),
            notes=clean_optional(notes),
        )
        logger.info("Approved break %s edited by %s", req.request_id, updated_by)
        req = self._load(req.request_id)
        return mutation_result(req, self._keys(req))

    def assign(
        self,
        *,
        attendance_record_id: int,
        start: datetime,
        end: datetime,
        assigned_by: int,
        notes: Optional[str] = None,
        now: datetime | None = None,
    ) -> MutationResult[BreakRequest]:
        """HR puts a break straight onto an employee's day, already approved."""
        rec = self._record(attendance_record_id)
        calculations.validate_break_window(start, end, rec.check_in_time, rec.check_out_time)

        request_id = self._breaks.create(
            user_id=rec.user_id,
            attendance_record_id=rec.record_id,
            request_date=rec.work_date,
            requested_start_time=start,
            requested_end_time=end,
            reason="Assigned by HR",
            requested_by=int(assigned_by),
            status=BreakStatus.APPROVED,
            approved_start_time=start,
            approved_end_time=end,
            duration_minutes=calculations.break_duration_minutes(start, end),
            notes=clean_optional(notes),
            reviewed_by=int(assigned_by),
            reviewed_at=now or datetime.now(),
            reviewer_notes=HR_ASSIGNED_BREAK_NOTE,
        )
        logger.info("HR %s assigned break %s to user %s", assigned_by, request_id, rec.user_id)
        req = self._load(request_id)
        return mutation_result(req, self._keys(req))

    def reject_expired(self, user_id: int, *, now: datetime | None = None) -> MutationResult[list[int]]:
        """Reject the user's pending requests whose requested start has passed."""
        now = now or datetime.now()
        expired = [
            r
            for r in self._breaks.list_for_user(int(user_id), status=BreakStatus.PENDING)
            if r.requested_start_time and now >= r.requested_start_time
        ]

        keys = []
        for req in expired:
            self._breaks.set_review(
                request_id=req.request_id,
                status=BreakStatus.REJECTED,
                reviewed_by=None,
                reviewed_at=now,
                reviewer_notes=AUTO_REJECT_BREAK_NOTE,
            )
            keys.extend(self._keys(req))

        if expired:
            logger.info("Auto-rejected %d expired break request(s) of user %s", len(expired), user_id)
        return mutation_result([r.request_id for r in expired], keys)

    # Queries

    def list_for_user(self, user_id: int, *, status: Optional[BreakStatus] = None) -> Sequence[BreakRequest]:
        return self._breaks.list_for_user(int(user_id), status=status)

    def list_pending(self) -> Sequence[BreakRequest]:
        return self._breaks.list_by_status(BreakStatus.PENDING)

    def list_for_attendance(self, attendance_record_id: int) -> Sequence[BreakRequest]:
        return self._breaks.list_for_attendance(int(attendance_record_id))

    def active_or_upcoming(self, attendance_record_id: int, *, now: datetime | None = None) -> BreakTimeline:
        now = now or datetime.now()
        approved = [
            b
            for b in self._breaks.list_for_attendance(int(attendance_record_id))
            if b.status == BreakStatus.APPROVED and b.start_time and b.end_time
        ]

        active = next((b for b in approved if b.start_time <= now <= b.end_time), None)
        later = sorted((b for b in approved if now < b.start_time), key=lambda b: b.start_time)
        return BreakTimeline(active=active, upcoming=later[0] if later else None)

    def net_hours(self, record: AttendanceRecord) -> float:
        return calculations.net_hours(record.total_hours, self._breaks.list_for_attendance(record.record_id))

    def to_ui(self, b: BreakRequest) -> dict:
        return {
            "id": b.request_id,
            "user_id": b.user_id,
            "attendance_record_id": b.attendance_record_id,
            "request_date": b.request_date.strftime("%Y-%m-%d"),
            "start_time": b.start_time.isoformat() if b.start_time else None,
            "end_time": b.end_time.isoformat() if b.end_time else None,
            "duration_minutes": b.duration_minutes,
            "status": b.status.value,
            "reason": b.reason,
            "reviewer_notes": b.reviewer_notes,
        }
