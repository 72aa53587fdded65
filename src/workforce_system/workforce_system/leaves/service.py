from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.query_keys import LeaveKeys, MutationResult, mutation_result
from ..common.validators import clean_optional, require_non_empty
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import AuthorizationError, InvalidTransitionError, NotFoundError, ValidationError
from .model import LeaveRequest
from .repository import LeaveRequestRepository

logger = logging.getLogger(__name__)


def _leave_type(value) -> LeaveType:
    try:
        return LeaveType(value)
    except ValueError:
        raise ValidationError("Invalid leave type")


def _check_range(start_date: date, end_date: date) -> None:
    if end_date < start_date:
        raise ValidationError("End date must be on or after start date")


class LeaveService:
    """Leave requests: pending until HR approves or rejects, or the owner cancels."""

    def __init__(self, leaves: LeaveRequestRepository):
        self._leaves = leaves

    def _load(self, request_id: int) -> LeaveRequest:
        req = self._leaves.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Leave request not found")
        return req

    @staticmethod
    def _keys(req: LeaveRequest):
        return [LeaveKeys.mine(req.user_id), LeaveKeys.pending(), LeaveKeys.detail(req.request_id)]

    @staticmethod
    def _require_pending(req: LeaveRequest) -> None:
        if req.status != LeaveStatus.PENDING:
            raise InvalidTransitionError("Leave request has already been processed")

    def create(
        self,
        *,
        user_id: int,
        leave_type,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> MutationResult[LeaveRequest]:
        leave_type = _leave_type(leave_type)
        reason = require_non_empty(reason, "Reason")
        _check_range(start_date, end_date)

        request_id = self._leaves.create(
            user_id=int(user_id),
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
        )
        logger.info("User %s requested %s leave %s", user_id, leave_type.value, request_id)
        req = self._load(request_id)
        return mutation_result(req, self._keys(req))

    def update(
        self,
        request_id: int,
        *,
        user_id: int,
        leave_type=None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        reason: Optional[str] = None,
    ) -> MutationResult[LeaveRequest]:
        req = self._load(request_id)
        if req.user_id != int(user_id):
            raise AuthorizationError("You can only edit your own leave requests")
        self._require_pending(req)

        new_type = req.leave_type if leave_type is None else _leave_type(leave_type)
        new_start = start_date or req.start_date
        new_end = end_date or req.end_date
        new_reason = req.reason if reason is None else require_non_empty(reason, "Reason")
        _check_range(new_start, new_end)

        if not self._leaves.update_pending(
            request_id=req.request_id,
            leave_type=new_type,
            start_date=new_start,
            end_date=new_end,
            reason=new_reason,
        ):
            raise InvalidTransitionError("Leave request has already been processed")

        logger.info("Leave %s updated", req.request_id)
        req = self._load(req.request_id)
        return mutation_result(req, self._keys(req))

    def cancel(self, request_id: int, *, user_id: int) -> MutationResult[LeaveRequest]:
        req = self._load(request_id)
        if req.user_id != int(user_id):
            raise AuthorizationError("You can only cancel your own leave requests")
        self._require_pending(req)

        self._leaves.set_status(request_id=req.request_id, status=LeaveStatus.CANCELLED)
        logger.info("Leave %s cancelled", req.request_id)
        req = self._load(req.request_id)
        return mutation_result(req, self._keys(req))

    def review(
        self,
        request_id: int,
        *,
        status,
        reviewed_by: int,
        notes: Optional[str] = None,
        now: datetime | None = None,
    ) -> MutationResult[LeaveRequest]:
        try:
            status = LeaveStatus(status)
        except ValueError:
            raise ValidationError("Invalid review decision")
        if status not in (LeaveStatus.APPROVED, LeaveStatus.REJECTED):
            raise ValidationError("A review must approve or reject")

        req = self._load(request_id)
        self._require_pending(req)

        self._leaves.set_status(
            request_id=req.request_id,
            status=status,
            reviewed_by=int(reviewed_by),
            reviewed_at=now or datetime.now(),
            review_notes=clean_optional(notes),
        )
        logger.info("Leave %s %s by %s", req.request_id, status.value, reviewed_by)
        req = self._load(req.request_id)
        return mutation_result(req, self._keys(req))

    def delete(self, request_id: int) -> MutationResult[None]:
        req = self._load(request_id)
        self._leaves.delete(req.request_id)
        logger.info("Leave %s deleted", req.request_id)
        return mutation_result(None, self._keys(req))

    def get(self, request_id: int) -> LeaveRequest:
        return self._load(request_id)

    def list_for_user(self, user_id: int) -> Sequence[LeaveRequest]:
        return self._leaves.list_for_user(int(user_id))

    def list_pending(self, *, organization_id: Optional[int] = None) -> Sequence[LeaveRequest]:
        return self._leaves.list_by_status(LeaveStatus.PENDING, organization_id=organization_id)

    @staticmethod
    def total_days(req: LeaveRequest) -> int:
        return req.total_days

    def to_ui(self, r: LeaveRequest) -> dict:
        return {
            "id": r.request_id,
            "user_id": r.user_id,
            "leave_type": r.leave_type.value,
            "start_date": r.start_date.strftime("%Y-%m-%d"),
            "end_date": r.end_date.strftime("%Y-%m-%d"),
            "total_days": r.total_days,
            "reason": r.reason,
            "status": r.status.value,
            "review_notes": r.review_notes,
        }
