from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRequest


class LeaveRequestRepository(Protocol):
    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def create(self, *, user_id: int, leave_type: LeaveType, start_date: date, end_date: date, reason: str) -> int:
        raise NotImplementedError

    def update_pending(
        self,
        *,
        request_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> bool:
        """Only touches the row while it is still pending."""

        raise NotImplementedError

    def set_status(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        reviewed_by: Optional[int] = None,
        reviewed_at: Optional[datetime] = None,
        review_notes: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def delete(self, request_id: int) -> bool:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[LeaveRequest]:
        """Newest first."""

        raise NotImplementedError

    def list_by_status(self, status: LeaveStatus, *, organization_id: Optional[int] = None) -> Sequence[LeaveRequest]:
        raise NotImplementedError
