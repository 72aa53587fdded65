from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import BreakStatus
from .model import BreakRequest


class BreakRequestRepository(Protocol):
    def get_by_id(self, request_id: int) -> Optional[BreakRequest]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        attendance_record_id: int,
        request_date: date,
        requested_start_time: Optional[datetime],
        requested_end_time: Optional[datetime],
        reason: Optional[str],
        requested_by: int,
        status: BreakStatus = BreakStatus.PENDING,
        approved_start_time: Optional[datetime] = None,
        approved_end_time: Optional[datetime] = None,
        duration_minutes: Optional[int] = None,
        notes: Optional[str] = None,
        reviewed_by: Optional[int] = None,
        reviewed_at: Optional[datetime] = None,
        reviewer_notes: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def set_review(
        self,
        *,
        request_id: int,
        status: BreakStatus,
        reviewed_by: Optional[int],
        reviewed_at: Optional[datetime],
        reviewer_notes: Optional[str],
        approved_start_time: Optional[datetime] = None,
        approved_end_time: Optional[datetime] = None,
        duration_minutes: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> bool:
        """Write a status change; the approved window columns are written as given."""

        raise NotImplementedError

    def delete_pending(self, request_id: int) -> bool:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, status: Optional[BreakStatus] = None) -> Sequence[BreakRequest]:
        """Newest first."""

        raise NotImplementedError

    def list_for_attendance(self, attendance_record_id: int) -> Sequence[BreakRequest]:
        raise NotImplementedError

    def list_by_status(self, status: BreakStatus) -> Sequence[BreakRequest]:
        raise NotImplementedError

    def has_pending(self, user_id: int, attendance_record_id: int) -> bool:
        raise NotImplementedError
