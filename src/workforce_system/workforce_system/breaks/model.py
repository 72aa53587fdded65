from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import BreakStatus


@dataclass(frozen=True)
class BreakRequest:
    request_id: int
    user_id: int
    attendance_record_id: int
    request_date: date
    requested_start_time: Optional[datetime]
    requested_end_time: Optional[datetime]
    status: BreakStatus
    requested_by: int
    approved_start_time: Optional[datetime] = None
    approved_end_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    reason: Optional[str] = None
    notes: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    reviewer_notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def start_time(self) -> Optional[datetime]:
        """Approved window when there is one, else the requested one."""
        return self.approved_start_time or self.requested_start_time

    @property
    def end_time(self) -> Optional[datetime]:
        return self.approved_end_time or self.requested_end_time
