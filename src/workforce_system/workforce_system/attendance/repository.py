from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import CheckInMethod, MarkedByRole
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_range(self, user_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        """Records of one user between two dates (inclusive), newest first."""

        raise NotImplementedError

    def list_all(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        user_id: Optional[int] = None,
        work_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: Optional[datetime],
        check_out_time: Optional[datetime],
        marked_by: int,
        marked_by_role: MarkedByRole,
        check_in_method: CheckInMethod,
        notes: Optional[str] = None,
        total_hours: Optional[float] = None,
        is_valid_day: bool = False,
        check_in_wifi_ssid: Optional[str] = None,
        check_in_wifi_verified: bool = False,
    ) -> int:
        raise NotImplementedError

    def update_times(
        self,
        *,
        record_id: int,
        check_in_time: Optional[datetime],
        check_out_time: Optional[datetime],
        notes: Optional[str],
        total_hours: Optional[float],
        is_valid_day: bool,
    ) -> bool:
        """HR override of an existing row (same identity)."""

        raise NotImplementedError

    def update_check_out(
        self,
        *,
        record_id: int,
        check_out_time: datetime,
        notes: Optional[str],
        total_hours: float,
        is_valid_day: bool,
        check_out_wifi_ssid: Optional[str] = None,
        check_out_wifi_verified: bool = False,
    ) -> bool:
        raise NotImplementedError

    def delete(self, record_id: int) -> bool:
        raise NotImplementedError
