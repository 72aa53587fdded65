from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import CheckInMethod, MarkedByRole


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance row per (user, calendar date)."""

    record_id: int
    user_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    marked_by: Optional[int]
    marked_by_role: MarkedByRole
    check_in_method: CheckInMethod
    notes: Optional[str] = None
    total_hours: Optional[float] = None
    is_valid_day: bool = False
    check_in_wifi_ssid: Optional[str] = None
    check_in_wifi_verified: bool = False
    check_out_wifi_ssid: Optional[str] = None
    check_out_wifi_verified: bool = False


@dataclass(frozen=True)
class AttendanceSummary:
    """Read-model for one user's month."""

    records: Sequence[AttendanceRecord] = field(default_factory=tuple)
    total_days: int = 0
    valid_days: int = 0
    total_hours: float = 0.0
    avg_hours: float = 0.0
    working_days: int = 0
    attendance_percentage: int = 0


@dataclass(frozen=True)
class AttendanceStats:
    """HR read-model over a date range, all users."""

    total_records: int
    valid_records: int
    total_hours: float
    avg_hours: float
    unique_users: int
