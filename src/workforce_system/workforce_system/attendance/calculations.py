"""Hours and attendance derivations.

Every function here is pure. Missing inputs have explicit zero results
documented per function instead of call-site fallbacks.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Iterable, Optional

from ..core.constants import DEFAULT_MINIMUM_VALID_HOURS
from ..core.enums import AttendanceStatus, BreakStatus
from ..core.exceptions import ValidationError


def total_hours(check_in: datetime, check_out: datetime) -> float:
    """Whole hours plus the minute remainder as a fraction, 2 decimals.

    09:00 -> 17:45 gives 8.75. Seconds below a full minute are dropped.
    """
    minutes = math.trunc((check_out - check_in).total_seconds() / 60)
    hours = math.trunc(minutes / 60)
    remainder = minutes - hours * 60
    return round(hours + remainder / 60, 2)


def format_hours(hours: Optional[float]) -> str:
    """Render ``8.5`` as ``"8h 30m"``; the minutes part is left out when zero.

    ``None`` and ``0`` both render as ``"0h"``.
    """
    if not hours:
        return "0h"
    h = math.floor(hours)
    m = round((hours - h) * 60)
    if m == 60:
        h, m = h + 1, 0
    if m == 0:
        return f"{h}h"
    return f"{h}h {m}m"


def is_valid_attendance(hours: Optional[float], minimum_hours: float = DEFAULT_MINIMUM_VALID_HOURS) -> bool:
    return (hours or 0) >= minimum_hours


def attendance_status(record) -> AttendanceStatus:
    """Absent without a check-in, Incomplete without a check-out, else Present."""
    if not getattr(record, "check_in_time", None):
        return AttendanceStatus.ABSENT
    if not getattr(record, "check_out_time", None):
        return AttendanceStatus.INCOMPLETE
    return AttendanceStatus.PRESENT


def attendance_percentage(present_days: int, total_days: int) -> int:
    """0 when ``total_days`` is 0."""
    if total_days == 0:
        return 0
    return round(present_days / total_days * 100)


def break_duration_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between ``start`` and ``end``, never negative."""
    return max(0, math.trunc((end - start).total_seconds() / 60))


def validate_break_window(
    break_start: datetime,
    break_end: datetime,
    check_in: Optional[datetime],
    check_out: Optional[datetime],
) -> None:
    if break_end <= break_start:
        raise ValidationError("Break end time must be after start time")
    if check_in and break_start < check_in:
        raise ValidationError("Break cannot start before check-in time")
    if check_out and break_end > check_out:
        raise ValidationError("Break cannot end after check-out time")


def _approved(breaks: Iterable) -> list:
    return [b for b in (breaks or ()) if getattr(b, "status", None) == BreakStatus.APPROVED]


def approved_break_hours(breaks: Iterable) -> float:
    """Sum of approved break durations in hours; 0 for no breaks."""
    minutes = sum(b.duration_minutes or 0 for b in _approved(breaks))
    return round(minutes / 60, 2)


def net_hours(hours: Optional[float], breaks: Iterable) -> float:
    """Worked hours minus approved breaks, floored at 0."""
    return round(max(0.0, (hours or 0) - approved_break_hours(breaks)), 2)


def format_break_summary(breaks: Iterable) -> str:
    approved = _approved(breaks)
    if not approved:
        return "No breaks"

    count = len(approved)
    minutes = sum(b.duration_minutes or 0 for b in approved)
    h, m = divmod(minutes, 60)

    summary = f"{count} break{'s' if count > 1 else ''}"
    if h and m:
        summary += f" ({h}h {m}m)"
    elif h:
        summary += f" ({h}h)"
    elif m:
        summary += f" ({m}m)"
    return summary
