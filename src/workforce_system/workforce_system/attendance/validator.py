"""Rules checked before any attendance write.

The same checks guard HR manual marking and HR edits. A failure raises a
dedicated ``ValidationError`` subclass and nothing is written.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional

from ..core.enums import WeekDay
from ..core.exceptions import CheckOutBeforeCheckIn, FutureCheckOut, NonWorkingDay
from ..workdays.rules import day_name, normalize_working_days


def ensure_working_day(
    work_date: date,
    working_days: Iterable[WeekDay | str] | None,
    *,
    action: str = "mark",
) -> None:
    """An empty working-day set leaves every date open."""
    days = normalize_working_days(working_days)
    if days and day_name(work_date) not in days:
        raise NonWorkingDay(f"Cannot {action} attendance on a non-working day")


def ensure_check_out_not_future(check_out: Optional[datetime], now: datetime) -> None:
    if check_out is not None and check_out > now:
        raise FutureCheckOut("Check-out time cannot be in the future")


def ensure_check_out_after_check_in(check_in: Optional[datetime], check_out: Optional[datetime]) -> None:
    if check_in is not None and check_out is not None and check_out < check_in:
        raise CheckOutBeforeCheckIn("Check-out time must be after check-in time")


def validate_attendance_times(
    *,
    work_date: Optional[date],
    working_days: Iterable[WeekDay | str] | None,
    check_in: Optional[datetime],
    check_out: Optional[datetime],
    now: datetime,
    action: str = "mark",
) -> None:
    """Run the working-day, not-future and ordering checks in that order.

    Pass ``work_date=None`` to skip the working-day check.
    """
    if work_date is not None:
        ensure_working_day(work_date, working_days, action=action)
    ensure_check_out_not_future(check_out, now)
    ensure_check_out_after_check_in(check_in, check_out)
