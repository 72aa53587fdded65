"""Working-day calendar arithmetic.

Working days are a user's subset of the seven weekdays. The functions here
count and test membership only: an empty set matches no day at all. The
attendance validator applies its own, different, rule for an empty set.
"""

from __future__ import annotations

import calendar
from datetime import date
from typing import Iterable, Sequence

from ..core.enums import WeekDay

ALL_WEEKDAYS: tuple[WeekDay, ...] = (
    WeekDay.MONDAY,
    WeekDay.TUESDAY,
    WeekDay.WEDNESDAY,
    WeekDay.THURSDAY,
    WeekDay.FRIDAY,
    WeekDay.SATURDAY,
    WeekDay.SUNDAY,
)

DEFAULT_WORKING_DAYS: tuple[WeekDay, ...] = ALL_WEEKDAYS[:5]


def normalize_working_days(working_days: Iterable[WeekDay | str] | None) -> frozenset[WeekDay]:
    """Coerce stored weekday names (any case) into a set of ``WeekDay``."""
    return frozenset(WeekDay(str(getattr(d, "value", d)).lower()) for d in (working_days or ()))


def ordered_working_days(working_days: Iterable[WeekDay | str] | None) -> tuple[WeekDay, ...]:
    """Same as normalize_working_days, in Monday..Sunday order for storage."""
    days = normalize_working_days(working_days)
    return tuple(d for d in ALL_WEEKDAYS if d in days)


def day_name(d: date) -> WeekDay:
    # date.weekday(): Monday == 0
    return ALL_WEEKDAYS[d.weekday()]


def is_working_day(d: date, working_days: Iterable[WeekDay | str]) -> bool:
    return day_name(d) in normalize_working_days(working_days)


def working_days_in_month(working_days: Iterable[WeekDay | str], month: int, year: int) -> int:
    """Count the days of ``month`` (1-12) whose weekday is in ``working_days``."""
    days = normalize_working_days(working_days)
    if not days:
        return 0
    days_in_month = calendar.monthrange(year, month)[1]
    return sum(1 for day in range(1, days_in_month + 1) if day_name(date(year, month, day)) in days)


def monthly_total_hours(working_days: Iterable[WeekDay | str], daily_hours: float, month: int, year: int) -> float:
    return working_days_in_month(working_days, month, year) * daily_hours


def average_monthly_hours(working_days: Iterable[WeekDay | str], daily_hours: float, year: int) -> float:
    """Mean of the twelve monthly totals of ``year``."""
    days = normalize_working_days(working_days)
    total = sum(monthly_total_hours(days, daily_hours, month, year) for month in range(1, 13))
    return total / 12


def hourly_rate(base_salary: float, total_monthly_hours: float) -> float:
    if not total_monthly_hours:
        return 0
    return base_salary / total_monthly_hours


def weekday_display_name(day: WeekDay) -> str:
    return day.value.capitalize()


def format_working_days(working_days: Sequence[WeekDay | str]) -> str:
    days = normalize_working_days(working_days)
    if not days:
        return "No working days"
    if len(days) == 7:
        return "All days"
    if days == frozenset(DEFAULT_WORKING_DAYS):
        return "Mon-Fri"
    if len(days) <= 3:
        ordered = [d for d in ALL_WEEKDAYS if d in days]
        return ", ".join(weekday_display_name(d)[:3] for d in ordered)
    return f"{len(days)} days/week"
