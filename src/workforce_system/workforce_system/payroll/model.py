from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import SalaryStatus, WeekDay


@dataclass(frozen=True)
class SalaryRecord:
    """One payslip: a user's salary for one (month, year)."""

    record_id: int
    user_id: int
    month: int
    year: int
    base_salary: Decimal
    working_days: int
    present_days: int
    allowances: Decimal = Decimal("0")
    deductions: Decimal = Decimal("0")
    bonus: Decimal = Decimal("0")
    leaves_taken: int = 0
    total_salary: Decimal = Decimal("0")
    status: SalaryStatus = SalaryStatus.DRAFT
    created_by: Optional[int] = None
    approved_by: Optional[int] = None
    payment_date: Optional[date] = None
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class SalaryHistory:
    """A change to a user's pay terms, effective from a date."""

    history_id: int
    user_id: int
    new_base_salary: Decimal
    new_working_days: tuple[WeekDay, ...]
    new_daily_hours: float
    effective_from: date
    changed_by: int
    previous_base_salary: Optional[Decimal] = None
    previous_working_days: tuple[WeekDay, ...] = ()
    previous_daily_hours: Optional[float] = None
    change_reason: Optional[str] = None
    notes: Optional[str] = None
    is_applied: bool = False
    applied_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class MonthlyEarnings:
    user_id: int
    month: int
    year: int
    base_salary: Decimal
    expected_hours: float
    hours_worked: float
    hourly_rate: Decimal
    earned_salary: Decimal
    hours_progress: float
    salary_progress: float
    average_monthly_hours: float = 0.0
