from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import SalaryStatus, WeekDay
from .model import SalaryHistory, SalaryRecord


class SalaryRecordRepository(Protocol):
    def get_by_id(self, record_id: int) -> Optional[SalaryRecord]:
        raise NotImplementedError

    def get_for_month(self, user_id: int, month: int, year: int) -> Optional[SalaryRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        month: int,
        year: int,
        base_salary: Decimal,
        allowances: Decimal,
        deductions: Decimal,
        bonus: Decimal,
        working_days: int,
        present_days: int,
        leaves_taken: int,
        total_salary: Decimal,
        created_by: int,
        notes: Optional[str],
    ) -> int:
        raise NotImplementedError

    def update_amounts(self, record_id: int, **fields) -> bool:
        """Update amount/day columns and total_salary together."""

        raise NotImplementedError

    def set_status(
        self,
        *,
        record_id: int,
        status: SalaryStatus,
        approved_by: Optional[int],
        payment_date: Optional[date],
        payment_method: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def delete(self, record_id: int) -> bool:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[SalaryRecord]:
        """Newest period first."""

        raise NotImplementedError

    def list_for_month(self, month: int, year: int) -> Sequence[SalaryRecord]:
        raise NotImplementedError


class SalaryHistoryRepository(Protocol):
    def get_by_id(self, history_id: int) -> Optional[SalaryHistory]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        previous_base_salary: Optional[Decimal],
        new_base_salary: Decimal,
        previous_working_days: Sequence[WeekDay],
        new_working_days: Sequence[WeekDay],
        previous_daily_hours: Optional[float],
        new_daily_hours: float,
        effective_from: date,
        changed_by: int,
        change_reason: Optional[str],
        notes: Optional[str],
    ) -> int:
        raise NotImplementedError

    def mark_applied(self, history_id: int, *, applied_at: datetime) -> bool:
        raise NotImplementedError

    def update_notes(self, history_id: int, notes: Optional[str]) -> bool:
        raise NotImplementedError

    def delete(self, history_id: int) -> bool:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[SalaryHistory]:
        """Ordered by effective_from desc, then created_at desc."""

        raise NotImplementedError

    def list_all(
        self,
        *,
        user_id: Optional[int] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> Sequence[SalaryHistory]:
        raise NotImplementedError

    def list_due_unapplied(self, today: date) -> Sequence[SalaryHistory]:
        """Unapplied rows with effective_from <= today, oldest effective date first."""

        raise NotImplementedError
