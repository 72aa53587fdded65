from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import first_day_of_next_month, month_bounds
from ..common.query_keys import MutationResult, SalaryKeys, UserKeys, mutation_result
from ..common.validators import clean_optional, require_daily_hours, require_non_negative
from ..core.enums import SalaryStatus, WeekDay
from ..core.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from ..workdays.rules import average_monthly_hours, monthly_total_hours, ordered_working_days
from .calculator.base import SalaryCalculator
from .calculator.standard_calculator import StandardSalaryCalculator
from .model import MonthlyEarnings, SalaryHistory, SalaryRecord
from .repository import SalaryHistoryRepository, SalaryRecordRepository

logger = logging.getLogger(__name__)

_EDITABLE = ("base_salary", "allowances", "deductions", "bonus", "working_days", "present_days", "leaves_taken", "notes")


def _check_period(month: int, year: int) -> None:
    if not 1 <= int(month) <= 12:
        raise ValidationError("Month must be between 1 and 12")
    if int(year) < 1900:
        raise ValidationError("Year is invalid")


def _check_days(working_days: int, present_days: int, leaves_taken: int) -> None:
    if working_days < 0 or present_days < 0 or leaves_taken < 0:
        raise ValidationError("Day counts cannot be negative")
    if present_days > working_days:
        raise ValidationError("Present days cannot exceed working days")


class SalaryService:
    """Monthly salary records (HR)."""

    def __init__(self, salaries: SalaryRecordRepository, *, calculator: Optional[SalaryCalculator] = None):
        self._salaries = salaries
        self._calculator = calculator or StandardSalaryCalculator()

    def _load(self, record_id: int) -> SalaryRecord:
        rec = self._salaries.get_by_id(int(record_id))
        if not rec:
            raise NotFoundError("Salary record not found")
        return rec

    @staticmethod
    def _keys(rec: SalaryRecord):
        return [SalaryKeys.mine(rec.user_id), SalaryKeys.latest(rec.user_id), SalaryKeys.month(rec.user_id, rec.month, rec.year)]

    def create(
        self,
        *,
        user_id: int,
        month: int,
        year: int,
        base_salary,
        working_days: int,
        present_days: int,
        created_by: int,
        allowances=0,
        deductions=0,
        bonus=0,
        leaves_taken: int = 0,
        notes: Optional[str] = None,
    ) -> MutationResult[SalaryRecord]:
        _check_period(month, year)
        _check_days(int(working_days), int(present_days), int(leaves_taken))
        base = require_non_negative(base_salary, "Base salary")
        allowances = require_non_negative(allowances, "Allowances")
        deductions = require_non_negative(deductions, "Deductions")
        bonus = require_non_negative(bonus, "Bonus")

        if self._salaries.get_for_month(int(user_id), int(month), int(year)):
            raise ValidationError("A salary record already exists for this month")

        record_id = self._salaries.create(
            user_id=int(user_id),
            month=int(month),
            year=int(year),
            base_salary=base,
            allowances=allowances,
            deductions=deductions,
            bonus=bonus,
            working_days=int(working_days),
            present_days=int(present_days),
            leaves_taken=int(leaves_taken),
            total_salary=self._calculator.total_salary(base, allowances, bonus, deductions),
            created_by=int(created_by),
            notes=clean_optional(notes),
        )
        logger.info("Created salary record %s for user %s (%s/%s)", record_id, user_id, month, year)
        rec = self._load(record_id)
        return mutation_result(rec, self._keys(rec))

    def update(self, record_id: int, **fields) -> MutationResult[SalaryRecord]:
        rec = self._load(record_id)
        unknown = set(fields) - set(_EDITABLE)
        if unknown:
            raise ValidationError(f"Cannot edit: {', '.join(sorted(unknown))}")
        if rec.status == SalaryStatus.PAID:
            raise InvalidTransitionError("Paid salary records cannot be edited")

        for name in ("base_salary", "allowances", "deductions", "bonus"):
            if name in fields:
                fields[name] = require_non_negative(fields[name], name.replace("_", " ").capitalize())
        for name in ("working_days", "present_days", "leaves_taken"):
            if name in fields:
                fields[name] = int(fields[name])
        if "notes" in fields:
            fields["notes"] = clean_optional(fields["notes"])

        _check_days(
            fields.get("working_days", rec.working_days),
            fields.get("present_days", rec.present_days),
            fields.get("leaves_taken", rec.leaves_taken),
        )
        fields["total_salary"] = self._calculator.total_salary(
            fields.get("base_salary", rec.base_salary),
            fields.get("allowances", rec.allowances),
            fields.get("bonus", rec.bonus),
            fields.get("deductions", rec.deductions),
        )

        self._salaries.update_amounts(rec.record_id, **fields)
        logger.info("Updated salary record %s", rec.record_id)
        rec = self._load(rec.record_id)
        return mutation_result(rec, self._keys(rec))

    def set_status(
        self,
        record_id: int,
        status,
        *,
        approved_by: Optional[int] = None,
        today: Optional[date] = None,
        payment_method: Optional[str] = None,
        override: bool = False,
    ) -> MutationResult[SalaryRecord]:
        """Move along draft -> pending -> approved -> paid.

        Backward or repeated moves need ``override`` (HR correction).
        """
        try:
            status = SalaryStatus(status)
        except ValueError:
            raise ValidationError("Invalid salary status")

        rec = self._load(record_id)
        if not override and status.rank <= rec.status.rank:
            raise InvalidTransitionError(f"Cannot move salary from {rec.status.value} to {status.value}")

        keeps_approver = status in (SalaryStatus.APPROVED, SalaryStatus.PAID)
        if keeps_approver and approved_by is None:
            raise ValidationError("Approver is required")

        self._salaries.set_status(
            record_id=rec.record_id,
            status=status,
            approved_by=int(approved_by) if keeps_approver else None,
            payment_date=(today or date.today()) if status == SalaryStatus.PAID else None,
            payment_method=clean_optional(payment_method),
        )
        logger.info("Salary record %s: %s -> %s", rec.record_id, rec.status.value, status.value)
        rec = self._load(rec.record_id)
        return mutation_result(rec, self._keys(rec))

    def delete(self, record_id: int) -> MutationResult[None]:
        rec = self._load(record_id)
        self._salaries.delete(rec.record_id)
        logger.info("Deleted salary record %s", rec.record_id)
        return mutation_result(None, self._keys(rec))

    def get(self, record_id: int) -> SalaryRecord:
        return self._load(record_id)

    def list_for_user(self, user_id: int) -> Sequence[SalaryRecord]:
        return self._salaries.list_for_user(int(user_id))

    def latest(self, user_id: int) -> Optional[SalaryRecord]:
        records = self._salaries.list_for_user(int(user_id))
        return records[0] if records else None

    def by_month(self, user_id: int, month: int, year: int) -> Optional[SalaryRecord]:
        return self._salaries.get_for_month(int(user_id), int(month), int(year))

    def month_totals(self, month: int, year: int) -> dict:
        records = list(self._salaries.list_for_month(int(month), int(year)))
        total = sum((r.total_salary for r in records), Decimal("0"))
        paid = sum((r.total_salary for r in records if r.status == SalaryStatus.PAID), Decimal("0"))
        return {
            "records": len(records),
            "total_salary": total,
            "paid": paid,
            "outstanding": total - paid,
        }

    def to_ui(self, r: SalaryRecord) -> dict:
        return {
            "id": r.record_id,
            "user_id": r.user_id,
            "month": r.month,
            "year": r.year,
            "base_salary": str(r.base_salary),
            "allowances": str(r.allowances),
            "deductions": str(r.deductions),
            "bonus": str(r.bonus),
            "total_salary": str(r.total_salary),
            "working_days": r.working_days,
            "present_days": r.present_days,
            "pro_rated_salary": str(self._calculator.pro_rated_salary(r.base_salary, r.working_days, r.present_days)),
            "status": r.status.value,
            "payment_date": r.payment_date.strftime("%Y-%m-%d") if r.payment_date else None,
        }


class SalaryHistoryService:
    """Pay-term changes with an effective date; due changes are applied to the user."""

    def __init__(self, history: SalaryHistoryRepository, users: UserRepository):
        self._history = history
        self._users = users

    def _load(self, history_id: int) -> SalaryHistory:
        row = self._history.get_by_id(int(history_id))
        if not row:
            raise NotFoundError("Salary history entry not found")
        return row

    @staticmethod
    def _keys(user_id: int, *, applied: bool):
        keys = [SalaryKeys.history(user_id), SalaryKeys.history_all]
        if applied:
            keys.extend([UserKeys.all, UserKeys.detail(user_id)])
        return keys

    def _apply(self, row: SalaryHistory, now: datetime) -> None:
        self._users.update_salary_terms(
            row.user_id,
            base_salary=row.new_base_salary,
            working_days=row.new_working_days,
            daily_working_hours=row.new_daily_hours,
        )
        self._history.mark_applied(row.history_id, applied_at=now)

    def change_salary(
        self,
        *,
        user_id: int,
        base_salary,
        working_days: Sequence[WeekDay | str],
        daily_hours: float,
        changed_by: int,
        reason: Optional[str] = None,
        notes: Optional[str] = None,
        effective_from: Optional[date] = None,
        now: datetime | None = None,
    ) -> MutationResult[SalaryHistory]:
        """Record a change; it takes effect at once when ``effective_from`` is not in the future.

        ``effective_from`` defaults to the first day of next month.
        """
        now = now or datetime.now()
        today = now.date()

        user: Optional[User] = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("Employee not found")

        base = require_non_negative(base_salary, "Base salary")
        days = ordered_working_days(working_days)
        if not days:
            raise ValidationError("Select at least one working day")
        daily_hours = require_daily_hours(daily_hours)

        effective_from = effective_from or first_day_of_next_month(today)
        history_id = self._history.create(
            user_id=user.user_id,
            previous_base_salary=user.base_salary,
            new_base_salary=base,
            previous_working_days=user.working_days,
            new_working_days=days,
            previous_daily_hours=user.daily_working_hours,
            new_daily_hours=daily_hours,
            effective_from=effective_from,
            changed_by=int(changed_by),
            change_reason=clean_optional(reason),
            notes=clean_optional(notes),
        )

        applied = effective_from <= today
        if applied:
            self._apply(self._load(history_id), now)
            logger.info("Salary change %s for user %s applied immediately", history_id, user.user_id)
        else:
            logger.info("Salary change %s for user %s scheduled for %s", history_id, user.user_id, effective_from)

        return mutation_result(self._load(history_id), self._keys(user.user_id, applied=applied))

    def apply_pending(self, *, now: datetime | None = None) -> MutationResult[list[int]]:
        """Apply every unapplied change that is due, oldest effective date first."""
        now = now or datetime.now()
        due = list(self._history.list_due_unapplied(now.date()))

        keys = []
        for row in due:
            self._apply(row, now)
            keys.extend(self._keys(row.user_id, applied=True))

        if due:
            logger.info("Applied %d pending salary change(s)", len(due))
        return mutation_result([r.history_id for r in due], keys)

    def delete(self, history_id: int) -> MutationResult[None]:
        row = self._load(history_id)
        if row.is_applied:
            raise InvalidTransitionError("Applied salary changes cannot be deleted")
        self._history.delete(row.history_id)
        logger.info("Deleted salary change %s", row.history_id)
        return mutation_result(None, self._keys(row.user_id, applied=False))

    def update_notes(self, history_id: int, notes: Optional[str]) -> MutationResult[SalaryHistory]:
        row = self._load(history_id)
        self._history.update_notes(row.history_id, clean_optional(notes))
        return mutation_result(self._load(row.history_id), self._keys(row.user_id, applied=False))

    def list_for_user(self, user_id: int) -> Sequence[SalaryHistory]:
        return self._history.list_for_user(int(user_id))

    def list_all(self, **filters) -> Sequence[SalaryHistory]:
        return self._history.list_all(**filters)

    def latest(self, user_id: int) -> Optional[SalaryHistory]:
        rows = self._history.list_for_user(int(user_id))
        return rows[0] if rows else None

    def pending(self, user_id: int, *, today: Optional[date] = None) -> Optional[SalaryHistory]:
        """Nearest change still in the future."""
        today = today or date.today()
        upcoming = [r for r in self._history.list_for_user(int(user_id)) if r.effective_from > today and not r.is_applied]
        return min(upcoming, key=lambda r: r.effective_from) if upcoming else None


class EarningsService:
    """Month-to-date earnings derived from attendance hours."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        *,
        calculator: Optional[SalaryCalculator] = None,
    ):
        self._attendance = attendance
        self._users = users
        self._calculator = calculator or StandardSalaryCalculator()

    def monthly_earnings(self, user_id: int, month: int, year: int) -> MonthlyEarnings:
        _check_period(month, year)
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("Employee not found")

        start, end = month_bounds(int(month), int(year))
        records = self._attendance.list_range(user.user_id, start, end)
        hours_worked = round(sum(r.total_hours or 0 for r in records), 2)
        expected = monthly_total_hours(user.working_days, user.daily_working_hours, int(month), int(year))

        earned = self._calculator.earned_salary(user.base_salary, expected, hours_worked)
        hours_progress = min(hours_worked / expected * 100, 100) if expected else 0
        salary_progress = min(float(earned / user.base_salary) * 100, 100) if user.base_salary else 0

        return MonthlyEarnings(
            user_id=user.user_id,
            month=int(month),
            year=int(year),
            base_salary=user.base_salary,
            expected_hours=float(expected),
            hours_worked=hours_worked,
            hourly_rate=self._calculator.hourly_rate(user.base_salary, expected),
            earned_salary=earned,
            hours_progress=round(hours_progress, 2),
            salary_progress=round(salary_progress, 2),
            average_monthly_hours=round(average_monthly_hours(user.working_days, user.daily_working_hours, int(year)), 2),
        )
