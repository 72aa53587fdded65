from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from .base import SalaryCalculator

CENTS = Decimal("0.01")


def money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


class StandardSalaryCalculator(SalaryCalculator):
    """Standard rule: base + allowances + bonus - deductions, not below 0."""

    def total_salary(self, base: Decimal, allowances: Decimal, bonus: Decimal, deductions: Decimal) -> Decimal:
        total = Decimal(str(base)) + Decimal(str(allowances)) + Decimal(str(bonus)) - Decimal(str(deductions))
        return money(max(total, Decimal("0")))

    def pro_rated_salary(self, base: Decimal, working_days: int, present_days: int) -> Decimal:
        if not working_days:
            return money(0)
        present = min(max(int(present_days), 0), int(working_days))
        return money(Decimal(str(base)) * present / int(working_days))

    def hourly_rate(self, base: Decimal, expected_hours: float) -> Decimal:
        if not expected_hours:
            return money(0)
        return money(Decimal(str(base)) / Decimal(str(expected_hours)))

    def earned_salary(self, base: Decimal, expected_hours: float, hours_worked: float) -> Decimal:
        # hours worked x hourly rate, with the rate kept unrounded
        if not expected_hours:
            return money(0)
        return money(Decimal(str(base)) * Decimal(str(hours_worked or 0)) / Decimal(str(expected_hours)))
