from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal


class SalaryCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def total_salary(self, base: Decimal, allowances: Decimal, bonus: Decimal, deductions: Decimal) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def pro_rated_salary(self, base: Decimal, working_days: int, present_days: int) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def hourly_rate(self, base: Decimal, expected_hours: float) -> Decimal:
        raise NotImplementedError

    @abstractmethod
    def earned_salary(self, base: Decimal, expected_hours: float, hours_worked: float) -> Decimal:
        raise NotImplementedError
