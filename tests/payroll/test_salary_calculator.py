from decimal import Decimal

from src.workforce_system.workforce_system.payroll.calculator.standard_calculator import StandardSalaryCalculator, money


def test_total_salary_adds_allowances_and_bonus():
    calc = StandardSalaryCalculator()
    assert calc.total_salary(Decimal("5000"), Decimal("300"), Decimal("200"), Decimal("150.50")) == Decimal("5349.50")


def test_total_salary_is_never_negative():
    calc = StandardSalaryCalculator()
    assert calc.total_salary(Decimal("100"), Decimal("0"), Decimal("0"), Decimal("250")) == Decimal("0.00")


def test_pro_rated_salary():
    calc = StandardSalaryCalculator()
    assert calc.pro_rated_salary(Decimal("2100"), 21, 20) == Decimal("2000.00")
    assert calc.pro_rated_salary(Decimal("2100"), 21, 30) == Decimal("2100.00")
    assert calc.pro_rated_salary(Decimal("2100"), 0, 5) == Decimal("0.00")


def test_hourly_rate():
    calc = StandardSalaryCalculator()
    assert calc.hourly_rate(Decimal("16800"), 168) == Decimal("100.00")
    assert calc.hourly_rate(Decimal("1000"), 0) == Decimal("0.00")


def test_earned_salary_keeps_rate_unrounded():
    calc = StandardSalaryCalculator()
    # 1000 / 168 = 5.952..., times 84h is exactly half
    assert calc.earned_salary(Decimal("1000"), 168, 84) == Decimal("500.00")
    assert calc.earned_salary(Decimal("1000"), 0, 84) == Decimal("0.00")


def test_money_rounds_half_up():
    assert money("2.345") == Decimal("2.35")
    assert money(0) == Decimal("0.00")
