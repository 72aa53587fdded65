from datetime import date

from src.workforce_system.workforce_system.core.enums import WeekDay
from src.workforce_system.workforce_system.workdays import rules

MON_FRI = [WeekDay.MONDAY, WeekDay.TUESDAY, WeekDay.WEDNESDAY, WeekDay.THURSDAY, WeekDay.FRIDAY]


def test_working_days_in_february_2024():
    assert rules.working_days_in_month(MON_FRI, 2, 2024) == 21


def test_no_working_days_counts_zero():
    assert rules.working_days_in_month([], 2, 2024) == 0
    assert rules.monthly_total_hours([], 8, 2, 2024) == 0
    assert not rules.is_working_day(date(2024, 2, 5), [])


def test_monthly_total_hours():
    assert rules.monthly_total_hours(MON_FRI, 8, 2, 2024) == 168


def test_average_monthly_hours():
    every_day = rules.ALL_WEEKDAYS
    # 366 days in 2024
    assert rules.average_monthly_hours(every_day, 1, 2024) == 366 / 12


def test_hourly_rate():
    assert rules.hourly_rate(16800, 168) == 100
    assert rules.hourly_rate(16800, 0) == 0


def test_day_name_and_membership():
    assert rules.day_name(date(2024, 2, 5)) == WeekDay.MONDAY
    assert rules.day_name(date(2024, 2, 4)) == WeekDay.SUNDAY
    assert rules.is_working_day(date(2024, 2, 5), ["monday"])
    assert not rules.is_working_day(date(2024, 2, 4), MON_FRI)


def test_ordered_working_days():
    assert rules.ordered_working_days(["friday", "Monday", WeekDay.WEDNESDAY]) == (
        WeekDay.MONDAY,
        WeekDay.WEDNESDAY,
        WeekDay.FRIDAY,
    )
    assert rules.ordered_working_days(None) == ()


def test_format_working_days():
    assert rules.format_working_days([]) == "No working days"
    assert rules.format_working_days(rules.ALL_WEEKDAYS) == "All days"
    assert rules.format_working_days(MON_FRI) == "Mon-Fri"
    assert rules.format_working_days(["saturday", "monday"]) == "Mon, Sat"
    assert rules.format_working_days(MON_FRI[:4]) == "4 days/week"
