from datetime import date, datetime

import pytest

from src.workforce_system.workforce_system.attendance import calculations
from src.workforce_system.workforce_system.attendance.model import AttendanceRecord
from src.workforce_system.workforce_system.breaks.model import BreakRequest
from src.workforce_system.workforce_system.core.enums import (
    AttendanceStatus,
    BreakStatus,
    CheckInMethod,
    MarkedByRole,
)
from src.workforce_system.workforce_system.core.exceptions import ValidationError


def _record(check_in=None, check_out=None) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=1,
        user_id=1,
        work_date=date(2024, 2, 1),
        check_in_time=check_in,
        check_out_time=check_out,
        marked_by=1,
        marked_by_role=MarkedByRole.SELF,
        check_in_method=CheckInMethod.SELF,
    )


def _break(minutes: int, status=BreakStatus.APPROVED) -> BreakRequest:
    return BreakRequest(
        request_id=minutes,
        user_id=1,
        attendance_record_id=1,
        request_date=date(2024, 2, 1),
        requested_start_time=None,
        requested_end_time=None,
        status=status,
        requested_by=1,
        duration_minutes=minutes,
    )


def test_total_hours_uses_minute_fraction():
    assert calculations.total_hours(datetime(2024, 2, 1, 9, 0), datetime(2024, 2, 1, 17, 45)) == 8.75


def test_total_hours_drops_seconds():
    assert calculations.total_hours(datetime(2024, 2, 1, 9, 0, 0), datetime(2024, 2, 1, 9, 30, 59)) == 0.5


def test_format_hours():
    assert calculations.format_hours(0) == "0h"
    assert calculations.format_hours(None) == "0h"
    assert calculations.format_hours(8) == "8h"
    assert calculations.format_hours(8.5) == "8h 30m"
    assert calculations.format_hours(7.999) == "8h"


def test_valid_day_needs_minimum_hours():
    assert calculations.is_valid_attendance(6)
    assert not calculations.is_valid_attendance(5.99)
    assert not calculations.is_valid_attendance(None)
    assert calculations.is_valid_attendance(4, minimum_hours=4)


def test_attendance_status():
    morning = datetime(2024, 2, 1, 9, 0)
    assert calculations.attendance_status(_record()) == AttendanceStatus.ABSENT
    assert calculations.attendance_status(_record(morning)) == AttendanceStatus.INCOMPLETE
    assert calculations.attendance_status(_record(morning, datetime(2024, 2, 1, 17, 0))) == AttendanceStatus.PRESENT


def test_attendance_percentage():
    assert calculations.attendance_percentage(0, 0) == 0
    assert calculations.attendance_percentage(18, 20) == 90
    assert calculations.attendance_percentage(1, 3) == 33


def test_break_window_rules():
    check_in = datetime(2024, 2, 1, 9, 0)
    check_out = datetime(2024, 2, 1, 17, 0)

    calculations.validate_break_window(datetime(2024, 2, 1, 12, 0), datetime(2024, 2, 1, 12, 30), check_in, check_out)

    with pytest.raises(ValidationError):
        calculations.validate_break_window(datetime(2024, 2, 1, 12, 30), datetime(2024, 2, 1, 12, 30), check_in, check_out)
    with pytest.raises(ValidationError):
        calculations.validate_break_window(datetime(2024, 2, 1, 8, 30), datetime(2024, 2, 1, 9, 30), check_in, check_out)
    with pytest.raises(ValidationError):
        calculations.validate_break_window(datetime(2024, 2, 1, 16, 30), datetime(2024, 2, 1, 17, 30), check_in, check_out)


def test_open_day_allows_break_after_check_in():
    calculations.validate_break_window(
        datetime(2024, 2, 1, 20, 0),
        datetime(2024, 2, 1, 20, 15),
        datetime(2024, 2, 1, 9, 0),
        None,
    )


def test_net_hours_counts_approved_breaks_only():
    breaks = [_break(30), _break(60, status=BreakStatus.PENDING), _break(15, status=BreakStatus.REJECTED)]
    assert calculations.approved_break_hours(breaks) == 0.5
    assert calculations.net_hours(8.0, breaks) == 7.5
    assert calculations.net_hours(0.25, breaks) == 0.0
    assert calculations.net_hours(None, []) == 0.0


def test_break_summary():
    assert calculations.format_break_summary([]) == "No breaks"
    assert calculations.format_break_summary([_break(30)]) == "1 break (30m)"
    assert calculations.format_break_summary([_break(45), _break(45)]) == "2 breaks (1h 30m)"
    assert calculations.format_break_summary([_break(60)]) == "1 break (1h)"
