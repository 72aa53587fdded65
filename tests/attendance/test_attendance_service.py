from __future__ import annotations

from datetime import date, datetime

import pytest

from src.workforce_system.workforce_system.common.query_keys import AttendanceKeys
from src.workforce_system.workforce_system.core.enums import CheckInMethod, MarkedByRole, WeekDay
from src.workforce_system.workforce_system.core.exceptions import (
    FutureCheckOut,
    NonWorkingDay,
    NotFoundError,
    ValidationError,
)
from src.workforce_system.workforce_system.wifi.model import WiFiVerificationResult


def test_check_in_then_check_out(container, users, fixed_now):
    user = users.add()
    svc = container.attendance_service

    morning = fixed_now.replace(hour=9, minute=0)
    result = svc.check_in(user.user_id, now=morning)
    rec = result.data
    assert rec.check_in_time == morning
    assert rec.check_out_time is None
    assert rec.marked_by_role == MarkedByRole.SELF
    assert rec.check_in_method == CheckInMethod.SELF
    assert result.affects(AttendanceKeys.today(user.user_id))

    out = svc.check_out(user.user_id, now=fixed_now.replace(hour=17, minute=45)).data
    assert out.record_id == rec.record_id
    assert out.total_hours == 8.75
    assert out.is_valid_day


def test_second_check_in_same_day_is_rejected(container, users, fixed_now):
    user = users.add()
    svc = container.attendance_service
    svc.check_in(user.user_id, now=fixed_now.replace(hour=9))

    with pytest.raises(ValidationError, match="already checked in"):
        svc.check_in(user.user_id, now=fixed_now.replace(hour=10))


def test_check_out_without_check_in(container, users, fixed_now):
    user = users.add()
    with pytest.raises(ValidationError, match="not checked in"):
        container.attendance_service.check_out(user.user_id, now=fixed_now)


def test_check_out_twice(container, users, fixed_now):
    user = users.add()
    svc = container.attendance_service
    svc.check_in(user.user_id, now=fixed_now.replace(hour=9))
    svc.check_out(user.user_id, now=fixed_now.replace(hour=12))

    with pytest.raises(ValidationError, match="already checked out"):
        svc.check_out(user.user_id, now=fixed_now.replace(hour=13))


def test_inactive_user_cannot_check_in(container, users, fixed_now):
    user = users.add(is_active=False)
    with pytest.raises(ValidationError):
        container.attendance_service.check_in(user.user_id, now=fixed_now)


def test_short_day_is_not_valid(container, users, fixed_now):
    user = users.add()
    svc = container.attendance_service
    svc.check_in(user.user_id, now=fixed_now.replace(hour=9))
    rec = svc.check_out(user.user_id, now=fixed_now.replace(hour=14, minute=30)).data

    assert rec.total_hours == 5.5
    assert not rec.is_valid_day


def test_wifi_outcome_is_stored_with_the_record(container, users, fixed_now):
    user = users.add()
    svc = container.attendance_service
    wifi = WiFiVerificationResult(current_ssid="Office-5G", is_verified=True, is_required=True)

    rec = svc.check_in(user.user_id, now=fixed_now.replace(hour=9), wifi=wifi).data
    assert rec.check_in_wifi_ssid == "Office-5G"
    assert rec.check_in_wifi_verified

    failed = WiFiVerificationResult(current_ssid="Cafe", is_verified=False, is_required=True)
    rec = svc.check_out(user.user_id, now=fixed_now, wifi=failed).data
    assert rec.check_out_wifi_ssid == "Cafe"
    assert not rec.check_out_wifi_verified


def test_mark_attendance_twice_keeps_one_row(container, users, attendance, fixed_now):
    user = users.add()
    hr = users.add()
    svc = container.attendance_service
    day = date(2024, 1, 31)

    first = svc.mark_attendance(
        user_id=user.user_id,
        work_date=day,
        check_in=datetime(2024, 1, 31, 9, 0),
        check_out=datetime(2024, 1, 31, 17, 0),
        marked_by=hr.user_id,
        now=fixed_now,
    ).data
    second = svc.mark_attendance(
        user_id=user.user_id,
        work_date=day,
        check_in=datetime(2024, 1, 31, 10, 0),
        check_out=datetime(2024, 1, 31, 12, 0),
        marked_by=hr.user_id,
        now=fixed_now,
    ).data

    assert second.record_id == first.record_id
    assert len(attendance.list_all(user_id=user.user_id)) == 1
    assert second.total_hours == 2.0
    assert not second.is_valid_day
    assert first.marked_by_role == MarkedByRole.HR
    assert first.check_in_method == CheckInMethod.MANUAL


def test_mark_attendance_on_non_working_day(container, users, attendance, fixed_now):
    user = users.add(working_days=(WeekDay.MONDAY, WeekDay.TUESDAY))
    with pytest.raises(NonWorkingDay):
        container.attendance_service.mark_attendance(
            user_id=user.user_id,
            work_date=date(2024, 1, 31),  # Wednesday
            check_in=datetime(2024, 1, 31, 9, 0),
            marked_by=99,
            now=fixed_now,
        )
    assert attendance.rows == {}


def test_mark_attendance_rejects_future_check_out(container, users, fixed_now):
    user = users.add()
    with pytest.raises(FutureCheckOut):
        container.attendance_service.mark_attendance(
            user_id=user.user_id,
            work_date=fixed_now.date(),
            check_in=fixed_now.replace(hour=9),
            check_out=fixed_now.replace(minute=1),
            marked_by=99,
            now=fixed_now,
        )


def test_mark_attendance_for_unknown_user(container, fixed_now):
    with pytest.raises(NotFoundError):
        container.attendance_service.mark_attendance(
            user_id=404,
            work_date=date(2024, 1, 31),
            check_in=datetime(2024, 1, 31, 9, 0),
            marked_by=1,
            now=fixed_now,
        )


def test_update_keeps_omitted_fields(container, users, attendance, fixed_now):
    user = users.add()
    rec = attendance.add(
        user_id=user.user_id,
        work_date=date(2024, 1, 31),
        check_in_time=datetime(2024, 1, 31, 9, 0),
        check_out_time=datetime(2024, 1, 31, 17, 0),
        notes="on site",
    )

    updated = container.attendance_service.update_attendance(
        rec.record_id,
        check_out=datetime(2024, 1, 31, 18, 30),
        now=fixed_now,
    ).data
    assert updated.check_in_time == datetime(2024, 1, 31, 9, 0)
    assert updated.total_hours == 9.5
    assert updated.is_valid_day
    assert updated.notes == "on site"


def test_update_can_override_validity(container, users, attendance, fixed_now):
    user = users.add()
    rec = attendance.add(
        user_id=user.user_id,
        work_date=date(2024, 1, 31),
        check_in_time=datetime(2024, 1, 31, 9, 0),
        check_out_time=datetime(2024, 1, 31, 17, 0),
    )
    updated = container.attendance_service.update_attendance(rec.record_id, is_valid_day=False, now=fixed_now).data
    assert updated.total_hours == 8.0
    assert not updated.is_valid_day


def test_delete_attendance(container, users, attendance):
    user = users.add()
    rec = attendance.add(user_id=user.user_id, work_date=date(2024, 1, 31))

    result = container.attendance_service.delete_attendance(rec.record_id)
    assert attendance.get_by_id(rec.record_id) is None
    assert result.affects(AttendanceKeys.detail(rec.record_id))

    with pytest.raises(NotFoundError):
        container.attendance_service.delete_attendance(rec.record_id)


def test_monthly_summary(container, users, attendance):
    user = users.add()
    attendance.add(user_id=user.user_id, work_date=date(2024, 2, 1), total_hours=8.0, is_valid_day=True)
    attendance.add(user_id=user.user_id, work_date=date(2024, 2, 2), total_hours=4.0)
    attendance.add(user_id=user.user_id, work_date=date(2024, 3, 1), total_hours=8.0, is_valid_day=True)

    summary = container.attendance_service.monthly_summary(user.user_id, 2, 2024)
    assert summary.total_days == 2
    assert summary.valid_days == 1
    assert summary.total_hours == 12.0
    assert summary.avg_hours == 6.0
    assert summary.working_days == 21
    assert summary.attendance_percentage == 5

    empty = container.attendance_service.monthly_summary(user.user_id, 4, 2024)
    assert empty.total_days == 0
    assert empty.avg_hours == 0.0
    assert empty.working_days == 22
    assert empty.attendance_percentage == 0


def test_list_range_rejects_reversed_dates(container, users):
    user = users.add()
    with pytest.raises(ValidationError):
        container.attendance_service.list_range(user.user_id, date(2024, 2, 2), date(2024, 2, 1))


def test_stats_over_range(container, users, attendance):
    a = users.add()
    b = users.add()
    attendance.add(user_id=a.user_id, work_date=date(2024, 2, 1), total_hours=8.0, is_valid_day=True)
    attendance.add(user_id=b.user_id, work_date=date(2024, 2, 1), total_hours=3.0)
    attendance.add(user_id=a.user_id, work_date=date(2024, 2, 2), total_hours=7.0, is_valid_day=True)

    stats = container.attendance_service.stats(date(2024, 2, 1), date(2024, 2, 29))
    assert stats.total_records == 3
    assert stats.valid_records == 2
    assert stats.total_hours == 18.0
    assert stats.avg_hours == 6.0
    assert stats.unique_users == 2


def test_monthly_summary_validates_period(container, users):
    user = users.add()
    with pytest.raises(ValidationError):
        container.attendance_service.monthly_summary(user.user_id, 13, 2024)
    with pytest.raises(ValidationError):
        container.attendance_service.monthly_summary(user.user_id, 0, 2024)
    with pytest.raises(ValidationError):
        container.attendance_service.monthly_summary(user.user_id, 2, 0)
