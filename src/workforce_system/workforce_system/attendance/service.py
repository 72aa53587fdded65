from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import month_bounds
from ..common.query_keys import AttendanceKeys, MutationResult, mutation_result
from ..common.validators import clean_optional
from ..core.constants import DEFAULT_MINIMUM_VALID_HOURS
from ..core.enums import CheckInMethod, MarkedByRole
from ..core.exceptions import NotFoundError, ValidationError
from ..users.repository import UserRepository
from ..wifi.model import WiFiVerificationResult
from ..workdays.rules import working_days_in_month
from . import calculations
from .model import AttendanceRecord, AttendanceStats, AttendanceSummary
from .repository import AttendanceRepository
from .validator import validate_attendance_times

logger = logging.getLogger(__name__)

_UNSET = object()


class AttendanceService:
    """Attendance lifecycle: self check-in/out and HR marking/editing."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        *,
        minimum_hours: float = DEFAULT_MINIMUM_VALID_HOURS,
    ):
        self._attendance = attendance
        self._users = users
        self._minimum_hours = float(minimum_hours)

    def _derive(self, check_in: Optional[datetime], check_out: Optional[datetime]) -> tuple[Optional[float], bool]:
        if not check_in or not check_out:
            return None, False
        hours = calculations.total_hours(check_in, check_out)
        return hours, calculations.is_valid_attendance(hours, self._minimum_hours)

    def _require_user(self, user_id: int):
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("Employee not found")
        return user

    def _load(self, record_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(record_id))
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    @staticmethod
    def _keys(user_id: int, work_date: date, record_id: Optional[int] = None):
        keys = [
            AttendanceKeys.all,
            AttendanceKeys.today(user_id),
            AttendanceKeys.monthly(user_id, work_date.month, work_date.year),
        ]
        if record_id is not None:
            keys.append(AttendanceKeys.detail(record_id))
        return keys

    def check_in(
        self,
        user_id: int,
        *,
        notes: Optional[str] = None,
        now: datetime | None = None,
        wifi: Optional[WiFiVerificationResult] = None,
    ) -> MutationResult[AttendanceRecord]:
        now = now or datetime.now()
        today = now.date()

        user = self._require_user(user_id)
        if not user.is_active:
            raise ValidationError("Your account is inactive")

        if self._attendance.get_for_user_and_date(user.user_id, today):
            raise ValidationError("You have already checked in today")

        record_id = self._attendance.create(
            user_id=user.user_id,
            work_date=today,
            check_in_time=now,
            check_out_time=None,
            marked_by=user.user_id,
            marked_by_role=MarkedByRole.SELF,
            check_in_method=CheckInMethod.SELF,
            notes=clean_optional(notes),
            check_in_wifi_ssid=wifi.current_ssid if wifi else None,
            check_in_wifi_verified=bool(wifi and wifi.is_verified),
        )
        logger.info("User %s checked in (record %s)", user.user_id, record_id)
        return mutation_result(self._load(record_id), self._keys(user.user_id, today, record_id))

    def check_out(
        self,
        user_id: int,
        *,
        notes: Optional[str] = None,
        now: datetime | None = None,
        wifi: Optional[WiFiVerificationResult] = None,
    ) -> MutationResult[AttendanceRecord]:
        now = now or datetime.now()
        today = now.date()

        record = self._attendance.get_for_user_and_date(int(user_id), today)
        if not record or not record.check_in_time:
            raise ValidationError("You have not checked in today")
        if record.check_out_time is not None:
            raise ValidationError("You have already checked out today")

        validate_attendance_times(
            work_date=None,
            working_days=None,
            check_in=record.check_in_time,
            check_out=now,
            now=now,
        )

        hours, valid = self._derive(record.check_in_time, now)
        ok = self._attendance.update_check_out(
            record_id=record.record_id,
            check_out_time=now,
            notes=clean_optional(notes) or record.notes,
            total_hours=hours,
            is_valid_day=valid,
            check_out_wifi_ssid=wifi.current_ssid if wifi else None,
            check_out_wifi_verified=bool(wifi and wifi.is_verified),
        )
        if not ok:
            raise ValidationError("Check-out failed")

        logger.info("User %s checked out (record %s, %.2fh)", record.user_id, record.record_id, hours)
        return mutation_result(self._load(record.record_id), self._keys(record.user_id, today, record.record_id))

    def mark_attendance(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in: datetime,
        check_out: Optional[datetime] = None,
        marked_by: int,
        notes: Optional[str] = None,
        now: datetime | None = None,
    ) -> MutationResult[AttendanceRecord]:
        """HR manual mark: update the (user, date) row if present, else insert one.

        Sequential single-writer use never yields two rows for a date.
        """
        now = now or datetime.now()
        user = self._require_user(user_id)

        validate_attendance_times(
            work_date=work_date,
            working_days=user.working_days,
            check_in=check_in,
            check_out=check_out,
            now=now,
        )

        hours, valid = self._derive(check_in, check_out)
        notes = clean_optional(notes)

        existing = self._attendance.get_for_user_and_date(user.user_id, work_date)
        if existing:
            self._attendance.update_times(
                record_id=existing.record_id,
                check_in_time=check_in,
                check_out_time=check_out,
                notes=notes,
                total_hours=hours,
                is_valid_day=valid,
            )
            record_id = existing.record_id
            logger.info("HR %s updated attendance %s for user %s", marked_by, record_id, user.user_id)
        else:
            record_id = self._attendance.create(
                user_id=user.user_id,
                work_date=work_date,
                check_in_time=check_in,
                check_out_time=check_out,
                marked_by=int(marked_by),
                marked_by_role=MarkedByRole.HR,
                check_in_method=CheckInMethod.MANUAL,
                notes=notes,
                total_hours=hours,
                is_valid_day=valid,
            )
            logger.info("HR %s marked attendance %s for user %s", marked_by, record_id, user.user_id)

        return mutation_result(self._load(record_id), self._keys(user.user_id, work_date, record_id))

    def update_attendance(
        self,
        record_id: int,
        *,
        check_in=_UNSET,
        check_out=_UNSET,
        notes=_UNSET,
        is_valid_day=_UNSET,
        now: datetime | None = None,
    ) -> MutationResult[AttendanceRecord]:
        """HR edit of an existing row; omitted fields keep their stored value."""
        now = now or datetime.now()
        record = self._load(record_id)

        new_check_in = record.check_in_time if check_in is _UNSET else check_in
        new_check_out = record.check_out_time if check_out is _UNSET else check_out
        new_notes = record.notes if notes is _UNSET else clean_optional(notes)

        working_days = None
        if check_in is not _UNSET and check_in is not None:
            working_days = self._require_user(record.user_id).working_days

        validate_attendance_times(
            work_date=record.work_date if working_days is not None else None,
            working_days=working_days,
            check_in=new_check_in,
            check_out=new_check_out,
            now=now,
            action="update",
        )

        hours, valid = self._derive(new_check_in, new_check_out)
        if is_valid_day is not _UNSET:
            valid = bool(is_valid_day)

        self._attendance.update_times(
            record_id=record.record_id,
            check_in_time=new_check_in,
            check_out_time=new_check_out,
            notes=new_notes,
            total_hours=hours,
            is_valid_day=valid,
        )
        logger.info("Attendance %s updated", record.record_id)
        return mutation_result(self._load(record.record_id), self._keys(record.user_id, record.work_date, record.record_id))

    def delete_attendance(self, record_id: int) -> MutationResult[None]:
        record = self._load(record_id)
        if not self._attendance.delete(record.record_id):
            raise ValidationError("Deleting attendance failed")
        logger.info("Attendance %s deleted", record.record_id)
        return mutation_result(None, self._keys(record.user_id, record.work_date, record.record_id))

    # Queries

    def get_today(self, user_id: int, today: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_user_and_date(int(user_id), today)

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        return self._attendance.get_by_id(int(record_id))

    def list_range(self, user_id: int, start: date, end: date):
        if end < start:
            raise ValidationError("End date must be on or after start date")
        return self._attendance.list_range(int(user_id), start, end)

    def list_all(self, **filters):
        return self._attendance.list_all(**filters)

    def monthly_summary(self, user_id: int, month: int, year: int) -> AttendanceSummary:
        month, year = int(month), int(year)
        if not 1 <= month <= 12:
            raise ValidationError("Month must be between 1 and 12")
        if year < 1900:
            raise ValidationError("Year is invalid")
        start, end = month_bounds(month, year)
        user = self._require_user(user_id)
        expected = working_days_in_month(user.working_days, month, year)

        records = list(self._attendance.list_range(user.user_id, start, end))
        if not records:
            return AttendanceSummary(working_days=expected)

        total = sum(r.total_hours or 0 for r in records)
        valid = sum(1 for r in records if r.is_valid_day)
        return AttendanceSummary(
            records=tuple(records),
            total_days=len(records),
            valid_days=valid,
            total_hours=round(total, 2),
            avg_hours=round(total / len(records), 2),
            working_days=expected,
            attendance_percentage=calculations.attendance_percentage(valid, expected),
        )

    def stats(self, start: date, end: date) -> AttendanceStats:
        records = list(self._attendance.list_all(start_date=start, end_date=end))
        total = sum(r.total_hours or 0 for r in records)
        return AttendanceStats(
            total_records=len(records),
            valid_records=sum(1 for r in records if r.is_valid_day),
            total_hours=round(total, 2),
            avg_hours=round(total / len(records), 2) if records else 0.0,
            unique_users=len({r.user_id for r in records}),
        )

    def to_ui(self, r: AttendanceRecord) -> dict:
        return {
            "id": r.record_id,
            "user_id": r.user_id,
            "date": r.work_date.strftime("%Y-%m-%d"),
            "check_in": r.check_in_time.isoformat() if r.check_in_time else None,
            "check_out": r.check_out_time.isoformat() if r.check_out_time else None,
            "total_hours": r.total_hours,
            "worked": calculations.format_hours(r.total_hours),
            "status": calculations.attendance_status(r).value,
            "is_valid_day": r.is_valid_day,
            "marked_by_role": r.marked_by_role.value,
            "check_in_method": r.check_in_method.value,
            "notes": r.notes,
            "check_in_wifi_verified": r.check_in_wifi_verified,
            "check_out_wifi_verified": r.check_out_wifi_verified,
        }
