from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.workforce_system.workforce_system.attendance.model import AttendanceRecord
from src.workforce_system.workforce_system.breaks.model import BreakRequest
from src.workforce_system.workforce_system.container import build_services
from src.workforce_system.workforce_system.core.enums import (
    BreakStatus,
    CheckInMethod,
    LeaveStatus,
    MarkedByRole,
    Role,
    SalaryStatus,
)
from src.workforce_system.workforce_system.leaves.model import LeaveRequest
from src.workforce_system.workforce_system.organizations.model import Organization
from src.workforce_system.workforce_system.payroll.model import SalaryHistory, SalaryRecord
from src.workforce_system.workforce_system.users.model import User
from src.workforce_system.workforce_system.wifi.model import OfficeWiFiNetwork

# cheap hash so the suite does not spend its time in scrypt
TEST_PASSWORD = "secret123"
TEST_PASSWORD_HASH = generate_password_hash(TEST_PASSWORD, method="pbkdf2:sha256:1000")


class _Rows:
    def __init__(self):
        self.rows: dict = {}
        self._next_id = 1

    def _new_id(self) -> int:
        new_id = self._next_id
        self._next_id += 1
        return new_id

    def _replace(self, row_id: int, **fields) -> bool:
        row = self.rows.get(int(row_id))
        if row is None:
            return False
        self.rows[int(row_id)] = replace(row, **fields)
        return True


class InMemoryUsers(_Rows):
    def __init__(self):
        super().__init__()
        self.deleted: list[int] = []

    def add(self, **fields) -> User:
        user_id = self._new_id()
        fields.setdefault("email", f"user{user_id}@example.com")
        fields.setdefault("full_name", f"User {user_id}")
        fields.setdefault("password_hash", TEST_PASSWORD_HASH)
        fields.setdefault("role", Role.EMPLOYEE)
        fields.setdefault("organization_id", 1)
        if "working_days" in fields:
            fields["working_days"] = tuple(fields["working_days"])
        user = User(user_id=user_id, **fields)
        self.rows[user_id] = user
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.rows.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.rows.values() if u.email == email), None)

    def create_user(self, **fields) -> int:
        user_id = self._new_id()
        fields["working_days"] = tuple(fields["working_days"])
        self.rows[user_id] = User(user_id=user_id, **fields)
        return user_id

    def update_profile(self, user_id: int, **fields) -> bool:
        return self._replace(user_id, **fields)

    def update_password_hash(self, user_id: int, password_hash: str) -> bool:
        return self._replace(user_id, password_hash=password_hash)

    def update_salary_terms(self, user_id: int, *, base_salary, working_days, daily_working_hours) -> bool:
        return self._replace(
            user_id,
            base_salary=base_salary,
            working_days=tuple(working_days),
            daily_working_hours=daily_working_hours,
        )

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        return self._replace(user_id, is_active=is_active)

    def set_wifi_verification_required(self, user_id: int, *, required: bool) -> bool:
        return self._replace(user_id, wifi_verification_required=required)

    def delete_cascade(self, user_id: int) -> bool:
        if self.rows.pop(int(user_id), None) is None:
            return False
        self.deleted.append(int(user_id))
        return True

    def list_for_organization(self, organization_id: int, *, active_only: bool = False):
        return [
            u
            for u in self.rows.values()
            if u.organization_id == organization_id and (u.is_active or not active_only)
        ]


class InMemoryOrganizations(_Rows):
    def add(self, name: str = "Acme", **fields) -> Organization:
        org_id = self._new_id()
        org = Organization(organization_id=org_id, name=name, **fields)
        self.rows[org_id] = org
        return org

    def get_by_id(self, organization_id: int) -> Optional[Organization]:
        return self.rows.get(int(organization_id))

    def create(self, *, name: str, description: Optional[str]) -> int:
        return self.add(name, description=description).organization_id

    def update(self, organization_id: int, **fields) -> bool:
        return self._replace(organization_id, **fields)


class InMemoryAttendance(_Rows):
    def add(self, *, user_id: int, work_date: date, check_in_time=None, check_out_time=None, **fields) -> AttendanceRecord:
        record_id = self.create(
            user_id=user_id,
            work_date=work_date,
            check_in_time=check_in_time,
            check_out_time=check_out_time,
            marked_by=user_id,
            marked_by_role=MarkedByRole.SELF,
            check_in_method=CheckInMethod.SELF,
            **fields,
        )
        return self.rows[record_id]

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        return self.rows.get(int(record_id))

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return next((r for r in self.rows.values() if r.user_id == user_id and r.work_date == work_date), None)

    def list_range(self, user_id: int, start_date: date, end_date: date):
        rows = [r for r in self.rows.values() if r.user_id == user_id and start_date <= r.work_date <= end_date]
        return sorted(rows, key=lambda r: r.work_date, reverse=True)

    def list_all(self, *, start_date=None, end_date=None, user_id=None, work_date=None):
        rows = list(self.rows.values())
        if start_date is not None:
            rows = [r for r in rows if r.work_date >= start_date]
        if end_date is not None:
            rows = [r for r in rows if r.work_date <= end_date]
        if user_id is not None:
            rows = [r for r in rows if r.user_id == user_id]
        if work_date is not None:
            rows = [r for r in rows if r.work_date == work_date]
        return sorted(rows, key=lambda r: r.work_date, reverse=True)

    def create(self, **fields) -> int:
        if self.get_for_user_and_date(fields["user_id"], fields["work_date"]):
            # UNIQUE(user_id, work_date)
            raise RuntimeError("Duplicate entry for user and date")
        record_id = self._new_id()
        self.rows[record_id] = AttendanceRecord(record_id=record_id, **fields)
        return record_id

    def update_times(self, *, record_id: int, **fields) -> bool:
        return self._replace(record_id, **fields)

    def update_check_out(self, *, record_id: int, **fields) -> bool:
        return self._replace(record_id, **fields)

    def delete(self, record_id: int) -> bool:
        return self.rows.pop(int(record_id), None) is not None


class InMemoryBreaks(_Rows):
    def get_by_id(self, request_id: int) -> Optional[BreakRequest]:
        return self.rows.get(int(request_id))

    def create(self, **fields) -> int:
        request_id = self._new_id()
        fields.setdefault("status", BreakStatus.PENDING)
        self.rows[request_id] = BreakRequest(request_id=request_id, **fields)
        return request_id

    def set_review(self, *, request_id: int, notes=None, **fields) -> bool:
        row = self.rows.get(int(request_id))
        if row is None:
            return False
        fields.setdefault("approved_start_time", None)
        fields.setdefault("approved_end_time", None)
        fields.setdefault("duration_minutes", None)
        self.rows[int(request_id)] = replace(row, notes=notes if notes is not None else row.notes, **fields)
        return True

    def delete_pending(self, request_id: int) -> bool:
        row = self.rows.get(int(request_id))
        if row is None or row.status != BreakStatus.PENDING:
            return False
        del self.rows[int(request_id)]
        return True

    def list_for_user(self, user_id: int, *, status=None):
        rows = [r for r in self.rows.values() if r.user_id == user_id and (status is None or r.status == status)]
        return sorted(rows, key=lambda r: r.request_id, reverse=True)

    def list_for_attendance(self, attendance_record_id: int):
        return [r for r in self.rows.values() if r.attendance_record_id == attendance_record_id]

    def list_by_status(self, status):
        return [r for r in self.rows.values() if r.status == status]

    def has_pending(self, user_id: int, attendance_record_id: int) -> bool:
        return any(
            r.user_id == user_id and r.attendance_record_id == attendance_record_id and r.status == BreakStatus.PENDING
            for r in self.rows.values()
        )


class InMemoryLeaves(_Rows):
    def __init__(self, users: Optional[InMemoryUsers] = None):
        super().__init__()
        self._users = users

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        return self.rows.get(int(request_id))

    def create(self, **fields) -> int:
        request_id = self._new_id()
        self.rows[request_id] = LeaveRequest(request_id=request_id, **fields)
        return request_id

    def update_pending(self, *, request_id: int, **fields) -> bool:
        row = self.rows.get(int(request_id))
        if row is None or row.status != LeaveStatus.PENDING:
            return False
        return self._replace(request_id, **fields)

    def set_status(self, *, request_id: int, status, reviewed_by=None, reviewed_at=None, review_notes=None) -> bool:
        return self._replace(
            request_id,
            status=status,
            reviewed_by=reviewed_by,
            reviewed_at=reviewed_at,
            review_notes=review_notes,
        )

    def delete(self, request_id: int) -> bool:
        return self.rows.pop(int(request_id), None) is not None

    def list_for_user(self, user_id: int):
        rows = [r for r in self.rows.values() if r.user_id == user_id]
        return sorted(rows, key=lambda r: r.request_id, reverse=True)

    def list_by_status(self, status, *, organization_id=None):
        rows = [r for r in self.rows.values() if r.status == status]
        if organization_id is not None and self._users is not None:
            members = {u.user_id for u in self._users.list_for_organization(organization_id)}
            rows = [r for r in rows if r.user_id in members]
        return sorted(rows, key=lambda r: r.request_id, reverse=True)


class InMemorySalaries(_Rows):
    def get_by_id(self, record_id: int) -> Optional[SalaryRecord]:
        return self.rows.get(int(record_id))

    def get_for_month(self, user_id: int, month: int, year: int) -> Optional[SalaryRecord]:
        return next(
            (r for r in self.rows.values() if (r.user_id, r.month, r.year) == (user_id, month, year)),
            None,
        )

    def create(self, **fields) -> int:
        record_id = self._new_id()
        self.rows[record_id] = SalaryRecord(record_id=record_id, status=SalaryStatus.DRAFT, **fields)
        return record_id

    def update_amounts(self, record_id: int, **fields) -> bool:
        return self._replace(record_id, **fields)

    def set_status(self, *, record_id: int, status, approved_by, payment_date, payment_method=None) -> bool:
        row = self.rows.get(int(record_id))
        if row is None:
            return False
        return self._replace(
            record_id,
            status=status,
            approved_by=approved_by,
            payment_date=payment_date,
            payment_method=payment_method if payment_method is not None else row.payment_method,
        )

    def delete(self, record_id: int) -> bool:
        return self.rows.pop(int(record_id), None) is not None

    def list_for_user(self, user_id: int):
        rows = [r for r in self.rows.values() if r.user_id == user_id]
        return sorted(rows, key=lambda r: (r.year, r.month), reverse=True)

    def list_for_month(self, month: int, year: int):
        return [r for r in self.rows.values() if (r.month, r.year) == (month, year)]


class InMemorySalaryHistory(_Rows):
    def get_by_id(self, history_id: int) -> Optional[SalaryHistory]:
        return self.rows.get(int(history_id))

    def create(self, **fields) -> int:
        history_id = self._new_id()
        fields["new_working_days"] = tuple(fields["new_working_days"])
        fields["previous_working_days"] = tuple(fields["previous_working_days"])
        self.rows[history_id] = SalaryHistory(history_id=history_id, **fields)
        return history_id

    def mark_applied(self, history_id: int, *, applied_at: datetime) -> bool:
        return self._replace(history_id, is_applied=True, applied_at=applied_at)

    def update_notes(self, history_id: int, notes) -> bool:
        return self._replace(history_id, notes=notes)

    def delete(self, history_id: int) -> bool:
        row = self.rows.get(int(history_id))
        if row is None or row.is_applied:
            return False
        del self.rows[int(history_id)]
        return True

    @staticmethod
    def _newest_first(rows):
        return sorted(rows, key=lambda r: (r.effective_from, r.history_id), reverse=True)

    def list_for_user(self, user_id: int):
        return self._newest_first(r for r in self.rows.values() if r.user_id == user_id)

    def list_all(self, *, user_id=None, from_date=None, to_date=None):
        rows = list(self.rows.values())
        if user_id is not None:
            rows = [r for r in rows if r.user_id == user_id]
        if from_date is not None:
            rows = [r for r in rows if r.effective_from >= from_date]
        if to_date is not None:
            rows = [r for r in rows if r.effective_from <= to_date]
        return self._newest_first(rows)

    def list_due_unapplied(self, today: date):
        rows = [r for r in self.rows.values() if not r.is_applied and r.effective_from <= today]
        return sorted(rows, key=lambda r: (r.effective_from, r.history_id))


class InMemoryWiFiNetworks(_Rows):
    def add(self, organization_id: int, ssid: str, *, is_active: bool = True) -> OfficeWiFiNetwork:
        network_id = self.create(organization_id=organization_id, ssid=ssid, description=None, created_by=1)
        self._replace(network_id, is_active=is_active)
        return self.rows[network_id]

    def get_by_id(self, network_id: int) -> Optional[OfficeWiFiNetwork]:
        return self.rows.get(int(network_id))

    def get_by_ssid(self, organization_id: int, ssid: str) -> Optional[OfficeWiFiNetwork]:
        return next(
            (n for n in self.rows.values() if n.organization_id == organization_id and n.ssid == ssid),
            None,
        )

    def list_for_organization(self, organization_id: int, *, active_only: bool = False):
        return [
            n
            for n in self.rows.values()
            if n.organization_id == organization_id and (n.is_active or not active_only)
        ]

    def create(self, *, organization_id: int, ssid: str, description, created_by: int) -> int:
        network_id = self._new_id()
        self.rows[network_id] = OfficeWiFiNetwork(
            network_id=network_id,
            organization_id=organization_id,
            ssid=ssid,
            created_by=created_by,
            description=description,
        )
        return network_id

    def update(self, network_id: int, **fields) -> bool:
        return self._replace(network_id, **fields)

    def delete(self, network_id: int) -> bool:
        return self.rows.pop(int(network_id), None) is not None


@pytest.fixture
def users() -> InMemoryUsers:
    return InMemoryUsers()


@pytest.fixture
def organizations() -> InMemoryOrganizations:
    return InMemoryOrganizations()


@pytest.fixture
def attendance() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def breaks() -> InMemoryBreaks:
    return InMemoryBreaks()


@pytest.fixture
def leaves(users) -> InMemoryLeaves:
    return InMemoryLeaves(users)


@pytest.fixture
def salaries() -> InMemorySalaries:
    return InMemorySalaries()


@pytest.fixture
def salary_history() -> InMemorySalaryHistory:
    return InMemorySalaryHistory()


@pytest.fixture
def wifi_networks() -> InMemoryWiFiNetworks:
    return InMemoryWiFiNetworks()


@pytest.fixture
def container(users, organizations, attendance, breaks, leaves, salaries, salary_history, wifi_networks):
    return build_services(
        users_repo=users,
        organizations_repo=organizations,
        attendance_repo=attendance,
        breaks_repo=breaks,
        leaves_repo=leaves,
        salaries_repo=salaries,
        salary_history_repo=salary_history,
        wifi_repo=wifi_networks,
    )


@pytest.fixture
def fixed_now() -> datetime:
    # a Thursday
    return datetime(2024, 2, 1, 18, 0)
