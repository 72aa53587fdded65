from __future__ import annotations

import logging
import secrets
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.query_keys import AttendanceKeys, BreakKeys, LeaveKeys, MutationResult, SalaryKeys, UserKeys, mutation_result
from ..common.validators import clean_optional, require_daily_hours, require_min_length, require_non_empty, require_non_negative
from ..core.constants import DEFAULT_DAILY_HOURS
from ..core.enums import Role, WeekDay
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..workdays.rules import DEFAULT_WORKING_DAYS, ordered_working_days
from .model import User
from .repository import UserRepository
from .session import AuthSession, SessionProvider

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: sign in, sign out, change password."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str, *, now: datetime | None = None) -> AuthSession:
        email = (email or "").strip().lower()
        user = self._users.get_by_email(email)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # placeholder hashes such as 'CHANGE_ME'
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        logger.info("User %s signed in", user.user_id)
        return AuthSession(
            user_id=user.user_id,
            full_name=user.full_name,
            role=user.role,
            organization_id=user.organization_id,
            access_token=secrets.token_urlsafe(32),
            issued_at=now or datetime.now(),
        )

    def sign_in(self, provider: SessionProvider, email: str, password: str, *, now: datetime | None = None) -> AuthSession:
        return provider.start(self.authenticate(email, password, now=now))

    def sign_out(self, provider: SessionProvider) -> MutationResult[None]:
        current = provider.current
        provider.teardown()
        if current:
            logger.info("User %s signed out", current.user_id)
        return mutation_result(None, [UserKeys.all, AttendanceKeys.all, BreakKeys.all, LeaveKeys.all, SalaryKeys.all])

    def change_password(self, user_id: int, *, current_password: str, new_password: str) -> None:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        try:
            ok = check_password_hash(user.password_hash, current_password or "")
        except ValueError:
            ok = False
        if not ok:
            raise AuthenticationError("Current password is incorrect")
        require_min_length(new_password, "Password", 6)

        self._users.update_password_hash(user.user_id, generate_password_hash(new_password))
        logger.info("User %s changed password", user.user_id)


class UserService:
    """Use case: manage employees (HR)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def get(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("Employee not found")
        return user

    def create_employee(
        self,
        *,
        email: str,
        full_name: str,
        password: str,
        organization_id: int,
        role: Role = Role.EMPLOYEE,
        employee_code: Optional[str] = None,
        working_days: Optional[Sequence[WeekDay | str]] = None,
        daily_working_hours: float = DEFAULT_DAILY_HOURS,
        base_salary=Decimal("0"),
        wifi_verification_required: bool = True,
        phone: Optional[str] = None,
        department: Optional[str] = None,
        designation: Optional[str] = None,
        date_of_joining: Optional[date] = None,
    ) -> MutationResult[User]:
        email = require_non_empty(email, "Email").lower()
        full_name = require_non_empty(full_name, "Full name")
        require_min_length(password, "Password", 6)
        if "@" not in email:
            raise ValidationError("Email is invalid")
        if self._users.get_by_email(email):
            raise ValidationError("Email is already registered")

        days = DEFAULT_WORKING_DAYS if working_days is None else ordered_working_days(working_days)
        daily_working_hours = require_daily_hours(daily_working_hours)

        user_id = self._users.create_user(
            email=email,
            full_name=full_name,
            password_hash=generate_password_hash(password),
            role=Role(role),
            organization_id=int(organization_id),
            employee_code=clean_optional(employee_code),
            working_days=days,
            daily_working_hours=daily_working_hours,
            base_salary=require_non_negative(base_salary, "Base salary"),
            wifi_verification_required=bool(wifi_verification_required),
            phone=clean_optional(phone),
            department=clean_optional(department),
            designation=clean_optional(designation),
            date_of_joining=date_of_joining,
        )
        logger.info("Created employee %s in organization %s", user_id, organization_id)
        return mutation_result(self.get(user_id), [UserKeys.all])

    def update_profile(self, user_id: int, **fields) -> MutationResult[User]:
        user = self.get(user_id)
        if "full_name" in fields:
            fields["full_name"] = require_non_empty(fields["full_name"], "Full name")
        for name in ("phone", "department", "designation", "employee_code"):
            if name in fields:
                fields[name] = clean_optional(fields[name])

        self._users.update_profile(user.user_id, **fields)
        logger.info("Updated profile of user %s (%s)", user.user_id, ", ".join(sorted(fields)))
        return mutation_result(self.get(user.user_id), [UserKeys.all, UserKeys.detail(user.user_id)])

    def set_active(self, user_id: int, *, is_active: bool) -> MutationResult[User]:
        user = self.get(user_id)
        self._users.set_active(user.user_id, is_active=bool(is_active))
        logger.info("User %s active=%s", user.user_id, bool(is_active))
        return mutation_result(self.get(user.user_id), [UserKeys.all, UserKeys.detail(user.user_id)])

    def delete_employee(self, *, current_role: Role, user_id: int) -> MutationResult[None]:
        if not Role(current_role).is_staff_manager:
            raise AuthorizationError("You do not have permission")

        user = self.get(user_id)
        if user.role == Role.ADMIN:
            raise ValidationError("Cannot delete an admin account")

        if not self._users.delete_cascade(user.user_id):
            raise ValidationError("Deleting employee failed")

        logger.info("Deleted employee %s with related records", user.user_id)
        return mutation_result(
            None,
            [UserKeys.all, AttendanceKeys.all, BreakKeys.all, LeaveKeys.all, SalaryKeys.all, SalaryKeys.history_all],
        )

    def list_for_organization(self, organization_id: int, *, active_only: bool = False) -> Sequence[User]:
        return self._users.list_for_organization(int(organization_id), active_only=active_only)

    def to_ui(self, u: User) -> dict:
        return {
            "id": u.user_id,
            "email": u.email,
            "full_name": u.full_name,
            "role": u.role.value,
            "employee_code": u.employee_code,
            "is_active": u.is_active,
            "working_days": [d.value for d in u.working_days],
            "daily_working_hours": u.daily_working_hours,
            "base_salary": str(u.base_salary),
            "wifi_verification_required": u.wifi_verification_required,
            "department": u.department,
            "designation": u.designation,
        }
