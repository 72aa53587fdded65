from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import Role, WeekDay
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, never on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        email: str,
        full_name: str,
        password_hash: str,
        role: Role,
        organization_id: Optional[int],
        employee_code: Optional[str],
        working_days: Sequence[WeekDay],
        daily_working_hours: float,
        base_salary: Decimal,
        wifi_verification_required: bool,
        phone: Optional[str] = None,
        department: Optional[str] = None,
        designation: Optional[str] = None,
        date_of_joining: Optional[date] = None,
    ) -> int:
        raise NotImplementedError

    def update_profile(self, user_id: int, **fields) -> bool:
        """Update the given columns only (full_name, phone, department, ...)."""

        raise NotImplementedError

    def update_password_hash(self, user_id: int, password_hash: str) -> bool:
        raise NotImplementedError

    def update_salary_terms(
        self,
        user_id: int,
        *,
        base_salary: Decimal,
        working_days: Sequence[WeekDay],
        daily_working_hours: float,
    ) -> bool:
        raise NotImplementedError

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def set_wifi_verification_required(self, user_id: int, *, required: bool) -> bool:
        raise NotImplementedError

    def delete_cascade(self, user_id: int) -> bool:
        """Delete the user with every row that references it, atomically."""

        raise NotImplementedError

    def list_for_organization(self, organization_id: int, *, active_only: bool = False) -> Sequence[User]:
        raise NotImplementedError
