from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.constants import DEFAULT_DAILY_HOURS
from ..core.enums import Role, WeekDay
from ..workdays.rules import DEFAULT_WORKING_DAYS


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object, no database access here.
    """

    user_id: int
    email: str
    full_name: str
    password_hash: str
    role: Role
    organization_id: Optional[int]
    employee_code: Optional[str] = None
    is_active: bool = True
    working_days: tuple[WeekDay, ...] = field(default_factory=lambda: tuple(DEFAULT_WORKING_DAYS))
    daily_working_hours: float = DEFAULT_DAILY_HOURS
    base_salary: Decimal = Decimal("0")
    wifi_verification_required: bool = True
    phone: Optional[str] = None
    department: Optional[str] = None
    designation: Optional[str] = None
    date_of_joining: Optional[date] = None
