from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    EMPLOYEE = "employee"
    HR = "hr"
    ADMIN = "admin"

    @property
    def is_staff_manager(self) -> bool:
        return self in (Role.HR, Role.ADMIN)


class WeekDay(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


class MarkedByRole(str, Enum):
    """Who wrote the attendance row."""

    SELF = "self"
    HR = "hr"


class CheckInMethod(str, Enum):
    SELF = "self"
    MANUAL = "manual"


class AttendanceStatus(str, Enum):
    """Derived day status, never stored."""

    PRESENT = "Present"
    INCOMPLETE = "Incomplete"
    ABSENT = "Absent"


class BreakStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class LeaveType(str, Enum):
    SICK = "sick"
    CASUAL = "casual"
    EARNED = "earned"
    UNPAID = "unpaid"
    MATERNITY = "maternity"
    PATERNITY = "paternity"


class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class SalaryStatus(str, Enum):
    """Salary record workflow. Order of declaration is the forward order."""

    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    PAID = "paid"

    @property
    def rank(self) -> int:
        return list(SalaryStatus).index(self)
