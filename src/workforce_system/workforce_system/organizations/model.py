from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Organization:
    organization_id: int
    name: str
    description: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class OrganizationStats:
    total_employees: int = 0
    active_employees: int = 0
    hr_count: int = 0
    employee_count: int = 0
    present_today: int = 0
    absent_today: int = 0
    pending_leave_requests: int = 0
