from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.query_keys import MutationResult, OrganizationKeys, mutation_result
from ..common.validators import clean_optional, require_non_empty
from ..core.enums import LeaveStatus, Role
from ..core.exceptions import NotFoundError
from ..leaves.repository import LeaveRequestRepository
from ..users.repository import UserRepository
from .model import Organization, OrganizationStats
from .repository import OrganizationRepository

logger = logging.getLogger(__name__)


class OrganizationService:
    def __init__(
        self,
        organizations: OrganizationRepository,
        users: UserRepository,
        attendance: AttendanceRepository,
        leaves: LeaveRequestRepository,
    ):
        self._organizations = organizations
        self._users = users
        self._attendance = attendance
        self._leaves = leaves

    def get(self, organization_id: int) -> Organization:
        org = self._organizations.get_by_id(int(organization_id))
        if not org:
            raise NotFoundError("Organization not found")
        return org

    def create(self, *, name: str, description: Optional[str] = None) -> MutationResult[Organization]:
        organization_id = self._organizations.create(
            name=require_non_empty(name, "Organization name"),
            description=clean_optional(description),
        )
        logger.info("Created organization %s", organization_id)
        return mutation_result(self.get(organization_id), [OrganizationKeys.all])

    def update(self, organization_id: int, **fields) -> MutationResult[Organization]:
        org = self.get(organization_id)
        if "name" in fields:
            fields["name"] = require_non_empty(fields["name"], "Organization name")
        if "description" in fields:
            fields["description"] = clean_optional(fields["description"])

        self._organizations.update(org.organization_id, **fields)
        logger.info("Updated organization %s", org.organization_id)
        return mutation_result(
            self.get(org.organization_id),
            [OrganizationKeys.all, OrganizationKeys.detail(org.organization_id)],
        )

    def stats(self, organization_id: int, *, today: Optional[date] = None) -> OrganizationStats:
        today = today or date.today()
        org = self.get(organization_id)

        members = list(self._users.list_for_organization(org.organization_id))
        member_ids = {u.user_id for u in members}
        active = sum(1 for u in members if u.is_active)
        present = len({r.user_id for r in self._attendance.list_all(work_date=today) if r.user_id in member_ids})
        pending = self._leaves.list_by_status(LeaveStatus.PENDING, organization_id=org.organization_id)

        return OrganizationStats(
            total_employees=len(members),
            active_employees=active,
            hr_count=sum(1 for u in members if u.role.is_staff_manager),
            employee_count=sum(1 for u in members if u.role == Role.EMPLOYEE),
            present_today=present,
            absent_today=max(active - present, 0),
            pending_leave_requests=len(pending),
        )
