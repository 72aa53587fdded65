from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .breaks.mysql_break_repository import MySQLBreakRequestRepository
from .breaks.repository import BreakRequestRepository
from .breaks.service import BreakRequestService
from .core.constants import DEFAULT_MINIMUM_VALID_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .leaves.mysql_leave_repository import MySQLLeaveRequestRepository
from .leaves.repository import LeaveRequestRepository
from .leaves.service import LeaveService
from .organizations.mysql_organization_repository import MySQLOrganizationRepository
from .organizations.repository import OrganizationRepository
from .organizations.service import OrganizationService
from .payroll.mysql_salary_history_repository import MySQLSalaryHistoryRepository
from .payroll.mysql_salary_repository import MySQLSalaryRecordRepository
from .payroll.repository import SalaryHistoryRepository, SalaryRecordRepository
from .payroll.service import EarningsService, SalaryHistoryService, SalaryService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService
from .wifi.mysql_wifi_repository import MySQLWiFiNetworkRepository
from .wifi.repository import WiFiNetworkRepository
from .wifi.service import WiFiVerificationService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    organizations_repo: OrganizationRepository
    attendance_repo: AttendanceRepository
    breaks_repo: BreakRequestRepository
    leaves_repo: LeaveRequestRepository
    salaries_repo: SalaryRecordRepository
    salary_history_repo: SalaryHistoryRepository
    wifi_repo: WiFiNetworkRepository

    auth_service: AuthService
    user_service: UserService
    organization_service: OrganizationService
    attendance_service: AttendanceService
    break_service: BreakRequestService
    leave_service: LeaveService
    salary_service: SalaryService
    salary_history_service: SalaryHistoryService
    earnings_service: EarningsService
    wifi_service: WiFiVerificationService


def build_services(
    *,
    users_repo: UserRepository,
    organizations_repo: OrganizationRepository,
    attendance_repo: AttendanceRepository,
    breaks_repo: BreakRequestRepository,
    leaves_repo: LeaveRequestRepository,
    salaries_repo: SalaryRecordRepository,
    salary_history_repo: SalaryHistoryRepository,
    wifi_repo: WiFiNetworkRepository,
    conn: Optional[DatabaseConnection] = None,
    minimum_hours: float = DEFAULT_MINIMUM_VALID_HOURS,
) -> Container:
    """Wire services over any set of repositories (MySQL in the app, in-memory in tests)."""
    return Container(
        conn=conn,
        users_repo=users_repo,
        organizations_repo=organizations_repo,
        attendance_repo=attendance_repo,
        breaks_repo=breaks_repo,
        leaves_repo=leaves_repo,
        salaries_repo=salaries_repo,
        salary_history_repo=salary_history_repo,
        wifi_repo=wifi_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        organization_service=OrganizationService(organizations_repo, users_repo, attendance_repo, leaves_repo),
        attendance_service=AttendanceService(attendance_repo, users_repo, minimum_hours=minimum_hours),
        break_service=BreakRequestService(breaks_repo, attendance_repo),
        leave_service=LeaveService(leaves_repo),
        salary_service=SalaryService(salaries_repo),
        salary_history_service=SalaryHistoryService(salary_history_repo, users_repo),
        earnings_service=EarningsService(attendance_repo, users_repo),
        wifi_service=WiFiVerificationService(wifi_repo, users_repo),
    )


def build_container(*, db_config: dict, minimum_hours: float = DEFAULT_MINIMUM_VALID_HOURS) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        organizations_repo=MySQLOrganizationRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        breaks_repo=MySQLBreakRequestRepository(conn),
        leaves_repo=MySQLLeaveRequestRepository(conn),
        salaries_repo=MySQLSalaryRecordRepository(conn),
        salary_history_repo=MySQLSalaryHistoryRepository(conn),
        wifi_repo=MySQLWiFiNetworkRepository(conn),
        minimum_hours=minimum_hours,
    )
