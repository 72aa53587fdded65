from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import Role, WeekDay
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_weekdays, fetchall, fetchone, load_weekdays, to_decimal
from .model import User
from .repository import UserRepository

_COLUMNS = """
    user_id, email, full_name, password_hash, role, organization_id, employee_code, is_active,
    working_days, daily_working_hours, base_salary, wifi_verification_required,
    phone, department, designation, date_of_joining
"""

_PROFILE_FIELDS = {"full_name", "phone", "department", "designation", "employee_code", "role", "date_of_joining"}


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        email=row["email"],
        full_name=row["full_name"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        organization_id=row.get("organization_id"),
        employee_code=row.get("employee_code"),
        is_active=bool(row.get("is_active", True)),
        working_days=load_weekdays(row.get("working_days")),
        daily_working_hours=float(row.get("daily_working_hours") or 0),
        base_salary=to_decimal(row.get("base_salary")),
        wifi_verification_required=bool(row.get("wifi_verification_required")),
        phone=row.get("phone"),
        department=row.get("department"),
        designation=row.get("designation"),
        date_of_joining=row.get("date_of_joining"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(
                    email, full_name, password_hash, role, organization_id, employee_code, is_active,
                    working_days, daily_working_hours, base_salary, wifi_verification_required,
                    phone, department, designation, date_of_joining
                )
                VALUES(%s,%s,%s,%s,%s,%s,1,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    email,
                    full_name,
                    password_hash,
                    role.value,
                    organization_id,
                    employee_code,
                    dump_weekdays(working_days),
                    daily_working_hours,
                    base_salary,
                    int(wifi_verification_required),
                    phone,
                    department,
                    designation,
                    date_of_joining,
                ),
            )
            return int(cur.lastrowid)

    def update_profile(self, user_id: int, **fields) -> bool:
        unknown = set(fields) - _PROFILE_FIELDS
        if unknown:
            raise ValueError(f"Unsupported profile fields: {sorted(unknown)}")
        if not fields:
            return False

        if "role" in fields:
            fields["role"] = Role(fields["role"]).value
        assignments = ", ".join(f"{name}=%s" for name in fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE users SET {assignments} WHERE user_id=%s",
                (*fields.values(), int(user_id)),
            )
            return cur.rowcount > 0

    def update_password_hash(self, user_id: int, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password_hash=%s WHERE user_id=%s", (password_hash, int(user_id)))
            return cur.rowcount > 0

    def update_salary_terms(
        self,
        user_id: int,
        *,
        base_salary: Decimal,
        working_days: Sequence[WeekDay],
        daily_working_hours: float,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET base_salary=%s, working_days=%s, daily_working_hours=%s
                WHERE user_id=%s
                """,
                (base_salary, dump_weekdays(working_days), daily_working_hours, int(user_id)),
            )
            return cur.rowcount > 0

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET is_active=%s WHERE user_id=%s", (int(is_active), int(user_id)))
            return cur.rowcount > 0

    def set_wifi_verification_required(self, user_id: int, *, required: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET wifi_verification_required=%s WHERE user_id=%s",
                (int(required), int(user_id)),
            )
            return cur.rowcount > 0

    def delete_cascade(self, user_id: int) -> bool:
        # Children first, all in one transaction.
        user_id = int(user_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM break_requests WHERE user_id=%s", (user_id,))
            cur.execute("DELETE FROM attendance_records WHERE user_id=%s", (user_id,))
            cur.execute("DELETE FROM leave_requests WHERE user_id=%s", (user_id,))
            cur.execute("DELETE FROM salary_records WHERE user_id=%s", (user_id,))
            cur.execute("DELETE FROM salary_history WHERE user_id=%s", (user_id,))
            cur.execute("DELETE FROM notifications WHERE user_id=%s", (user_id,))
            cur.execute("DELETE FROM users WHERE user_id=%s", (user_id,))
            return cur.rowcount > 0

    def list_for_organization(self, organization_id: int, *, active_only: bool = False) -> Sequence[User]:
        sql = f"SELECT {_COLUMNS} FROM users WHERE organization_id=%s"
        if active_only:
            sql += " AND is_active=1"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY full_name", (int(organization_id),))
            return [_to_user(r) for r in fetchall(cur)]
