from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import SalaryStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_date, to_decimal
from .model import SalaryRecord
from .repository import SalaryRecordRepository

_COLUMNS = """
    record_id, user_id, month, year, base_salary, allowances, deductions, bonus,
    working_days, present_days, leaves_taken, total_salary, status,
    created_by, approved_by, payment_date, payment_method, notes, created_at
"""

_AMOUNT_FIELDS = {
    "base_salary",
    "allowances",
    "deductions",
    "bonus",
    "working_days",
    "present_days",
    "leaves_taken",
    "total_salary",
    "notes",
}


def _to_salary(row: dict) -> SalaryRecord:
    return SalaryRecord(
        record_id=int(row["record_id"]),
        user_id=int(row["user_id"]),
        month=int(row["month"]),
        year=int(row["year"]),
        base_salary=to_decimal(row["base_salary"]),
        working_days=int(row["working_days"]),
        present_days=int(row["present_days"]),
        allowances=to_decimal(row.get("allowances")),
        deductions=to_decimal(row.get("deductions")),
        bonus=to_decimal(row.get("bonus")),
        leaves_taken=int(row.get("leaves_taken") or 0),
        total_salary=to_decimal(row.get("total_salary")),
        status=SalaryStatus(row["status"]),
        created_by=row.get("created_by"),
        approved_by=row.get("approved_by"),
        payment_date=to_date(row.get("payment_date")),
        payment_method=row.get("payment_method"),
        notes=row.get("notes"),
        created_at=row.get("created_at"),
    )


class MySQLSalaryRecordRepository(SalaryRecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: int) -> Optional[SalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM salary_records WHERE record_id=%s", (int(record_id),))
            row = fetchone(cur)
            return _to_salary(row) if row else None

    def get_for_month(self, user_id: int, month: int, year: int) -> Optional[SalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM salary_records WHERE user_id=%s AND month=%s AND year=%s",
                (int(user_id), int(month), int(year)),
            )
            row = fetchone(cur)
            return _to_salary(row) if row else None

    def create(
        self,
        *,
        user_id: int,
        month: int,
        year: int,
        base_salary: Decimal,
        allowances: Decimal,
        deductions: Decimal,
        bonus: Decimal,
        working_days: int,
        present_days: int,
        leaves_taken: int,
        total_salary: Decimal,
        created_by: int,
        notes: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO salary_records(
                    user_id, month, year, base_salary, allowances, deductions, bonus,
                    working_days, present_days, leaves_taken, total_salary, status, created_by, notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    int(month),
                    int(year),
                    base_salary,
                    allowances,
                    deductions,
                    bonus,
                    int(working_days),
                    int(present_days),
                    int(leaves_taken),
                    total_salary,
                    SalaryStatus.DRAFT.value,
                    int(created_by),
                    notes,
                ),
            )
            return int(cur.lastrowid)

    def update_amounts(self, record_id: int, **fields) -> bool:
        unknown = set(fields) - _AMOUNT_FIELDS
        if unknown:
            raise ValueError(f"Unsupported salary fields: {sorted(unknown)}")
        if not fields:
            return False

        assignments = ", ".join(f"{name}=%s" for name in fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE salary_records SET {assignments} WHERE record_id=%s",
                (*fields.values(), int(record_id)),
            )
            return cur.rowcount > 0

    def set_status(
        self,
        *,
        record_id: int,
        status: SalaryStatus,
        approved_by: Optional[int],
        payment_date: Optional[date],
        payment_method: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE salary_records
                SET status=%s, approved_by=%s, payment_date=%s, payment_method=COALESCE(%s, payment_method)
                WHERE record_id=%s
                """,
                (status.value, approved_by, payment_date, payment_method, int(record_id)),
            )
            return cur.rowcount > 0

    def delete(self, record_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM salary_records WHERE record_id=%s", (int(record_id),))
            return cur.rowcount > 0

    def list_for_user(self, user_id: int) -> Sequence[SalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM salary_records WHERE user_id=%s ORDER BY year DESC, month DESC",
                (int(user_id),),
            )
            return [_to_salary(r) for r in fetchall(cur)]

    def list_for_month(self, month: int, year: int) -> Sequence[SalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM salary_records WHERE month=%s AND year=%s ORDER BY total_salary DESC",
                (int(month), int(year)),
            )
            return [_to_salary(r) for r in fetchall(cur)]
