from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import WeekDay
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_weekdays, fetchall, fetchone, load_weekdays, to_date, to_decimal, to_float
from .model import SalaryHistory
from .repository import SalaryHistoryRepository

_COLUMNS = """
    history_id, user_id, previous_base_salary, new_base_salary,
    previous_working_days, new_working_days, previous_daily_hours, new_daily_hours,
    effective_from, changed_by, change_reason, notes, is_applied, applied_at, created_at
"""

_ORDER = " ORDER BY effective_from DESC, created_at DESC, history_id DESC"


def _to_history(row: dict) -> SalaryHistory:
    previous_base = row.get("previous_base_salary")
    return SalaryHistory(
        history_id=int(row["history_id"]),
        user_id=int(row["user_id"]),
        new_base_salary=to_decimal(row["new_base_salary"]),
        new_working_days=load_weekdays(row.get("new_working_days")),
        new_daily_hours=float(row["new_daily_hours"]),
        effective_from=to_date(row["effective_from"]),
        changed_by=int(row["changed_by"]),
        previous_base_salary=to_decimal(previous_base) if previous_base is not None else None,
        previous_working_days=load_weekdays(row.get("previous_working_days")),
        previous_daily_hours=to_float(row.get("previous_daily_hours")),
        change_reason=row.get("change_reason"),
        notes=row.get("notes"),
        is_applied=bool(row.get("is_applied")),
        applied_at=row.get("applied_at"),
        created_at=row.get("created_at"),
    )


class MySQLSalaryHistoryRepository(SalaryHistoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, history_id: int) -> Optional[SalaryHistory]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM salary_history WHERE history_id=%s", (int(history_id),))
            row = fetchone(cur)
            return _to_history(row) if row else None

    def create(
        self,
        *,
        user_id: int,
        previous_base_salary: Optional[Decimal],
        new_base_salary: Decimal,
        previous_working_days: Sequence[WeekDay],
        new_working_days: Sequence[WeekDay],
        previous_daily_hours: Optional[float],
        new_daily_hours: float,
        effective_from: date,
        changed_by: int,
        change_reason: Optional[str],
        notes: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO salary_history(
                    user_id, previous_base_salary, new_base_salary, previous_working_days, new_working_days,
                    previous_daily_hours, new_daily_hours, effective_from, changed_by, change_reason, notes, is_applied
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,0)
                """,
                (
                    int(user_id),
                    previous_base_salary,
                    new_base_salary,
                    dump_weekdays(previous_working_days),
                    dump_weekdays(new_working_days),
                    previous_daily_hours,
                    new_daily_hours,
                    effective_from,
                    int(changed_by),
                    change_reason,
                    notes,
                ),
            )
            return int(cur.lastrowid)

    def mark_applied(self, history_id: int, *, applied_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE salary_history SET is_applied=1, applied_at=%s WHERE history_id=%s AND is_applied=0",
                (applied_at, int(history_id)),
            )
            return cur.rowcount > 0

    def update_notes(self, history_id: int, notes: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE salary_history SET notes=%s WHERE history_id=%s", (notes, int(history_id)))
            return cur.rowcount > 0

    def delete(self, history_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM salary_history WHERE history_id=%s AND is_applied=0", (int(history_id),))
            return cur.rowcount > 0

    def list_for_user(self, user_id: int) -> Sequence[SalaryHistory]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM salary_history WHERE user_id=%s" + _ORDER, (int(user_id),))
            return [_to_history(r) for r in fetchall(cur)]

    def list_all(
        self,
        *,
        user_id: Optional[int] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> Sequence[SalaryHistory]:
        where = []
        params: list = []
        if user_id is not None:
            where.append("user_id=%s")
            params.append(int(user_id))
        if from_date:
            where.append("effective_from >= %s")
            params.append(from_date)
        if to_date:
            where.append("effective_from <= %s")
            params.append(to_date)

        sql = f"SELECT {_COLUMNS} FROM salary_history"
        if where:
            sql += " WHERE " + " AND ".join(where)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + _ORDER, tuple(params))
            return [_to_history(r) for r in fetchall(cur)]

    def list_due_unapplied(self, today: date) -> Sequence[SalaryHistory]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM salary_history
                WHERE is_applied=0 AND effective_from <= %s
                ORDER BY effective_from, created_at, history_id
                """,
                (today,),
            )
            return [_to_history(r) for r in fetchall(cur)]
