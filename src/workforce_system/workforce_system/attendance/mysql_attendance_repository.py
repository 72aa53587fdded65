from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import CheckInMethod, MarkedByRole
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_float
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    record_id, user_id, work_date, check_in_time, check_out_time,
    marked_by, marked_by_role, check_in_method, notes, total_hours, is_valid_day,
    check_in_wifi_ssid, check_in_wifi_verified, check_out_wifi_ssid, check_out_wifi_verified
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        marked_by=r.get("marked_by"),
        marked_by_role=MarkedByRole(r["marked_by_role"]),
        check_in_method=CheckInMethod(r["check_in_method"]),
        notes=r.get("notes"),
        total_hours=to_float(r.get("total_hours")),
        is_valid_day=bool(r.get("is_valid_day")),
        check_in_wifi_ssid=r.get("check_in_wifi_ssid"),
        check_in_wifi_verified=bool(r.get("check_in_wifi_verified")),
        check_out_wifi_ssid=r.get("check_out_wifi_ssid"),
        check_out_wifi_verified=bool(r.get("check_out_wifi_verified")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE record_id=%s", (int(record_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND work_date=%s
                LIMIT 1
                """,
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_range(self, user_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date DESC
                """,
                (int(user_id), start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_all(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        user_id: Optional[int] = None,
        work_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["1=1"]
        params: list[object] = []

        if start_date is not None:
            clauses.append("work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date <= %s")
            params.append(end_date)
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))
        if work_date is not None:
            clauses.append("work_date=%s")
            params.append(work_date)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE {where} ORDER BY work_date DESC, check_in_time ASC",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: Optional[datetime],
        check_out_time: Optional[datetime],
        marked_by: int,
        marked_by_role: MarkedByRole,
        check_in_method: CheckInMethod,
        notes: Optional[str] = None,
        total_hours: Optional[float] = None,
        is_valid_day: bool = False,
        check_in_wifi_ssid: Optional[str] = None,
        check_in_wifi_verified: bool = False,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(
                    user_id, work_date, check_in_time, check_out_time, marked_by, marked_by_role,
                    check_in_method, notes, total_hours, is_valid_day, check_in_wifi_ssid, check_in_wifi_verified
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    work_date,
                    check_in_time,
                    check_out_time,
                    int(marked_by),
                    marked_by_role.value,
                    check_in_method.value,
                    notes,
                    total_hours,
                    int(is_valid_day),
                    check_in_wifi_ssid,
                    int(check_in_wifi_verified),
                ),
            )
            return int(cur.lastrowid)

    def update_times(
        self,
        *,
        record_id: int,
        check_in_time: Optional[datetime],
        check_out_time: Optional[datetime],
        notes: Optional[str],
        total_hours: Optional[float],
        is_valid_day: bool,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, check_out_time=%s, notes=%s, total_hours=%s, is_valid_day=%s
                WHERE record_id=%s
                """,
                (check_in_time, check_out_time, notes, total_hours, int(is_valid_day), int(record_id)),
            )
            return cur.rowcount > 0

    def update_check_out(
        self,
        *,
        record_id: int,
        check_out_time: datetime,
        notes: Optional[str],
        total_hours: float,
        is_valid_day: bool,
        check_out_wifi_ssid: Optional[str] = None,
        check_out_wifi_verified: bool = False,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, notes=%s, total_hours=%s, is_valid_day=%s,
                    check_out_wifi_ssid=%s, check_out_wifi_verified=%s
                WHERE record_id=%s
                """,
                (
                    check_out_time,
                    notes,
                    total_hours,
                    int(is_valid_day),
                    check_out_wifi_ssid,
                    int(check_out_wifi_verified),
                    int(record_id),
                ),
            )
            return cur.rowcount > 0

    def delete(self, record_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE record_id=%s", (int(record_id),))
            return cur.rowcount > 0
