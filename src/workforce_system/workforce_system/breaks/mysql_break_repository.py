from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import BreakStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_date
from .model import BreakRequest
from .repository import BreakRequestRepository

_COLUMNS = """
    request_id, user_id, attendance_record_id, request_date,
    requested_start_time, requested_end_time, approved_start_time, approved_end_time,
    duration_minutes, status, reason, notes, requested_by,
    reviewed_by, reviewed_at, reviewer_notes, created_at
"""


def _to_break(row: dict) -> BreakRequest:
    return BreakRequest(
        request_id=int(row["request_id"]),
        user_id=int(row["user_id"]),
        attendance_record_id=int(row["attendance_record_id"]),
        request_date=to_date(row["request_date"]),
        requested_start_time=row.get("requested_start_time"),
        requested_end_time=row.get("requested_end_time"),
        status=BreakStatus(row["status"]),
        requested_by=int(row["requested_by"]),
        approved_start_time=row.get("approved_start_time"),
        approved_end_time=row.get("approved_end_time"),
        duration_minutes=row.get("duration_minutes"),
        reason=row.get("reason"),
        notes=row.get("notes"),
        reviewed_by=row.get("reviewed_by"),
        reviewed_at=row.get("reviewed_at"),
        reviewer_notes=row.get("reviewer_notes"),
        created_at=row.get("created_at"),
    )


class MySQLBreakRequestRepository(BreakRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, request_id: int) -> Optional[BreakRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM break_requests WHERE request_id=%s", (int(request_id),))
            row = fetchone(cur)
            return _to_break(row) if row else None

    def create(
        self,
        *,
        user_id: int,
        attendance_record_id: int,
        request_date: date,
        requested_start_time: Optional[datetime],
        requested_end_time: Optional[datetime],
        reason: Optional[str],
        requested_by: int,
        status: BreakStatus = BreakStatus.PENDING,
        approved_start_time: Optional[datetime] = None,
        approved_end_time: Optional[datetime] = None,
        duration_minutes: Optional[int] = None,
        notes: Optional[str] = None,
        reviewed_by: Optional[int] = None,
        reviewed_at: Optional[datetime] = None,
        reviewer_notes: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO break_requests(
                    user_id, attendance_record_id, request_date, requested_start_time, requested_end_time,
                    approved_start_time, approved_end_time, duration_minutes, status, reason, notes,
                    requested_by, reviewed_by, reviewed_at, reviewer_notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    int(attendance_record_id),
                    request_date,
                    requested_start_time,
                    requested_end_time,
                    approved_start_time,
                    approved_end_time,
                    duration_minutes,
                    status.value,
                    reason,
                    notes,
                    int(requested_by),
                    reviewed_by,
                    reviewed_at,
                    reviewer_notes,
                ),
            )
            return int(cur.lastrowid)

    def set_review(
        self,
        *,
        request_id: int,
        status: BreakStatus,
        reviewed_by: Optional[int],
        reviewed_at: Optional[datetime],
        reviewer_notes: Optional[str],
        approved_start_time: Optional[datetime] = None,
        approved_end_time: Optional[datetime] = None,
        duration_minutes: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE break_requests
                SET status=%s, reviewed_by=%s, reviewed_at=%s, reviewer_notes=%s,
                    approved_start_time=%s, approved_end_time=%s, duration_minutes=%s,
                    notes=COALESCE(%s, notes)
                WHERE request_id=%s
                """,
                (
                    status.value,
                    reviewed_by,
                    reviewed_at,
                    reviewer_notes,
                    approved_start_time,
                    approved_end_time,
                    duration_minutes,
                    notes,
                    int(request_id),
                ),
            )
            return cur.rowcount > 0

    def delete_pending(self, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM break_requests WHERE request_id=%s AND status=%s",
                (int(request_id), BreakStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def list_for_user(self, user_id: int, *, status: Optional[BreakStatus] = None) -> Sequence[BreakRequest]:
        sql = f"SELECT {_COLUMNS} FROM break_requests WHERE user_id=%s"
        params: list = [int(user_id)]
        if status is not None:
            sql += " AND status=%s"
            params.append(status.value)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY created_at DESC, request_id DESC", tuple(params))
            return [_to_break(r) for r in fetchall(cur)]

    def list_for_attendance(self, attendance_record_id: int) -> Sequence[BreakRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM break_requests
                WHERE attendance_record_id=%s
                ORDER BY requested_start_time, request_id
                """,
                (int(attendance_record_id),),
            )
            return [_to_break(r) for r in fetchall(cur)]

    def list_by_status(self, status: BreakStatus) -> Sequence[BreakRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM break_requests WHERE status=%s ORDER BY created_at DESC, request_id DESC",
                (status.value,),
            )
            return [_to_break(r) for r in fetchall(cur)]

    def has_pending(self, user_id: int, attendance_record_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS found FROM break_requests
                WHERE user_id=%s AND attendance_record_id=%s AND status=%s
                LIMIT 1
                """,
                (int(user_id), int(attendance_record_id), BreakStatus.PENDING.value),
            )
            return fetchone(cur) is not None
