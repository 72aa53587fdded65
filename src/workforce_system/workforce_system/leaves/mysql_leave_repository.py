from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_date
from .model import LeaveRequest
from .repository import LeaveRequestRepository

_COLUMNS = """
    lr.request_id, lr.user_id, lr.leave_type, lr.start_date, lr.end_date, lr.reason, lr.status,
    lr.reviewed_by, lr.reviewed_at, lr.review_notes, lr.created_at
"""


def _to_leave(row: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(row["request_id"]),
        user_id=int(row["user_id"]),
        leave_type=LeaveType(row["leave_type"]),
        start_date=to_date(row["start_date"]),
        end_date=to_date(row["end_date"]),
        reason=row["reason"],
        status=LeaveStatus(row["status"]),
        reviewed_by=row.get("reviewed_by"),
        reviewed_at=row.get("reviewed_at"),
        review_notes=row.get("review_notes"),
        created_at=row.get("created_at"),
    )


class MySQLLeaveRequestRepository(LeaveRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests lr WHERE lr.request_id=%s", (int(request_id),))
            row = fetchone(cur)
            return _to_leave(row) if row else None

    def create(self, *, user_id: int, leave_type: LeaveType, start_date: date, end_date: date, reason: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(user_id, leave_type, start_date, end_date, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), leave_type.value, start_date, end_date, reason, LeaveStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def update_pending(
        self,
        *,
        request_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET leave_type=%s, start_date=%s, end_date=%s, reason=%s
                WHERE request_id=%s AND status=%s
                """,
                (leave_type.value, start_date, end_date, reason, int(request_id), LeaveStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def set_status(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        reviewed_by: Optional[int] = None,
        reviewed_at: Optional[datetime] = None,
        review_notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, reviewed_by=%s, reviewed_at=%s, review_notes=%s
                WHERE request_id=%s
                """,
                (status.value, reviewed_by, reviewed_at, review_notes, int(request_id)),
            )
            return cur.rowcount > 0

    def delete(self, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leave_requests WHERE request_id=%s", (int(request_id),))
            return cur.rowcount > 0

    def list_for_user(self, user_id: int) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_requests lr WHERE lr.user_id=%s ORDER BY lr.created_at DESC, lr.request_id DESC",
                (int(user_id),),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_by_status(self, status: LeaveStatus, *, organization_id: Optional[int] = None) -> Sequence[LeaveRequest]:
        sql = f"SELECT {_COLUMNS} FROM leave_requests lr"
        params: list = []
        if organization_id is not None:
            sql += " JOIN users u ON u.user_id = lr.user_id WHERE lr.status=%s AND u.organization_id=%s"
            params.extend([status.value, int(organization_id)])
        else:
            sql += " WHERE lr.status=%s"
            params.append(status.value)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY lr.created_at DESC, lr.request_id DESC", tuple(params))
            return [_to_leave(r) for r in fetchall(cur)]
