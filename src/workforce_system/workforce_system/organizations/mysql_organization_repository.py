from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Organization
from .repository import OrganizationRepository

_UPDATABLE = {"name", "description", "is_active"}


class MySQLOrganizationRepository(OrganizationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, organization_id: int) -> Optional[Organization]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT organization_id, name, description, is_active, created_at
                FROM organizations
                WHERE organization_id=%s
                """,
                (int(organization_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Organization(
                organization_id=int(row["organization_id"]),
                name=row["name"],
                description=row.get("description"),
                is_active=bool(row.get("is_active", True)),
                created_at=row.get("created_at"),
            )

    def create(self, *, name: str, description: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO organizations(name, description, is_active) VALUES(%s,%s,1)",
                (name, description),
            )
            return int(cur.lastrowid)

    def update(self, organization_id: int, **fields) -> bool:
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Unsupported organization fields: {sorted(unknown)}")
        if not fields:
            return False

        if "is_active" in fields:
            fields["is_active"] = int(bool(fields["is_active"]))
        assignments = ", ".join(f"{name}=%s" for name in fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE organizations SET {assignments} WHERE organization_id=%s",
                (*fields.values(), int(organization_id)),
            )
            return cur.rowcount > 0
