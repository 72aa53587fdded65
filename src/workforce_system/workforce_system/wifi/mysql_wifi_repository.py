from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import OfficeWiFiNetwork
from .repository import WiFiNetworkRepository

_COLUMNS = "network_id, organization_id, ssid, description, is_active, created_by, created_at"
_UPDATABLE = {"ssid", "description", "is_active"}


def _to_network(row: dict) -> OfficeWiFiNetwork:
    return OfficeWiFiNetwork(
        network_id=int(row["network_id"]),
        organization_id=int(row["organization_id"]),
        ssid=row["ssid"],
        created_by=int(row["created_by"]),
        description=row.get("description"),
        is_active=bool(row.get("is_active", True)),
        created_at=row.get("created_at"),
    )


class MySQLWiFiNetworkRepository(WiFiNetworkRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, network_id: int) -> Optional[OfficeWiFiNetwork]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM office_wifi_networks WHERE network_id=%s", (int(network_id),))
            row = fetchone(cur)
            return _to_network(row) if row else None

    def get_by_ssid(self, organization_id: int, ssid: str) -> Optional[OfficeWiFiNetwork]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM office_wifi_networks WHERE organization_id=%s AND ssid=%s",
                (int(organization_id), ssid),
            )
            row = fetchone(cur)
            return _to_network(row) if row else None

    def list_for_organization(self, organization_id: int, *, active_only: bool = False) -> Sequence[OfficeWiFiNetwork]:
        sql = f"SELECT {_COLUMNS} FROM office_wifi_networks WHERE organization_id=%s"
        if active_only:
            sql += " AND is_active=1"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY created_at DESC, network_id DESC", (int(organization_id),))
            return [_to_network(r) for r in fetchall(cur)]

    def create(self, *, organization_id: int, ssid: str, description: Optional[str], created_by: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO office_wifi_networks(organization_id, ssid, description, is_active, created_by)
                VALUES(%s,%s,%s,1,%s)
                """,
                (int(organization_id), ssid, description, int(created_by)),
            )
            return int(cur.lastrowid)

    def update(self, network_id: int, **fields) -> bool:
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Unsupported network fields: {sorted(unknown)}")
        if not fields:
            return False

        if "is_active" in fields:
            fields["is_active"] = int(bool(fields["is_active"]))
        assignments = ", ".join(f"{name}=%s" for name in fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE office_wifi_networks SET {assignments} WHERE network_id=%s",
                (*fields.values(), int(network_id)),
            )
            return cur.rowcount > 0

    def delete(self, network_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM office_wifi_networks WHERE network_id=%s", (int(network_id),))
            return cur.rowcount > 0
