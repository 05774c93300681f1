from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import OfficeNetwork
from .repository import OfficeNetworkRepository


def _row_to_network(r: Dict[str, Any]) -> OfficeNetwork:
    return OfficeNetwork(
        network_id=int(r["network_id"]),
        organization_id=int(r["organization_id"]),
        ssid=r["ssid"],
        is_active=as_bool(r.get("is_active")),
        created_by=int(r["created_by"]),
        created_at=r["created_at"],
        description=r.get("description"),
    )


class MySQLOfficeNetworkRepository(OfficeNetworkRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, network_id: int) -> Optional[OfficeNetwork]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT network_id, organization_id, ssid, description, is_active, created_by, created_at
                FROM office_wifi_networks
                WHERE network_id=%s
                """,
                (int(network_id),),
            )
            r = fetchone(cur)
            return _row_to_network(r) if r else None

    def list_for_organization(self, organization_id: int, *, active_only: bool = False) -> Sequence[OfficeNetwork]:
        clauses = ["organization_id=%s"]
        if active_only:
            clauses.append("is_active=1")
        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT network_id, organization_id, ssid, description, is_active, created_by, created_at
                FROM office_wifi_networks
                WHERE {where}
                ORDER BY ssid
                """,
                (int(organization_id),),
            )
            return [_row_to_network(r) for r in fetchall(cur)]

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

    def update(self, *, network_id: int, ssid: str, description: Optional[str], is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE office_wifi_networks
                SET ssid=%s, description=%s, is_active=%s
                WHERE network_id=%s
                """,
                (ssid, description, 1 if is_active else 0, int(network_id)),
            )
            return cur.rowcount > 0

    def delete(self, *, network_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM office_wifi_networks WHERE network_id=%s", (int(network_id),))
            return cur.rowcount > 0
