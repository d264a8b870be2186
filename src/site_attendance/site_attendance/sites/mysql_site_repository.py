from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Site
from .repository import SiteRepository

_COLUMNS = "id, name, address, qr_code_data, latitude, longitude, active"


def _row_to_site(row: dict) -> Site:
    return Site(
        site_id=int(row["id"]),
        name=row["name"],
        address=row["address"],
        qr_code_data=row["qr_code_data"],
        latitude=row.get("latitude"),
        longitude=row.get("longitude"),
        active=bool(row.get("active", True)),
    )


class MySQLSiteRepository(SiteRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, site_id: int) -> Optional[Site]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM sites WHERE id=%s", (int(site_id),))
            row = fetchone(cur)
            return _row_to_site(row) if row else None

    def get_active_by_qr(self, qr_code_data: str) -> Optional[Site]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM sites WHERE qr_code_data=%s AND active=1", (qr_code_data,))
            row = fetchone(cur)
            return _row_to_site(row) if row else None

    def create(
        self,
        *,
        name: str,
        address: str,
        qr_code_data: str,
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO sites(name, address, qr_code_data, latitude, longitude, active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (name, address, qr_code_data, latitude, longitude),
            )
            return int(cur.lastrowid)

    def set_active(self, site_id: int, *, active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE sites SET active=%s WHERE id=%s", (1 if active else 0, int(site_id)))
            return cur.rowcount > 0

    def list_all(self, *, include_inactive: bool = True) -> Sequence[Site]:
        where = "" if include_inactive else "WHERE active=1"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM sites {where} ORDER BY name ASC")
            return [_row_to_site(r) for r in fetchall(cur)]
