from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import BinType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, fetchall, fetchone
from .model import Bin
from .repository import BinRepository

_COLUMNS = "id, site_id, bin_code, bin_type, capacity_kg, qr_code_data, location_details, active, created_at"


def _row_to_bin(r: dict) -> Bin:
    return Bin(
        bin_id=int(r["id"]),
        site_id=int(r["site_id"]),
        bin_code=r["bin_code"],
        bin_type=BinType(r["bin_type"]),
        capacity_kg=int(r["capacity_kg"]),
        qr_code_data=r["qr_code_data"],
        location_details=r.get("location_details"),
        active=bool(r.get("active", True)),
        created_at=as_utc(r.get("created_at")),
    )


class MySQLBinRepository(BinRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _one(self, where: str, params: tuple) -> Optional[Bin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM bins WHERE {where}", params)
            row = fetchone(cur)
            return _row_to_bin(row) if row else None

    def get_by_id(self, bin_id: int) -> Optional[Bin]:
        return self._one("id=%s", (int(bin_id),))

    def get_by_qr(self, qr_code_data: str) -> Optional[Bin]:
        return self._one("qr_code_data=%s", (qr_code_data,))

    def get_by_code(self, *, site_id: int, bin_code: str) -> Optional[Bin]:
        return self._one("site_id=%s AND bin_code=%s", (int(site_id), bin_code))

    def list_for_site(self, site_id: int) -> Sequence[Bin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM bins WHERE site_id=%s ORDER BY created_at DESC, id DESC",
                (int(site_id),),
            )
            return [_row_to_bin(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        site_id: int,
        bin_code: str,
        bin_type: BinType,
        capacity_kg: int,
        qr_code_data: str,
        location_details: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO bins(site_id, bin_code, bin_type, capacity_kg, qr_code_data, location_details, active)
                VALUES(%s,%s,%s,%s,%s,%s,1)
                """,
                (int(site_id), bin_code, bin_type.value, int(capacity_kg), qr_code_data, location_details),
            )
            return int(cur.lastrowid)

    def update(
        self,
        bin_id: int,
        *,
        bin_code: str,
        bin_type: BinType,
        capacity_kg: int,
        location_details: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE bins SET bin_code=%s, bin_type=%s, capacity_kg=%s, location_details=%s
                WHERE id=%s
                """,
                (bin_code, bin_type.value, int(capacity_kg), location_details, int(bin_id)),
            )
            return cur.rowcount > 0

    def delete(self, bin_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM bins WHERE id=%s", (int(bin_id),))
            return cur.rowcount > 0
