from __future__ import annotations

import json
from datetime import date, datetime
from typing import List, Optional, Sequence

from ..core.enums import WorkflowStage
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, as_utc, db_cursor, fetchall, fetchone, to_db_datetime
from .model import ScannedBin, WasteForm
from .repository import WasteFormRepository

_COLUMNS = (
    "id, employee_id, site_id, community, date, recorded_by, waste_segregated, total_bins_50kg, "
    "issues_identified, workflow_stage, scanned_bins, remarks, created_at"
)


def _json(value):
    # The connector hands JSON columns back as str (or bytes on some versions).
    if value is None:
        return []
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        return json.loads(value) if value else []
    return value


def _bin_to_json(b: ScannedBin) -> dict:
    return {"bin_id": b.bin_id, "bin_code": b.bin_code, "site_id": b.site_id, "stage": b.stage.value}


def _bin_from_json(d: dict) -> ScannedBin:
    return ScannedBin(
        bin_id=int(d["bin_id"]),
        bin_code=d["bin_code"],
        site_id=int(d["site_id"]),
        stage=WorkflowStage(d["stage"]),
    )


def _row_to_form(r: dict) -> WasteForm:
    return WasteForm(
        form_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        site_id=int(r["site_id"]) if r.get("site_id") is not None else None,
        community=r["community"],
        form_date=as_date(r["date"]),
        recorded_by=r["recorded_by"],
        waste_segregated=bool(r["waste_segregated"]),
        total_bins_50kg=int(r["total_bins_50kg"]),
        issues_identified=tuple(_json(r.get("issues_identified"))),
        workflow_stage=WorkflowStage(r["workflow_stage"]),
        scanned_bins=tuple(_bin_from_json(d) for d in _json(r.get("scanned_bins"))),
        remarks=r.get("remarks"),
        created_at=as_utc(r.get("created_at")),
    )


class MySQLWasteFormRepository(WasteFormRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        site_id: Optional[int],
        community: str,
        form_date: date,
        recorded_by: str,
        waste_segregated: bool,
        total_bins_50kg: int,
        issues_identified: Sequence[str],
        workflow_stage: WorkflowStage,
        scanned_bins: Sequence[ScannedBin],
        remarks: Optional[str],
        created_at: datetime,
    ) -> int:
        composter_status = {
            stage.value: [b.bin_code for b in scanned_bins if b.stage == stage] for stage in WorkflowStage
        }
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO waste_management_forms(
                    employee_id, site_id, community, date, recorded_by, waste_segregated, total_bins_50kg,
                    issues_identified, workflow_stage, scanned_bins, composter_status, remarks, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    site_id,
                    community,
                    form_date,
                    recorded_by,
                    1 if waste_segregated else 0,
                    int(total_bins_50kg),
                    json.dumps(list(issues_identified)),
                    workflow_stage.value,
                    json.dumps([_bin_to_json(b) for b in scanned_bins]),
                    json.dumps(composter_status),
                    remarks,
                    to_db_datetime(created_at),
                ),
            )
            return int(cur.lastrowid)

    def get(self, form_id: int) -> Optional[WasteForm]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM waste_management_forms WHERE id=%s", (int(form_id),))
            row = fetchone(cur)
            return _row_to_form(row) if row else None

    def list_forms(
        self,
        *,
        employee_id: Optional[int] = None,
        created_since: Optional[datetime] = None,
        community: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        recorded_by: Optional[str] = None,
    ) -> Sequence[WasteForm]:
        where: List[str] = []
        params: list = []
        if employee_id is not None:
            where.append("employee_id=%s")
            params.append(int(employee_id))
        if created_since is not None:
            where.append("created_at>=%s")
            params.append(to_db_datetime(created_since))
        if community:
            where.append("community=%s")
            params.append(community)
        if date_from is not None:
            where.append("date>=%s")
            params.append(date_from)
        if date_to is not None:
            where.append("date<=%s")
            params.append(date_to)
        if recorded_by:
            where.append("recorded_by=%s")
            params.append(recorded_by)

        sql = f"SELECT {_COLUMNS} FROM waste_management_forms"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY date DESC, created_at DESC, id DESC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_form(r) for r in fetchall(cur)]

    def delete(self, form_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM waste_management_forms WHERE id=%s", (int(form_id),))
            return cur.rowcount > 0
