from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import WfhStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, as_utc, db_cursor, fetchall, fetchone, to_db_datetime
from .model import WfhSession
from .repository import WfhRepository

_COLUMNS = "id, employee_id, date, clock_in_time, clock_out_time, duration_minutes, status"


def _row_to_session(r: dict) -> WfhSession:
    minutes = r.get("duration_minutes")
    return WfhSession(
        session_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        work_date=as_date(r["date"]),
        clock_in_time=as_utc(r["clock_in_time"]),
        clock_out_time=as_utc(r.get("clock_out_time")),
        duration_minutes=int(minutes) if minutes is not None else None,
        status=WfhStatus(r["status"]),
    )


class MySQLWfhRepository(WfhRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_date(self, *, employee_id: int, work_date: date) -> Optional[WfhSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM wfh_attendance WHERE employee_id=%s AND date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_session(r) if r else None

    def list_for_range(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[WfhSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM wfh_attendance
                WHERE employee_id=%s AND date BETWEEN %s AND %s
                ORDER BY date ASC
                """,
                (int(employee_id), start_date, end_date),
            )
            return [_row_to_session(r) for r in fetchall(cur)]

    def create(self, *, employee_id: int, work_date: date, clock_in_time: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO wfh_attendance(employee_id, date, clock_in_time, status)
                VALUES(%s,%s,%s,%s)
                """,
                (int(employee_id), work_date, to_db_datetime(clock_in_time), WfhStatus.ACTIVE.value),
            )
            return int(cur.lastrowid)

    def complete(self, *, session_id: int, clock_out_time: datetime, duration_minutes: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE wfh_attendance
                SET clock_out_time=%s, duration_minutes=%s, status=%s
                WHERE id=%s AND status=%s
                """,
                (
                    to_db_datetime(clock_out_time),
                    int(duration_minutes),
                    WfhStatus.COMPLETE.value,
                    int(session_id),
                    WfhStatus.ACTIVE.value,
                ),
            )
            return cur.rowcount > 0

    def mark_stale_incomplete(self, *, clock_in_before: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE wfh_attendance SET status=%s WHERE status=%s AND clock_in_time < %s",
                (WfhStatus.INCOMPLETE.value, WfhStatus.ACTIVE.value, to_db_datetime(clock_in_before)),
            )
            return int(cur.rowcount)
