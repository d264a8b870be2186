from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import EventType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, fetchall, to_db_datetime
from .model import ClockEvent
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_events(self, *, employee_id: int, start: datetime, end: datetime) -> Sequence[ClockEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, employee_id, site_id, event_type, timestamp, latitude, longitude, notes
                FROM attendance_logs
                WHERE employee_id=%s AND timestamp >= %s AND timestamp < %s
                ORDER BY timestamp ASC, id ASC
                """,
                (int(employee_id), to_db_datetime(start), to_db_datetime(end)),
            )
            rows = fetchall(cur)
            return [
                ClockEvent(
                    event_id=int(r["id"]),
                    employee_id=int(r["employee_id"]),
                    site_id=int(r["site_id"]),
                    event_type=EventType(r["event_type"]),
                    timestamp=as_utc(r["timestamp"]),
                    latitude=r.get("latitude"),
                    longitude=r.get("longitude"),
                    notes=r.get("notes"),
                )
                for r in rows
            ]

    def create_event(
        self,
        *,
        employee_id: int,
        site_id: int,
        event_type: EventType,
        timestamp: datetime,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        notes: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_logs(employee_id, site_id, event_type, timestamp, latitude, longitude, notes)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    int(site_id),
                    event_type.value,
                    to_db_datetime(timestamp),
                    latitude,
                    longitude,
                    notes,
                ),
            )
            return int(cur.lastrowid)
