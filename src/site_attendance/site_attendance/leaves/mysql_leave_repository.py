from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..attendance.model import LeaveDay
from ..core.enums import RequestStatus, RequestType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, as_utc, db_cursor, fetchall, fetchone, to_db_datetime
from .model import LeaveRequest
from .repository import LeaveRepository

_COLUMNS = (
    "id, employee_id, request_type, start_date, end_date, reason, status, "
    "created_at, approved_by, approved_at, rejection_reason"
)


def _row_to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        request_type=RequestType(r["request_type"]),
        start_date=as_date(r["start_date"]),
        end_date=as_date(r["end_date"]),
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        created_at=as_utc(r.get("created_at")),
        approved_by=r.get("approved_by"),
        approved_at=as_utc(r.get("approved_at")),
        rejection_reason=r.get("rejection_reason"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Requests --------
    def create_request(
        self,
        *,
        employee_id: int,
        request_type: RequestType,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, request_type, start_date, end_date, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    request_type.value,
                    start_date,
                    end_date,
                    reason,
                    RequestStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get_request(self, *, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE id=%s", (int(request_id),))
            r = fetchone(cur)
            return _row_to_request(r) if r else None

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        clauses = []
        params: list = []
        if status is not None:
            clauses.append("r.status=%s")
            params.append(status.value)
        if employee_id is not None:
            clauses.append("r.employee_id=%s")
            params.append(int(employee_id))
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT r.id AS request_id, r.employee_id, e.full_name, e.employee_code,
                       r.request_type, r.start_date, r.end_date, r.reason, r.status,
                       r.created_at, r.approved_by, a.full_name AS approved_by_name,
                       r.approved_at, r.rejection_reason
                FROM leave_requests r
                JOIN employees e ON e.id = r.employee_id
                LEFT JOIN employees a ON a.id = r.approved_by
                {where}
                ORDER BY r.created_at DESC, r.id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return fetchall(cur)

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_by: int,
        decided_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approved_by=%s, approved_at=%s, rejection_reason=%s
                WHERE id=%s AND status=%s
                """,
                (
                    status.value,
                    int(decided_by),
                    to_db_datetime(decided_at),
                    rejection_reason,
                    int(request_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def count_pending(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM leave_requests WHERE status=%s",
                (RequestStatus.PENDING.value,),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def list_approved_covering(
        self,
        *,
        request_type: RequestType,
        day: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        sql = f"""
            SELECT {_COLUMNS} FROM leave_requests
            WHERE status=%s AND request_type=%s AND start_date <= %s AND end_date >= %s
        """
        params: list = [RequestStatus.APPROVED.value, request_type.value, day, day]
        if employee_id is not None:
            sql += " AND employee_id=%s"
            params.append(int(employee_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY id ASC", tuple(params))
            return [_row_to_request(r) for r in fetchall(cur)]

    # -------- Leave days --------
    def upsert_leave_days(self, days: Sequence[LeaveDay]) -> int:
        if not days:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT IGNORE INTO leave_attendance(employee_id, date, leave_request_id)
                VALUES(%s,%s,%s)
                """,
                [(int(d.employee_id), d.work_date, d.leave_request_id) for d in days],
            )
            return int(cur.rowcount)

    def list_leave_days(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[LeaveDay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, date, leave_request_id FROM leave_attendance
                WHERE employee_id=%s AND date BETWEEN %s AND %s
                ORDER BY date ASC
                """,
                (int(employee_id), start_date, end_date),
            )
            return [
                LeaveDay(
                    employee_id=int(r["employee_id"]),
                    work_date=as_date(r["date"]),
                    leave_request_id=r.get("leave_request_id"),
                )
                for r in fetchall(cur)
            ]
