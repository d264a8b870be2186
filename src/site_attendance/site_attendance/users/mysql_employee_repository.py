from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_date, db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = (
    "id, employee_code, full_name, username, email, phone, role, password_hash, date_of_joining, active"
)


def _row_to_employee(row: dict) -> Employee:
    joined = row.get("date_of_joining")
    return Employee(
        employee_id=int(row["id"]),
        employee_code=row["employee_code"],
        full_name=row["full_name"],
        username=row["username"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        phone=row.get("phone"),
        date_of_joining=as_date(joined) if joined else None,
        active=bool(row.get("active", True)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE {where}=%s", (value,))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._get_one("id", int(employee_id))

    def get_by_username(self, username: str) -> Optional[Employee]:
        return self._get_one("username", username)

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        return self._get_one("employee_code", employee_code)

    def create_employee(
        self,
        *,
        employee_code: str,
        full_name: str,
        username: str,
        email: str,
        password_hash: str,
        role: Role,
        phone: Optional[str],
        date_of_joining: Optional[date],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(employee_code, full_name, username, email, phone, role,
                                      password_hash, date_of_joining, active)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,1)
                """,
                (employee_code, full_name, username, email, phone, role.value, password_hash, date_of_joining),
            )
            return int(cur.lastrowid)

    def delete_by_id(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE id=%s", (int(employee_id),))
            return cur.rowcount > 0

    def update_password(self, employee_id: int, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET password_hash=%s WHERE id=%s", (password_hash, int(employee_id)))
            return cur.rowcount > 0

    def list_employees(self, *, role: Optional[Role] = None, active_only: bool = True) -> Sequence[Employee]:
        clauses = []
        params: list = []
        if active_only:
            clauses.append("active=1")
        if role is not None:
            clauses.append("role=%s")
            params.append(role.value)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees {where} ORDER BY full_name ASC", tuple(params))
            return [_row_to_employee(r) for r in fetchall(cur)]
