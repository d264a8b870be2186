from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for employees.

    Services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        raise NotImplementedError

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
        raise NotImplementedError

    def delete_by_id(self, employee_id: int) -> bool:
        raise NotImplementedError

    def update_password(self, employee_id: int, password_hash: str) -> bool:
        raise NotImplementedError

    def list_employees(self, *, role: Optional[Role] = None, active_only: bool = True) -> Sequence[Employee]:
        raise NotImplementedError
