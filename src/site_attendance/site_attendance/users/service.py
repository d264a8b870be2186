from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import DEFAULT_TEMP_EMAIL_DOMAIN, MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    employee_id: int
    employee_code: str
    full_name: str
    email: str
    role: Role


def _verify(password_hash: str, password: str) -> bool:
    try:
        return check_password_hash(password_hash, password)
    except ValueError:
        # placeholder or corrupted hash values
        return False


class AuthService:
    """Use case: authenticate an employee (login) and change passwords."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def authenticate(self, username: str, password: str) -> SessionUser:
        username = (username or "").strip()
        employee = self._employees.get_by_username(username)
        if not employee or not employee.active:
            raise AuthenticationError("Invalid username or password")

        if not _verify(employee.password_hash, password or ""):
            raise AuthenticationError("Invalid username or password")

        logger.info("Employee %s signed in", employee.employee_code)
        return SessionUser(
            employee_id=employee.employee_id,
            employee_code=employee.employee_code,
            full_name=employee.full_name,
            email=employee.email,
            role=employee.role,
        )

    def change_password(self, employee_id: int, current_password: str, new_password: str) -> None:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise ValidationError("Employee not found")
        if not _verify(employee.password_hash, current_password or ""):
            raise AuthenticationError("Current password is incorrect")

        require_min_length(new_password, "New password", MIN_PASSWORD_LENGTH)
        if not self._employees.update_password(employee_id, generate_password_hash(new_password)):
            raise ValidationError("Password update failed")


class UserService:
    """Use case: manage employees (admin)."""

    def __init__(self, employees: EmployeeRepository, *, temp_email_domain: str = DEFAULT_TEMP_EMAIL_DOMAIN):
        self._employees = employees
        self._temp_email_domain = temp_email_domain

    def create_employee(
        self,
        *,
        current_role: Role,
        employee_code: str,
        full_name: str,
        username: str,
        password: str,
        role: Role,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        date_of_joining: Optional[date] = None,
    ) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can create employees")

        employee_code = require_non_empty(employee_code, "Employee code")
        full_name = require_non_empty(full_name, "Full name")
        username = require_non_empty(username, "Username")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        if not isinstance(role, Role):
            raise ValidationError(f"Unknown role: {role!r}")

        if self._employees.get_by_username(username):
            raise ValidationError("Username already exists")
        if self._employees.get_by_code(employee_code):
            raise ValidationError("Employee code already exists")

        email = (email or "").strip() or f"{username}@{self._temp_email_domain}"

        employee_id = self._employees.create_employee(
            employee_code=employee_code,
            full_name=full_name,
            username=username,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            phone=(phone or "").strip() or None,
            date_of_joining=date_of_joining,
        )
        logger.info("Employee %s (%s) created", employee_code, role.value)
        return employee_id

    def delete_employee(self, *, current_role: Role, current_employee_id: int, employee_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        if int(current_employee_id) == int(employee_id):
            raise ValidationError("You cannot delete your own account")

        if not self._employees.get_by_id(employee_id):
            raise ValidationError("Employee not found")
        if not self._employees.delete_by_id(employee_id):
            raise ValidationError("Deleting employee failed")
        logger.info("Employee %s deleted", employee_id)

    def get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise ValidationError("Employee not found")
        return employee

    def list_employees(self, *, role: Optional[Role] = None, search: Optional[str] = None) -> List[Employee]:
        rows = list(self._employees.list_employees(role=role))
        needle = (search or "").strip().lower()
        if needle:
            rows = [
                e for e in rows
                if needle in e.full_name.lower() or needle in e.employee_code.lower()
            ]
        return rows
