from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Plain data object; no DB access here.
    """

    employee_id: int
    employee_code: str
    full_name: str
    username: str
    email: str
    password_hash: str
    role: Role
    phone: Optional[str] = None
    date_of_joining: Optional[date] = None
    active: bool = True
