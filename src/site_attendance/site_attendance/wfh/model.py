from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import WfhStatus


@dataclass(frozen=True)
class WfhSession:
    """Domain entity: one work-from-home session (at most one per employee per day)."""

    employee_id: int
    work_date: date
    clock_in_time: datetime
    status: WfhStatus
    clock_out_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    session_id: Optional[int] = None
