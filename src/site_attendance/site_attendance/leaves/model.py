from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestStatus, RequestType


@dataclass(frozen=True)
class LeaveRequest:
    """A leave or work-from-home request covering ``start_date..end_date`` inclusive."""

    request_id: int
    employee_id: int
    request_type: RequestType
    start_date: date
    end_date: date
    reason: str
    status: RequestStatus
    created_at: Optional[datetime] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date
