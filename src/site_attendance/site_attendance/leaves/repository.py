from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..attendance.model import LeaveDay
from ..core.enums import RequestStatus, RequestType
from .model import LeaveRequest


class LeaveRepository(Protocol):
    # Requests
    def create_request(
        self,
        *,
        employee_id: int,
        request_type: RequestType,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> int:
        raise NotImplementedError

    def get_request(self, *, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        """Return UI rows (joined with the employee), newest first."""

        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_by: int,
        decided_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        """Move a pending request to ``status``. False when it was not pending."""

        raise NotImplementedError

    def count_pending(self) -> int:
        raise NotImplementedError

    def list_approved_covering(
        self,
        *,
        request_type: RequestType,
        day: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    # Materialised leave days
    def upsert_leave_days(self, days: Sequence[LeaveDay]) -> int:
        """Insert leave days, ignoring ones already recorded. Returns rows written."""

        raise NotImplementedError

    def list_leave_days(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[LeaveDay]:
        raise NotImplementedError
