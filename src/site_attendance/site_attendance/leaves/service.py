from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional

from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import RequestStatus, RequestType, Role
from ..core.exceptions import AuthorizationError, ValidationError
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

TODAY_LEAVE = "leave"
TODAY_WFH = "wfh"
TODAY_NONE = "none"


def _fmt_date(value) -> Optional[str]:
    if value is None:
        return None
    return value.strftime("%Y-%m-%d")


def _fmt_datetime(value) -> Optional[str]:
    if value is None:
        return None
    return value.strftime("%Y-%m-%d %H:%M")


class LeaveRequestService:
    def __init__(self, leaves: LeaveRepository):
        self._leaves = leaves

    def create_request(
        self,
        *,
        current_role: Role,
        employee_id: int,
        request_type: RequestType,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> int:
        if not isinstance(current_role, Role):
            raise AuthorizationError("You do not have permission")
        if not isinstance(request_type, RequestType):
            raise ValidationError(f"Unknown request type: {request_type!r}")
        if end_date < start_date:
            raise ValidationError("End date must be on or after start date")

        reason = require_non_empty(reason, "Reason")
        request_id = self._leaves.create_request(
            employee_id=int(employee_id),
            request_type=request_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
        )
        logger.info(
            "Employee %s requested %s from %s to %s (request %s)",
            employee_id, request_type.value, start_date, end_date, request_id,
        )
        return request_id

    def _decide(
        self,
        *,
        current_role: Role,
        approver_id: int,
        request_id: int,
        status: RequestStatus,
        now: datetime,
        rejection_reason: Optional[str] = None,
    ) -> None:
        if not isinstance(current_role, Role) or not current_role.can_approve:
            raise AuthorizationError("Only admins and managers can review requests")

        req = self._leaves.get_request(request_id=int(request_id))
        if not req:
            raise ValidationError("Request not found")
        if req.status != RequestStatus.PENDING:
            raise ValidationError("Request has already been reviewed")

        ok = self._leaves.decide(
            request_id=int(request_id),
            status=status,
            decided_by=int(approver_id),
            decided_at=now,
            rejection_reason=rejection_reason,
        )
        if not ok:
            raise ValidationError("Request has already been reviewed")
        logger.info("Request %s %s by %s", request_id, status.value, approver_id)

    def approve(self, *, current_role: Role, approver_id: int, request_id: int, now: datetime) -> None:
        self._decide(
            current_role=current_role,
            approver_id=approver_id,
            request_id=request_id,
            status=RequestStatus.APPROVED,
            now=now,
        )

    def reject(
        self,
        *,
        current_role: Role,
        approver_id: int,
        request_id: int,
        rejection_reason: str,
        now: datetime,
    ) -> None:
        reason = require_non_empty(rejection_reason, "Rejection reason")
        self._decide(
            current_role=current_role,
            approver_id=approver_id,
            request_id=request_id,
            status=RequestStatus.REJECTED,
            now=now,
            rejection_reason=reason,
        )

    def list_for_employee(self, *, employee_id: int) -> List[dict]:
        rows = self._leaves.list_requests(employee_id=int(employee_id), limit=DEFAULT_LIST_LIMIT)
        return [self._to_ui(r) for r in rows]

    def list_for_admin(self, *, status: Optional[RequestStatus] = None) -> List[dict]:
        rows = self._leaves.list_requests(status=status, limit=DEFAULT_LIST_LIMIT)
        return [self._to_ui(r) for r in rows]

    def pending_count(self) -> int:
        return self._leaves.count_pending()

    def today_status(self, *, employee_id: int, today: date) -> str:
        """``leave`` when today is a recorded leave day, ``wfh`` when an approved WFH request covers it."""

        if self._leaves.list_leave_days(employee_id=int(employee_id), start_date=today, end_date=today):
            return TODAY_LEAVE
        if self._leaves.list_approved_covering(request_type=RequestType.WFH, day=today, employee_id=int(employee_id)):
            return TODAY_WFH
        return TODAY_NONE

    @staticmethod
    def _to_ui(r: dict) -> dict:
        return {
            "request_id": int(r["request_id"]),
            "employee_id": int(r["employee_id"]),
            "full_name": r.get("full_name"),
            "employee_code": r.get("employee_code"),
            "request_type": r["request_type"],
            "start_date": _fmt_date(r.get("start_date")),
            "end_date": _fmt_date(r.get("end_date")),
            "reason": r.get("reason"),
            "status": r["status"],
            "created_at": _fmt_datetime(r.get("created_at")),
            "approved_by_name": r.get("approved_by_name"),
            "approved_at": _fmt_datetime(r.get("approved_at")),
            "rejection_reason": r.get("rejection_reason"),
        }
