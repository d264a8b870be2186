from __future__ import annotations

from flask import Flask, request

from ..common import datetime_utils
from ..common.datetime_utils import parse_iso_date
from ..common.web import current_employee_id, current_role, login_required, ok, request_data, roles_required
from ..container import Container
from ..core.enums import RequestStatus, RequestType, Role
from ..core.exceptions import ValidationError

REVIEWER_ROLES = frozenset({Role.ADMIN, Role.MANAGER})


def _parse_request_type(value: str) -> RequestType:
    try:
        return RequestType((value or RequestType.LEAVE.value).strip())
    except ValueError:
        raise ValidationError(f"Unknown request type: {value!r}")


def _parse_status(value: str):
    if not value:
        return None
    try:
        return RequestStatus(value.strip())
    except ValueError:
        raise ValidationError(f"Unknown request status: {value!r}")


def register(app: Flask, container: Container) -> None:
    @app.route("/requests", methods=["GET"], endpoint="my_requests")
    @login_required
    def my_requests():
        today = datetime_utils.local_date(datetime_utils.utc_now(), container.zone)
        return ok(
            requests=container.leave_service.list_for_employee(employee_id=current_employee_id()),
            today_status=container.leave_service.today_status(employee_id=current_employee_id(), today=today),
        )

    @app.route("/requests", methods=["POST"], endpoint="create_request")
    @login_required
    def create_request():
        data = request_data()
        request_id = container.leave_service.create_request(
            current_role=current_role(),
            employee_id=current_employee_id(),
            request_type=_parse_request_type(data.get("request_type", "")),
            start_date=parse_iso_date(data.get("start_date", "")),
            end_date=parse_iso_date(data.get("end_date", "")),
            reason=data.get("reason", ""),
        )
        return ok("Request submitted", http_status=201, request_id=request_id)

    @app.route("/admin/requests", methods=["GET"], endpoint="admin_requests")
    @roles_required(REVIEWER_ROLES)
    def admin_requests():
        status = _parse_status(request.args.get("status", ""))
        return ok(requests=container.leave_service.list_for_admin(status=status))

    @app.route("/admin/requests/<int:request_id>/approve", methods=["POST"], endpoint="approve_request")
    @roles_required(REVIEWER_ROLES)
    def approve_request(request_id: int):
        container.leave_service.approve(
            current_role=current_role(),
            approver_id=current_employee_id(),
            request_id=request_id,
            now=datetime_utils.utc_now(),
        )
        return ok("Request approved")

    @app.route("/admin/requests/<int:request_id>/reject", methods=["POST"], endpoint="reject_request")
    @roles_required(REVIEWER_ROLES)
    def reject_request(request_id: int):
        container.leave_service.reject(
            current_role=current_role(),
            approver_id=current_employee_id(),
            request_id=request_id,
            rejection_reason=request_data().get("rejection_reason", ""),
            now=datetime_utils.utc_now(),
        )
        return ok("Request rejected")

    @app.route("/admin/notifications", methods=["GET"], endpoint="admin_notifications")
    @roles_required(REVIEWER_ROLES)
    def admin_notifications():
        pending = container.leave_service.list_for_admin(status=RequestStatus.PENDING)
        return ok(pending_count=container.leave_service.pending_count(), latest=pending[:5])
