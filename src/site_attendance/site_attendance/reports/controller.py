from __future__ import annotations

from flask import Flask, Response, request

from ..common import datetime_utils
from ..common.datetime_utils import local_now, parse_month
from ..common.validators import parse_role
from ..common.web import current_employee_id, current_role, login_required, ok, roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .excel_export import XLSX_MIMETYPE, export_attendance_xlsx, export_filename
from .service import parse_month_list

REPORT_ROLES = frozenset({Role.ADMIN, Role.MANAGER, Role.FIELD_SUPERVISOR})


def register(app: Flask, container: Container) -> None:
    def _month_arg(now):
        raw = request.args.get("month")
        if raw:
            return parse_month(raw)
        today = local_now(now, container.local_zone).date()
        return today.year, today.month

    @app.route("/api/attendance/<int:employee_id>", methods=["GET"], endpoint="employee_attendance")
    @login_required
    def employee_attendance(employee_id: int):
        if employee_id != current_employee_id() and current_role() not in REPORT_ROLES:
            raise AuthorizationError("You can only view your own attendance")

        now = datetime_utils.utc_now()
        year, month = _month_arg(now)
        detail = container.report_service.build_employee_detail(employee_id, year, month, now=now)
        return ok(**detail)

    @app.route("/admin/report", methods=["GET"], endpoint="admin_report")
    @roles_required(REPORT_ROLES)
    def admin_report():
        now = datetime_utils.utc_now()
        year, month = _month_arg(now)
        role_s = request.args.get("role")
        rows = container.report_service.build_monthly_summary(
            year,
            month,
            now=now,
            role=parse_role(role_s) if role_s else None,
            search=request.args.get("search"),
        )
        return ok(month=f"{year:04d}-{month:02d}", rows=rows)

    @app.route("/admin/report.xlsx", methods=["GET"], endpoint="admin_report_xlsx")
    @roles_required(REPORT_ROLES)
    def admin_report_xlsx():
        now = datetime_utils.utc_now()
        months = parse_month_list(request.args.get("months", ""))
        grids = container.report_service.build_month_grids(months, now=now)
        payload = export_attendance_xlsx(grids)

        filename = export_filename(local_now(now, container.local_zone).date())
        return Response(
            payload,
            mimetype=XLSX_MIMETYPE,
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
