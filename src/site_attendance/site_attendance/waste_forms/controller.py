from __future__ import annotations

from flask import Flask, request

from ..common import datetime_utils
from ..common.web import admin_required, current_employee_id, current_role, login_required, ok, request_data
from ..container import Container
from ..core.exceptions import ValidationError


def _form_to_ui(f) -> dict:
    return {
        "id": f.form_id,
        "employee_id": f.employee_id,
        "site_id": f.site_id,
        "community": f.community,
        "date": f.form_date.isoformat(),
        "recorded_by": f.recorded_by,
        "waste_segregated": f.waste_segregated,
        "total_bins_50kg": f.total_bins_50kg,
        "issues_identified": list(f.issues_identified),
        "workflow_stage": f.workflow_stage.value,
        "scanned_bins": [
            {"bin_id": b.bin_id, "bin_code": b.bin_code, "site_id": b.site_id, "stage": b.stage.value}
            for b in f.scanned_bins
        ],
        "composter_status": f.composter_status,
        "remarks": f.remarks,
        "created_at": f.created_at.isoformat() if f.created_at else None,
    }


def _flag(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in {"1", "true", "yes", "on"}


def _list(data: dict, key: str) -> list:
    value = data.get(key) or []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ValidationError(f"{key} must be a list")
    return value


def _optional_date(value: str):
    return datetime_utils.parse_iso_date(value) if (value or "").strip() else None


def register(app: Flask, container: Container) -> None:
    @app.route("/api/waste-forms/options", methods=["GET"], endpoint="waste_form_options")
    @login_required
    def waste_form_options():
        return ok(**container.waste_form_service.options())

    @app.route("/api/waste-forms", methods=["POST"], endpoint="submit_waste_form")
    @login_required
    def submit_waste_form():
        data = request_data()
        scans = _list(data, "scanned_bins")
        if not all(isinstance(s, dict) for s in scans):
            raise ValidationError("scanned_bins entries must be objects with qr_data and stage")
        form = container.waste_form_service.submit(
            current_employee_id(),
            scanned_bins=scans,
            now=datetime_utils.utc_now(),
            site_id=data.get("site_id") or None,
            waste_segregated=_flag(data.get("waste_segregated")),
            total_bins_50kg=data.get("total_bins_50kg"),
            issues=_list(data, "issues_identified"),
            other_issue=data.get("other_issue"),
            remarks=data.get("remarks"),
            other_remark=data.get("other_remark"),
        )
        return ok("Waste form submitted", http_status=201, form=_form_to_ui(form))

    @app.route("/api/waste-forms", methods=["GET"], endpoint="my_waste_forms")
    @login_required
    def my_waste_forms():
        forms = container.waste_form_service.list_for_employee(
            current_employee_id(),
            period=request.args.get("period", "all"),
            now=datetime_utils.utc_now(),
        )
        return ok(forms=[_form_to_ui(f) for f in forms])

    @app.route("/admin/waste-forms", methods=["GET"], endpoint="admin_waste_forms")
    @admin_required
    def admin_waste_forms():
        forms = container.waste_form_service.list_for_admin(
            community=request.args.get("community"),
            date_from=_optional_date(request.args.get("date_from", "")),
            date_to=_optional_date(request.args.get("date_to", "")),
            recorded_by=request.args.get("recorded_by"),
        )
        return ok(forms=[_form_to_ui(f) for f in forms])

    @app.route("/admin/waste-forms/<int:form_id>/delete", methods=["POST"], endpoint="delete_waste_form")
    @admin_required
    def delete_waste_form(form_id: int):
        container.waste_form_service.delete_form(current_role=current_role(), form_id=form_id)
        return ok("Waste form deleted")
