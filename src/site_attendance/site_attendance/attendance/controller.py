from __future__ import annotations

from typing import Optional

from flask import Flask, request
from PIL import Image, UnidentifiedImageError

from ..common import datetime_utils
from ..common.web import current_employee_id, current_role, fail, login_required, ok, request_data
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError

# Roles that may scan a site QR on behalf of another employee
SCAN_FOR_OTHERS_ROLES = frozenset({Role.ADMIN, Role.MANAGER, Role.FIELD_SUPERVISOR})


def _coordinate(value) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError("Location must be numeric")


def decode_qr_image(stream) -> str:
    """Return the first QR payload found in an uploaded image."""
    # pyzbar loads libzbar on import; only image scans need it.
    from pyzbar.pyzbar import decode as pyzbar_decode

    try:
        img = Image.open(stream).convert("RGB")
    except UnidentifiedImageError:
        raise ValidationError("Uploaded file is not an image")

    decoded = pyzbar_decode(img)
    if not decoded:
        raise ValidationError("No QR code found in the image")
    return decoded[0].data.decode("utf-8").strip()


def register(app: Flask, container: Container) -> None:
    def _scan(qr_data: str, data: dict):
        employee_code = (data.get("employee_code") or "").strip()
        if employee_code and current_role() not in SCAN_FOR_OTHERS_ROLES:
            raise AuthorizationError("You can only clock yourself in or out")

        result = container.attendance_service.scan(
            qr_data=qr_data,
            now=datetime_utils.utc_now(),
            employee_id=None if employee_code else current_employee_id(),
            employee_code=employee_code or None,
            latitude=_coordinate(data.get("latitude")),
            longitude=_coordinate(data.get("longitude")),
        )
        return ok(
            f"{result.action} at {result.site_name}",
            action=result.action,
            event_type=result.event_type.value,
            site_name=result.site_name,
            employee_name=result.employee_name,
        )

    @app.route("/api/scan", methods=["POST"], endpoint="api_scan")
    @login_required
    def api_scan():
        data = request_data()
        return _scan((data.get("qr_data") or "").strip(), data)

    @app.route("/api/scan/image", methods=["POST"], endpoint="api_scan_image")
    @login_required
    def api_scan_image():
        if "image" not in request.files:
            return fail("Image file is required", 400)
        qr_data = decode_qr_image(request.files["image"].stream)
        return _scan(qr_data, request.form.to_dict())

    @app.route("/api/status", methods=["GET"], endpoint="api_status")
    @login_required
    def api_status():
        state = container.attendance_service.current_status(current_employee_id(), now=datetime_utils.utc_now())
        return ok(**state)
