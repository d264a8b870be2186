from __future__ import annotations

from flask import Flask, Response

from ..common.web import admin_required, ok, request_data
from ..container import Container


def _site_to_ui(s) -> dict:
    return {
        "site_id": s.site_id,
        "name": s.name,
        "address": s.address,
        "qr_code_data": s.qr_code_data,
        "latitude": s.latitude,
        "longitude": s.longitude,
        "active": s.active,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/sites", methods=["GET"], endpoint="admin_sites")
    @admin_required
    def admin_sites():
        return ok(sites=[_site_to_ui(s) for s in container.site_service.list_sites()])

    @app.route("/admin/sites", methods=["POST"], endpoint="add_site")
    @admin_required
    def add_site():
        data = request_data()
        site = container.site_service.create_site(
            name=data.get("name", ""),
            address=data.get("address", ""),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
        )
        return ok("Site created", http_status=201, site=_site_to_ui(site))

    @app.route("/admin/sites/<int:site_id>/active", methods=["POST"], endpoint="set_site_active")
    @admin_required
    def set_site_active(site_id: int):
        active = str(request_data().get("active", "1")).lower() in {"1", "true", "yes", "on"}
        container.site_service.set_active(site_id, active=active)
        return ok("Site activated" if active else "Site deactivated")

    @app.route("/admin/sites/<int:site_id>/qr.png", methods=["GET"], endpoint="site_qr_image")
    @admin_required
    def site_qr_image(site_id: int):
        return Response(container.site_service.qr_png(site_id), mimetype="image/png")
