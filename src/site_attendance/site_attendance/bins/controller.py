from __future__ import annotations

from flask import Flask, Response

from ..common.web import admin_required, login_required, ok, request_data
from ..container import Container


def _bin_to_ui(b) -> dict:
    return {
        "bin_id": b.bin_id,
        "site_id": b.site_id,
        "bin_code": b.bin_code,
        "bin_type": b.bin_type.value,
        "bin_type_label": b.bin_type.label,
        "capacity_kg": b.capacity_kg,
        "qr_code_data": b.qr_code_data,
        "location_details": b.location_details,
        "active": b.active,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/sites/<int:site_id>/bins", methods=["GET"], endpoint="site_bins")
    @admin_required
    def site_bins(site_id: int):
        return ok(bins=[_bin_to_ui(b) for b in container.bin_service.list_bins(site_id)])

    @app.route("/admin/sites/<int:site_id>/bins", methods=["POST"], endpoint="add_bin")
    @admin_required
    def add_bin(site_id: int):
        data = request_data()
        created = container.bin_service.create_bin(
            site_id=site_id,
            bin_code=data.get("bin_code", ""),
            bin_type=data.get("bin_type") or "organic",
            capacity_kg=data.get("capacity_kg"),
            location_details=data.get("location_details"),
        )
        return ok("Bin added", http_status=201, bin=_bin_to_ui(created))

    @app.route("/admin/bins/<int:bin_id>", methods=["POST"], endpoint="update_bin")
    @admin_required
    def update_bin(bin_id: int):
        data = request_data()
        updated = container.bin_service.update_bin(
            bin_id,
            bin_code=data.get("bin_code", ""),
            bin_type=data.get("bin_type", ""),
            capacity_kg=data.get("capacity_kg"),
            location_details=data.get("location_details"),
        )
        return ok("Bin updated", bin=_bin_to_ui(updated))

    @app.route("/admin/bins/<int:bin_id>/delete", methods=["POST"], endpoint="delete_bin")
    @admin_required
    def delete_bin(bin_id: int):
        container.bin_service.delete_bin(bin_id)
        return ok("Bin deleted")

    @app.route("/admin/bins/<int:bin_id>/qr.png", methods=["GET"], endpoint="bin_qr_image")
    @admin_required
    def bin_qr_image(bin_id: int):
        return Response(container.bin_service.qr_png(bin_id), mimetype="image/png")

    @app.route("/api/bins/resolve", methods=["POST"], endpoint="resolve_bin")
    @login_required
    def resolve_bin():
        found = container.bin_service.resolve_scan((request_data().get("qr_data") or "").strip())
        return ok(bin=_bin_to_ui(found))
