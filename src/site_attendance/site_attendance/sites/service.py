from __future__ import annotations

import io
import logging
import uuid
from typing import List, Optional

import qrcode

from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError
from .model import Site
from .repository import SiteRepository

logger = logging.getLogger(__name__)

QR_PAYLOAD_PREFIX = "SITE-"


def new_qr_payload() -> str:
    return f"{QR_PAYLOAD_PREFIX}{uuid.uuid4().hex.upper()}"


def render_qr_png(data: str) -> bytes:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def _coordinate(value, name: str, limit: float) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a number")
    if not -limit <= parsed <= limit:
        raise ValidationError(f"{name} is out of range")
    return parsed


class SiteService:
    def __init__(self, sites: SiteRepository):
        self._sites = sites

    def create_site(self, *, name: str, address: str, latitude=None, longitude=None) -> Site:
        name = require_non_empty(name, "Site name")
        address = require_non_empty(address, "Address")
        lat = _coordinate(latitude, "Latitude", 90.0)
        lon = _coordinate(longitude, "Longitude", 180.0)

        payload = new_qr_payload()
        site_id = self._sites.create(name=name, address=address, qr_code_data=payload, latitude=lat, longitude=lon)
        logger.info("Site %s created with QR payload %s", site_id, payload)
        return Site(
            site_id=site_id,
            name=name,
            address=address,
            qr_code_data=payload,
            latitude=lat,
            longitude=lon,
        )

    def set_active(self, site_id: int, *, active: bool) -> None:
        if not self._sites.get_by_id(site_id):
            raise ValidationError("Site not found")
        self._sites.set_active(site_id, active=active)

    def list_sites(self, *, include_inactive: bool = True) -> List[Site]:
        return list(self._sites.list_all(include_inactive=include_inactive))

    def qr_png(self, site_id: int) -> bytes:
        site = self._sites.get_by_id(site_id)
        if not site:
            raise ValidationError("Site not found")
        return render_qr_png(site.qr_code_data)
