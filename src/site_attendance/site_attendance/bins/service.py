from __future__ import annotations

import logging
import uuid
from typing import List, Optional

from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_BIN_CAPACITY_KG
from ..core.enums import BinType
from ..core.exceptions import ValidationError
from ..sites.repository import SiteRepository
from ..sites.service import render_qr_png
from .model import Bin
from .repository import BinRepository

logger = logging.getLogger(__name__)


def new_bin_payload(site_id: int, bin_code: str) -> str:
    return f"BIN-{int(site_id)}-{bin_code}-{uuid.uuid4().hex[:8].upper()}"


def parse_bin_type(value) -> BinType:
    if isinstance(value, BinType):
        return value
    try:
        return BinType(str(value or "").strip())
    except ValueError:
        raise ValidationError(f"Unknown bin type: {value!r}")


def _capacity(value) -> int:
    if value is None or value == "":
        return DEFAULT_BIN_CAPACITY_KG
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Capacity must be a whole number of kg")
    if parsed <= 0:
        raise ValidationError("Capacity must be positive")
    return parsed


class BinService:
    """Use case: manage the waste bins of a site (admin) and resolve scanned bin QR codes."""

    def __init__(self, bins: BinRepository, sites: SiteRepository):
        self._bins = bins
        self._sites = sites

    def _require_bin(self, bin_id: int) -> Bin:
        found = self._bins.get_by_id(int(bin_id))
        if not found:
            raise ValidationError("Bin not found")
        return found

    def create_bin(
        self,
        *,
        site_id: int,
        bin_code: str,
        bin_type=BinType.ORGANIC,
        capacity_kg=None,
        location_details: Optional[str] = None,
    ) -> Bin:
        if not self._sites.get_by_id(int(site_id)):
            raise ValidationError("Site not found")
        bin_code = require_non_empty(bin_code, "Bin code")
        kind = parse_bin_type(bin_type)
        capacity = _capacity(capacity_kg)
        if self._bins.get_by_code(site_id=int(site_id), bin_code=bin_code):
            raise ValidationError("Bin code already exists at this site")

        payload = new_bin_payload(site_id, bin_code)
        details = (location_details or "").strip() or None
        bin_id = self._bins.create(
            site_id=int(site_id),
            bin_code=bin_code,
            bin_type=kind,
            capacity_kg=capacity,
            qr_code_data=payload,
            location_details=details,
        )
        logger.info("Bin %s (%s) added to site %s", bin_code, kind.value, site_id)
        return Bin(
            bin_id=bin_id,
            site_id=int(site_id),
            bin_code=bin_code,
            bin_type=kind,
            capacity_kg=capacity,
            qr_code_data=payload,
            location_details=details,
        )

    def update_bin(
        self,
        bin_id: int,
        *,
        bin_code: str,
        bin_type,
        capacity_kg=None,
        location_details: Optional[str] = None,
    ) -> Bin:
        current = self._require_bin(bin_id)
        bin_code = require_non_empty(bin_code, "Bin code")
        kind = parse_bin_type(bin_type)
        capacity = _capacity(capacity_kg)
        clash = self._bins.get_by_code(site_id=current.site_id, bin_code=bin_code)
        if clash and clash.bin_id != current.bin_id:
            raise ValidationError("Bin code already exists at this site")

        # The QR payload is printed on the bin, so it survives edits.
        self._bins.update(
            current.bin_id,
            bin_code=bin_code,
            bin_type=kind,
            capacity_kg=capacity,
            location_details=(location_details or "").strip() or None,
        )
        return self._require_bin(current.bin_id)

    def delete_bin(self, bin_id: int) -> None:
        current = self._require_bin(bin_id)
        if not self._bins.delete(current.bin_id):
            raise ValidationError("Deleting bin failed")
        logger.info("Bin %s deleted from site %s", current.bin_code, current.site_id)

    def list_bins(self, site_id: int) -> List[Bin]:
        if not self._sites.get_by_id(int(site_id)):
            raise ValidationError("Site not found")
        return list(self._bins.list_for_site(int(site_id)))

    def resolve_scan(self, qr_data: str) -> Bin:
        """Active bin behind a scanned QR payload."""
        found = self._bins.get_by_qr(require_non_empty(qr_data, "QR code"))
        if not found or not found.active:
            raise ValidationError("Invalid bin QR code")
        return found

    def qr_png(self, bin_id: int) -> bytes:
        return render_qr_png(self._require_bin(bin_id).qr_code_data)
