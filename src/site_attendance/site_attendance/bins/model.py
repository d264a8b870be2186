from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import BinType


@dataclass(frozen=True)
class Bin:
    """A waste bin placed at a site; field staff scan its QR on waste forms."""

    bin_id: int
    site_id: int
    bin_code: str
    bin_type: BinType
    capacity_kg: int
    qr_code_data: str
    location_details: Optional[str] = None
    active: bool = True
    created_at: Optional[datetime] = None
