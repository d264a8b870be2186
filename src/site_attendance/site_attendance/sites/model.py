from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Site:
    """A work site. Employees clock in by scanning its ``qr_code_data``."""

    site_id: int
    name: str
    address: str
    qr_code_data: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    active: bool = True
