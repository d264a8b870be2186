from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import BinType
from .model import Bin


class BinRepository(Protocol):
    def get_by_id(self, bin_id: int) -> Optional[Bin]:
        raise NotImplementedError

    def get_by_qr(self, qr_code_data: str) -> Optional[Bin]:
        raise NotImplementedError

    def get_by_code(self, *, site_id: int, bin_code: str) -> Optional[Bin]:
        raise NotImplementedError

    def list_for_site(self, site_id: int) -> Sequence[Bin]:
        """Newest first."""

        raise NotImplementedError

    def create(
        self,
        *,
        site_id: int,
        bin_code: str,
        bin_type: BinType,
        capacity_kg: int,
        qr_code_data: str,
        location_details: Optional[str],
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        bin_id: int,
        *,
        bin_code: str,
        bin_type: BinType,
        capacity_kg: int,
        location_details: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def delete(self, bin_id: int) -> bool:
        raise NotImplementedError
