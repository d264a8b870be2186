from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Site


class SiteRepository(Protocol):
    def get_by_id(self, site_id: int) -> Optional[Site]:
        raise NotImplementedError

    def get_active_by_qr(self, qr_code_data: str) -> Optional[Site]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        address: str,
        qr_code_data: str,
        latitude: Optional[float],
        longitude: Optional[float],
    ) -> int:
        raise NotImplementedError

    def set_active(self, site_id: int, *, active: bool) -> bool:
        raise NotImplementedError

    def list_all(self, *, include_inactive: bool = True) -> Sequence[Site]:
        raise NotImplementedError
