from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import WorkflowStage
from .model import ScannedBin, WasteForm


class WasteFormRepository(Protocol):
    def create(
        self,
        *,
        employee_id: int,
        site_id: Optional[int],
        community: str,
        form_date: date,
        recorded_by: str,
        waste_segregated: bool,
        total_bins_50kg: int,
        issues_identified: Sequence[str],
        workflow_stage: WorkflowStage,
        scanned_bins: Sequence[ScannedBin],
        remarks: Optional[str],
        created_at: datetime,
    ) -> int:
        raise NotImplementedError

    def get(self, form_id: int) -> Optional[WasteForm]:
        raise NotImplementedError

    def list_forms(
        self,
        *,
        employee_id: Optional[int] = None,
        created_since: Optional[datetime] = None,
        community: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        recorded_by: Optional[str] = None,
    ) -> Sequence[WasteForm]:
        """Every given filter applies; newest form date first, then newest submission."""

        raise NotImplementedError

    def delete(self, form_id: int) -> bool:
        raise NotImplementedError
