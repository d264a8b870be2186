from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

from ..core.enums import WorkflowStage


@dataclass(frozen=True)
class ScannedBin:
    bin_id: int
    bin_code: str
    site_id: int
    stage: WorkflowStage


@dataclass(frozen=True)
class WasteForm:
    """A field worker's daily waste-management record for one community (site)."""

    form_id: int
    employee_id: int
    site_id: Optional[int]
    community: str
    form_date: date
    recorded_by: str
    waste_segregated: bool
    total_bins_50kg: int
    issues_identified: Tuple[str, ...]
    workflow_stage: WorkflowStage
    scanned_bins: Tuple[ScannedBin, ...]
    remarks: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def composter_status(self) -> Dict[str, List[str]]:
        """Bin codes per composter stage."""
        return {
            stage.value: [b.bin_code for b in self.scanned_bins if b.stage == stage]
            for stage in WorkflowStage
        }
