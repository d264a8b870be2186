from __future__ import annotations

from ...core.enums import DayStatusKind
from ..model import DayStatus
from .base import DayContext, DayStatusStrategy


class LeaveStrategy(DayStatusStrategy):
    """Approved leave wins over any clock or WFH data."""

    def applies(self, ctx: DayContext) -> bool:
        return ctx.on_leave

    def decide(self, ctx: DayContext) -> DayStatus:
        return DayStatus(work_date=ctx.work_date, status=DayStatusKind.LEAVE)
