from __future__ import annotations

from ..model import DayStatus
from ..workday import resolve_workday_status
from .base import DayContext, DayStatusStrategy


class NoActivityStrategy(DayStatusStrategy):
    """Nothing recorded for the day: weekend/future or absent."""

    def applies(self, ctx: DayContext) -> bool:
        return True

    def decide(self, ctx: DayContext) -> DayStatus:
        status = resolve_workday_status(day=ctx.work_date, role=ctx.role, today=ctx.today)
        return DayStatus(work_date=ctx.work_date, status=status)
