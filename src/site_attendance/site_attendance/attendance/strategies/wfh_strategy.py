from __future__ import annotations

from ...core.enums import DayStatusKind, WfhStatus
from ..model import DayStatus
from .base import DayContext, DayStatusStrategy


class WfhStrategy(DayStatusStrategy):
    """A WFH session for the day (complete, active or incomplete)."""

    def applies(self, ctx: DayContext) -> bool:
        return ctx.wfh is not None

    def decide(self, ctx: DayContext) -> DayStatus:
        session = ctx.wfh

        if session.status == WfhStatus.INCOMPLETE:
            return DayStatus(
                work_date=ctx.work_date,
                status=DayStatusKind.INCOMPLETE_WFH,
                clock_in=session.clock_in_time,
                wfh_status=session.status,
            )

        if session.status == WfhStatus.COMPLETE:
            if session.duration_minutes is not None:
                hours = session.duration_minutes / 60
            elif session.clock_out_time is not None:
                hours = (session.clock_out_time - session.clock_in_time).total_seconds() / 3600
            else:
                hours = 0.0
            return DayStatus(
                work_date=ctx.work_date,
                status=DayStatusKind.WFH,
                clock_in=session.clock_in_time,
                clock_out=session.clock_out_time,
                hours_worked=max(hours, 0.0),
                wfh_status=session.status,
            )

        # Still running: no hours yet.
        return DayStatus(
            work_date=ctx.work_date,
            status=DayStatusKind.WFH,
            clock_in=session.clock_in_time,
            wfh_status=session.status,
        )
