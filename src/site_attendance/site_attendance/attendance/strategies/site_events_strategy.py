from __future__ import annotations

from collections import OrderedDict
from datetime import datetime
from typing import Dict, List, Optional

from ...core.enums import EventType
from ..model import DayStatus
from ..workday import resolve_workday_status
from .base import DayContext, DayStatusStrategy


class SiteEventsStrategy(DayStatusStrategy):
    """QR clock events at one or more sites.

    Within each site the i-th clock-in pairs with the i-th clock-out. Hours are
    summed over all completed pairs without per-pair rounding.
    """

    def applies(self, ctx: DayContext) -> bool:
        return bool(ctx.site_events)

    def decide(self, ctx: DayContext) -> DayStatus:
        per_site: Dict[int, Dict[str, List[datetime]]] = OrderedDict()
        for event in sorted(ctx.site_events, key=lambda e: e.timestamp):
            entry = per_site.setdefault(event.site_id, {"in": [], "out": []})
            if event.event_type == EventType.CLOCK_IN:
                entry["in"].append(event.timestamp)
            else:
                entry["out"].append(event.timestamp)

        hours_worked = 0.0
        has_incomplete = False
        first_in: Optional[datetime] = None
        last_out: Optional[datetime] = None

        for entry in per_site.values():
            clock_ins, clock_outs = entry["in"], entry["out"]
            for index, clock_in in enumerate(clock_ins):
                if index < len(clock_outs):
                    # An out-of-order pair contributes nothing.
                    hours_worked += max((clock_outs[index] - clock_in).total_seconds(), 0) / 3600
                else:
                    has_incomplete = True
            if clock_ins and (first_in is None or clock_ins[0] < first_in):
                first_in = clock_ins[0]
            if clock_outs and (last_out is None or clock_outs[-1] > last_out):
                last_out = clock_outs[-1]

        status = resolve_workday_status(
            day=ctx.work_date,
            role=ctx.role,
            today=ctx.today,
            hours_worked=hours_worked,
            has_incomplete=has_incomplete,
        )
        return DayStatus(
            work_date=ctx.work_date,
            status=status,
            clock_in=first_in,
            clock_out=last_out,
            hours_worked=hours_worked,
        )
