from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from .strategies.base import DayContext, DayStatusStrategy
from .strategies.leave_strategy import LeaveStrategy
from .strategies.no_activity_strategy import NoActivityStrategy
from .strategies.site_events_strategy import SiteEventsStrategy
from .strategies.wfh_strategy import WfhStrategy


def _default_chain() -> Sequence[DayStatusStrategy]:
    return (LeaveStrategy(), WfhStrategy(), SiteEventsStrategy(), NoActivityStrategy())


@dataclass
class DayStatusStrategyFactory:
    """Factory Pattern: choose the highest-precedence strategy that applies to a day."""

    chain: Sequence[DayStatusStrategy] = field(default_factory=_default_chain)

    def for_day(self, ctx: DayContext) -> DayStatusStrategy:
        for strategy in self.chain:
            if strategy.applies(ctx):
                return strategy
        return NoActivityStrategy()
