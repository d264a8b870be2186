from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime, timezone, tzinfo
from typing import Optional, Sequence

from ...core.enums import Role
from ...wfh.model import WfhSession
from ..model import ClockEvent, DayStatus


@dataclass(frozen=True)
class DayContext:
    """Everything known about one employee on one calendar day."""

    work_date: date
    role: Role | str
    today: datetime
    on_leave: bool = False
    wfh: Optional[WfhSession] = None
    site_events: Sequence[ClockEvent] = field(default_factory=tuple)
    zone: tzinfo = timezone.utc


class DayStatusStrategy(ABC):
    """Strategy Pattern: one precedence tier of the per-day classification."""

    @abstractmethod
    def applies(self, ctx: DayContext) -> bool:
        raise NotImplementedError

    @abstractmethod
    def decide(self, ctx: DayContext) -> DayStatus:
        raise NotImplementedError
