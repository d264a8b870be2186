from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import DayStatusKind, EventType, WfhStatus


@dataclass(frozen=True)
class ClockEvent:
    """A QR clock-in or clock-out at a work site. ``timestamp`` is UTC."""

    employee_id: int
    site_id: int
    event_type: EventType
    timestamp: datetime
    event_id: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class LeaveDay:
    """A calendar day covered by an approved leave request."""

    employee_id: int
    work_date: date
    leave_request_id: Optional[int] = None


@dataclass(frozen=True)
class DayStatus:
    """Derived attendance for one calendar day; never persisted."""

    work_date: date
    status: DayStatusKind
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    hours_worked: float = 0.0
    wfh_status: Optional[WfhStatus] = None

    @property
    def counts_as_present(self) -> bool:
        if self.status == DayStatusKind.PRESENT:
            return True
        return self.status == DayStatusKind.WFH and self.wfh_status == WfhStatus.COMPLETE


@dataclass(frozen=True)
class ScanResult:
    employee_id: int
    employee_name: str
    site_id: int
    site_name: str
    event_type: EventType
    timestamp: datetime

    @property
    def action(self) -> str:
        return "Clocked in" if self.event_type == EventType.CLOCK_IN else "Clocked out"
