from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import EventType
from .model import ClockEvent


class AttendanceRepository(Protocol):
    def list_events(self, *, employee_id: int, start: datetime, end: datetime) -> Sequence[ClockEvent]:
        """Clock events with ``start <= timestamp < end``, oldest first. Empty list when none."""

        raise NotImplementedError

    def create_event(
        self,
        *,
        employee_id: int,
        site_id: int,
        event_type: EventType,
        timestamp: datetime,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        notes: Optional[str] = None,
    ) -> int:
        raise NotImplementedError
