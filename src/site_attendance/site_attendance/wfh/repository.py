from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import WfhSession


class WfhRepository(Protocol):
    def get_for_date(self, *, employee_id: int, work_date: date) -> Optional[WfhSession]:
        raise NotImplementedError

    def list_for_range(self, *, employee_id: int, start_date: date, end_date: date) -> Sequence[WfhSession]:
        raise NotImplementedError

    def create(self, *, employee_id: int, work_date: date, clock_in_time: datetime) -> int:
        raise NotImplementedError

    def complete(self, *, session_id: int, clock_out_time: datetime, duration_minutes: int) -> bool:
        raise NotImplementedError

    def mark_stale_incomplete(self, *, clock_in_before: datetime) -> int:
        """Flag ``active`` sessions started before the cutoff as ``incomplete``."""

        raise NotImplementedError
