"""Nightly job: materialise approved leave into leave days and close stale WFH sessions."""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone, tzinfo
from typing import Optional

from ..attendance.model import LeaveDay
from ..core.enums import RequestType
from ..wfh.repository import WfhRepository
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveMarker:
    def __init__(self, leaves: LeaveRepository, wfh: WfhRepository, *, zone: tzinfo = timezone.utc):
        self._leaves = leaves
        self._wfh = wfh
        self._zone = zone

    def run(self, *, today: Optional[date] = None, now: Optional[datetime] = None) -> dict:
        now = now or datetime.now(self._zone)
        if today is None:
            today = now.astimezone(self._zone).date() if now.tzinfo else now.date()

        requests = self._leaves.list_approved_covering(request_type=RequestType.LEAVE, day=today)
        days = [
            LeaveDay(employee_id=r.employee_id, work_date=today, leave_request_id=r.request_id)
            for r in requests
        ]
        written = self._leaves.upsert_leave_days(days)
        logger.info("Marked %d leave day(s) for %s (%d newly written)", len(days), today, written)

        # Sessions still open from an earlier day can no longer be clocked out.
        midnight = datetime.combine(today, time.min, tzinfo=self._zone)
        closed = self._wfh.mark_stale_incomplete(clock_in_before=midnight)
        if closed:
            logger.info("Flagged %d WFH session(s) started before %s as incomplete", closed, today)

        return {"date": today.strftime("%Y-%m-%d"), "count": len(days), "wfh_incomplete": closed}
