from __future__ import annotations

import logging
from datetime import date, datetime, timezone, tzinfo
from typing import Optional

from ..common.datetime_utils import local_date, parse_timestamp
from ..core.enums import RequestType, WfhStatus
from ..core.exceptions import ValidationError
from ..leaves.repository import LeaveRepository
from .model import WfhSession
from .repository import WfhRepository

logger = logging.getLogger(__name__)


def format_duration(minutes: Optional[int]) -> str:
    """``H:MM hr`` as shown on the WFH card."""
    if not minutes:
        return "0:00 hr"
    hours, mins = divmod(int(minutes), 60)
    return f"{hours}:{mins:02d} hr"


class WfhService:
    """Use case: self-reported work-from-home clock-in/out."""

    def __init__(self, sessions: WfhRepository, leaves: LeaveRepository, *, zone: tzinfo = timezone.utc):
        self._sessions = sessions
        self._leaves = leaves
        self._zone = zone

    def _today(self, now: datetime) -> date:
        return local_date(now, self._zone)

    def clock_in(self, employee_id: int, *, now: datetime) -> WfhSession:
        now = parse_timestamp(now)
        today = self._today(now)

        approved = self._leaves.list_approved_covering(
            request_type=RequestType.WFH, day=today, employee_id=int(employee_id)
        )
        if not approved:
            raise ValidationError("No approved work-from-home request covers today")

        if self._sessions.get_for_date(employee_id=int(employee_id), work_date=today):
            raise ValidationError("You already have a WFH session today")

        session_id = self._sessions.create(employee_id=int(employee_id), work_date=today, clock_in_time=now)
        logger.info("Employee %s started WFH session %s", employee_id, session_id)
        return WfhSession(
            session_id=session_id,
            employee_id=int(employee_id),
            work_date=today,
            clock_in_time=now,
            status=WfhStatus.ACTIVE,
        )

    def clock_out(self, employee_id: int, *, now: datetime) -> WfhSession:
        now = parse_timestamp(now)
        today = self._today(now)

        session = self._sessions.get_for_date(employee_id=int(employee_id), work_date=today)
        if not session or session.status != WfhStatus.ACTIVE:
            raise ValidationError("No active WFH session to clock out of")

        seconds = (now - session.clock_in_time).total_seconds()
        if seconds < 0:
            raise ValidationError("Clock-out cannot be before clock-in")
        minutes = int(seconds // 60)

        if not self._sessions.complete(session_id=session.session_id, clock_out_time=now, duration_minutes=minutes):
            raise ValidationError("No active WFH session to clock out of")

        logger.info("Employee %s finished WFH session %s (%d min)", employee_id, session.session_id, minutes)
        return WfhSession(
            session_id=session.session_id,
            employee_id=session.employee_id,
            work_date=session.work_date,
            clock_in_time=session.clock_in_time,
            clock_out_time=now,
            duration_minutes=minutes,
            status=WfhStatus.COMPLETE,
        )

    def get_today(self, employee_id: int, *, today: date) -> Optional[WfhSession]:
        return self._sessions.get_for_date(employee_id=int(employee_id), work_date=today)
