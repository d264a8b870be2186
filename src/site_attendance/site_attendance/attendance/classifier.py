"""Per-day attendance status classification.

``classify_month`` is the single shared classifier behind the calendar detail
view, the list statistics and the spreadsheet export. It is pure: callers pass
records already filtered to one employee and month, plus the current local
moment as ``today``.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import replace
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Dict, Iterable, List, Optional

from ..common.datetime_utils import local_date, month_bounds, parse_timestamp
from ..core.enums import EventType, WfhStatus
from ..core.exceptions import InvalidInput
from ..wfh.model import WfhSession
from .factory import DayStatusStrategyFactory
from .model import ClockEvent, DayStatus, LeaveDay
from .strategies.base import DayContext

_default_factory = DayStatusStrategyFactory()


def _require_date(value, what: str) -> date:
    if isinstance(value, datetime) or not isinstance(value, date):
        raise InvalidInput(f"{what} must be a calendar date, got {value!r}")
    return value


def _require_owner(record, employee_id: int) -> None:
    if record.employee_id != employee_id:
        raise InvalidInput(f"Record belongs to employee {record.employee_id}, expected {employee_id}")


def _normalize_event(event: ClockEvent, employee_id: int) -> ClockEvent:
    if not isinstance(event, ClockEvent):
        raise InvalidInput(f"Not a clock event: {event!r}")
    _require_owner(event, employee_id)
    try:
        event_type = EventType(event.event_type)
    except ValueError:
        raise InvalidInput(f"Unknown event type: {event.event_type!r}")
    return replace(event, event_type=event_type, timestamp=parse_timestamp(event.timestamp))


def _normalize_wfh(session: WfhSession, employee_id: int) -> WfhSession:
    if not isinstance(session, WfhSession):
        raise InvalidInput(f"Not a WFH session: {session!r}")
    _require_owner(session, employee_id)
    _require_date(session.work_date, "WFH date")
    try:
        status = WfhStatus(session.status)
    except ValueError:
        raise InvalidInput(f"Unknown WFH status: {session.status!r}")
    clock_out = session.clock_out_time
    return replace(
        session,
        status=status,
        clock_in_time=parse_timestamp(session.clock_in_time),
        clock_out_time=parse_timestamp(clock_out) if clock_out is not None else None,
    )


def _leave_date(value) -> date:
    if isinstance(value, LeaveDay):
        return _require_date(value.work_date, "Leave date")
    return _require_date(value, "Leave date")


def classify_month(
    employee_id: int,
    role,
    year: int,
    month: int,
    events: Iterable[ClockEvent],
    wfh_sessions: Iterable[WfhSession],
    leave_days: Iterable[LeaveDay | date],
    today: datetime,
    *,
    zone: tzinfo = timezone.utc,
    factory: Optional[DayStatusStrategyFactory] = None,
) -> List[DayStatus]:
    """Return one ``DayStatus`` per calendar day of ``year``/``month``, ascending.

    Site events are bucketed into calendar days in ``zone`` (UTC by default).
    ``today`` carries the evaluator's local wall-clock time; the 18:00 absence
    cutoff reads its hour as given.

    Raises ``InvalidInput`` for malformed months, dates or timestamps.
    """

    if not isinstance(today, datetime):
        raise InvalidInput(f"today must be a datetime, got {today!r}")
    if events is None or wfh_sessions is None or leave_days is None:
        raise InvalidInput("Pass empty collections, not None, when there are no records")

    first_day, last_day = month_bounds(year, month)
    factory = factory or _default_factory

    events_by_day: Dict[date, List[ClockEvent]] = defaultdict(list)
    for raw in events:
        event = _normalize_event(raw, employee_id)
        events_by_day[local_date(event.timestamp, zone)].append(event)

    wfh_by_day: Dict[date, WfhSession] = {}
    for raw in wfh_sessions:
        session = _normalize_wfh(raw, employee_id)
        wfh_by_day[session.work_date] = session

    leave_set = {_leave_date(v) for v in leave_days}

    out: List[DayStatus] = []
    day = first_day
    while day <= last_day:
        ctx = DayContext(
            work_date=day,
            role=role,
            today=today,
            on_leave=day in leave_set,
            wfh=wfh_by_day.get(day),
            site_events=tuple(events_by_day.get(day, ())),
            zone=zone,
        )
        out.append(factory.for_day(ctx).decide(ctx))
        day += timedelta(days=1)

    return out
