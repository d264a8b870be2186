from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import List, Optional, Sequence, Tuple

from ..common.datetime_utils import local_now, month_bounds, parse_timestamp
from ..common.request_queue import RequestQueue
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_MAX_RETRIES
from ..core.enums import EventType
from ..core.exceptions import ValidationError
from ..leaves.repository import LeaveRepository
from ..sites.repository import SiteRepository
from ..users.model import Employee
from ..users.repository import EmployeeRepository
from ..wfh.repository import WfhRepository
from .classifier import classify_month
from .model import ClockEvent, DayStatus, ScanResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

STATUS_CLOCKED_IN = "clocked_in"
STATUS_CLOCKED_OUT = "clocked_out"


class AttendanceService:
    """QR clock toggling plus per-month classification for one employee.

    ``zone`` decides which calendar day an event belongs to. ``local_zone`` is the
    evaluator's wall clock for "today" and the 18:00 cutoff; ``None`` uses the
    host's zone.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        sites: SiteRepository,
        wfh: WfhRepository,
        leaves: LeaveRepository,
        *,
        zone: tzinfo = timezone.utc,
        local_zone: Optional[tzinfo] = None,
        queue: Optional[RequestQueue] = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ):
        self._attendance = attendance
        self._employees = employees
        self._sites = sites
        self._wfh = wfh
        self._leaves = leaves
        self._zone = zone
        self._local_zone = local_zone
        self._queue = queue
        self._max_retries = int(max_retries)

    @property
    def zone(self) -> tzinfo:
        return self._zone

    @property
    def local_zone(self) -> Optional[tzinfo]:
        return self._local_zone

    def _day_window(self, day: date) -> Tuple[datetime, datetime]:
        start = datetime.combine(day, time.min, tzinfo=self._zone)
        return start, start + timedelta(days=1)

    def _events_on(self, employee_id: int, day: date) -> Sequence[ClockEvent]:
        start, end = self._day_window(day)
        return self._attendance.list_events(employee_id=employee_id, start=start, end=end)

    def _resolve_employee(self, employee_id: Optional[int], employee_code: Optional[str]) -> Employee:
        if employee_id is not None:
            employee = self._employees.get_by_id(int(employee_id))
        else:
            code = require_non_empty(employee_code or "", "Employee code")
            employee = self._employees.get_by_code(code)

        if not employee:
            raise ValidationError("Employee not found")
        if not employee.active:
            raise ValidationError("Employee account is inactive")
        return employee

    def scan(
        self,
        *,
        qr_data: str,
        now: datetime,
        employee_id: Optional[int] = None,
        employee_code: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> ScanResult:
        """Toggle the employee's clock state at the site behind ``qr_data``."""

        qr_data = require_non_empty(qr_data, "QR code")
        now = parse_timestamp(now)

        site = self._sites.get_active_by_qr(qr_data)
        if not site:
            raise ValidationError("Invalid QR code or site not found")

        employee = self._resolve_employee(employee_id, employee_code)
        today = now.astimezone(self._zone).date()
        events = self._events_on(employee.employee_id, today)

        if events and any(e.site_id != site.site_id for e in events):
            raise ValidationError("Clock in/out is limited to one site per day; there are entries for another site today")

        last = events[-1] if events else None
        if last is None or last.event_type == EventType.CLOCK_OUT:
            event_type = EventType.CLOCK_IN
        else:
            event_type = EventType.CLOCK_OUT

        self._attendance.create_event(
            employee_id=employee.employee_id,
            site_id=site.site_id,
            event_type=event_type,
            timestamp=now,
            latitude=latitude,
            longitude=longitude,
        )
        logger.info("Employee %s %s at site %s", employee.employee_code, event_type.value, site.site_id)

        return ScanResult(
            employee_id=employee.employee_id,
            employee_name=employee.full_name,
            site_id=site.site_id,
            site_name=site.name,
            event_type=event_type,
            timestamp=now,
        )

    def current_status(self, employee_id: int, *, now: datetime) -> dict:
        today = parse_timestamp(now).astimezone(self._zone).date()
        events = self._events_on(int(employee_id), today)
        last = events[-1] if events else None
        if last is not None and last.event_type == EventType.CLOCK_IN:
            return {"status": STATUS_CLOCKED_IN, "site_id": last.site_id}
        return {"status": STATUS_CLOCKED_OUT, "site_id": None}

    def _fetch(self, operation, **metadata):
        if self._queue is None:
            return operation()
        return self._queue.run(operation, max_retries=self._max_retries, metadata=metadata)

    def classify_employee_month(self, employee: Employee, year: int, month: int, *, now: datetime) -> List[DayStatus]:
        first, last = month_bounds(year, month)
        start, _ = self._day_window(first)
        _, end = self._day_window(last)
        eid = employee.employee_id

        events = self._fetch(
            lambda: self._attendance.list_events(employee_id=eid, start=start, end=end),
            kind="events", employee_id=eid,
        )
        sessions = self._fetch(
            lambda: self._wfh.list_for_range(employee_id=eid, start_date=first, end_date=last),
            kind="wfh", employee_id=eid,
        )
        leave_days = self._fetch(
            lambda: self._leaves.list_leave_days(employee_id=eid, start_date=first, end_date=last),
            kind="leave", employee_id=eid,
        )

        # The 18:00 cutoff reads the evaluator's wall clock; ``zone`` only buckets events.
        today = local_now(now, self._local_zone)
        return classify_month(
            eid,
            employee.role,
            year,
            month,
            events,
            sessions,
            leave_days,
            today,
            zone=self._zone,
        )
