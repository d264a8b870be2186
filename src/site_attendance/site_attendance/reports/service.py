from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional, Sequence, Tuple

from ..attendance.model import DayStatus
from ..attendance.projections import export_letter, to_detail_row
from ..attendance.service import AttendanceService
from ..attendance.stats import MonthlyStats, summarize
from ..common.datetime_utils import local_now, month_bounds, parse_month
from ..core.enums import DayStatusKind, Role
from ..core.exceptions import InvalidInput
from ..users.model import Employee
from ..users.service import UserService
from .model import GridRow, MonthGrid

logger = logging.getLogger(__name__)


def parse_month_list(value: str) -> List[Tuple[int, int]]:
    """``"2024-05,2024-06"`` -> ``[(2024, 5), (2024, 6)]``; duplicates dropped, order kept."""

    months: List[Tuple[int, int]] = []
    for part in (value or "").split(","):
        if not part.strip():
            continue
        ym = parse_month(part)
        if ym not in months:
            months.append(ym)
    if not months:
        raise InvalidInput("At least one month (YYYY-MM) is required")
    return months


def reference_day(year: int, month: int, today: date) -> date:
    """Day that picks the "this week" window for a month's statistics."""
    first, last = month_bounds(year, month)
    if first <= today <= last:
        return today
    return last if today > last else first


def _stats_to_ui(stats: MonthlyStats) -> dict:
    return {
        "days_present": stats.days_present,
        "weekly_hours": round(stats.weekly_hours, 2),
        "expected_weekly_hours": round(stats.expected_weekly_hours, 2),
        "monthly_hours": round(stats.monthly_hours, 2),
        "avg_hours_per_day": round(stats.avg_hours_per_day, 2),
        "last_active": stats.last_active.strftime("%Y-%m-%d %H:%M") if stats.last_active else None,
    }


def grid_row(employee: Employee, days: Sequence[DayStatus]) -> GridRow:
    letters = [export_letter(d.status) for d in days]
    return GridRow(
        employee_id=employee.employee_id,
        full_name=employee.full_name,
        letters=letters,
        total_p=sum(1 for d in days if d.status in (DayStatusKind.PRESENT, DayStatusKind.WFH)),
        total_a=sum(1 for d in days if d.status == DayStatusKind.ABSENT),
        total_i=sum(1 for d in days if d.status in (DayStatusKind.INCOMPLETE, DayStatusKind.INCOMPLETE_WFH)),
    )


class AttendanceReportService:
    def __init__(self, attendance: AttendanceService, users: UserService):
        self._attendance = attendance
        self._users = users

    def _today(self, now: datetime) -> date:
        return local_now(now, self._attendance.local_zone).date()

    def build_monthly_summary(
        self,
        year: int,
        month: int,
        *,
        now: datetime,
        role: Optional[Role] = None,
        search: Optional[str] = None,
    ) -> List[dict]:
        ref = reference_day(year, month, self._today(now))
        out: List[dict] = []
        for employee in self._users.list_employees(role=role, search=search):
            days = self._attendance.classify_employee_month(employee, year, month, now=now)
            stats = summarize(days, role=employee.role, reference=ref)
            row = {
                "employee_id": employee.employee_id,
                "employee_code": employee.employee_code,
                "full_name": employee.full_name,
                "role": employee.role.value,
            }
            row.update(_stats_to_ui(stats))
            out.append(row)
        return out

    def build_employee_detail(self, employee_id: int, year: int, month: int, *, now: datetime) -> dict:
        employee = self._users.get_employee(employee_id)
        days = self._attendance.classify_employee_month(employee, year, month, now=now)
        stats = summarize(days, role=employee.role, reference=reference_day(year, month, self._today(now)))
        return {
            "employee_id": employee.employee_id,
            "full_name": employee.full_name,
            "role": employee.role.value,
            "month": f"{year:04d}-{month:02d}",
            "days": [to_detail_row(d, zone=self._attendance.zone) for d in days],
            "stats": _stats_to_ui(stats),
        }

    def build_month_grid(self, year: int, month: int, *, now: datetime) -> MonthGrid:
        first, last = month_bounds(year, month)
        rows: List[GridRow] = []
        # One employee at a time; each fetch already goes through the retry queue.
        for employee in self._users.list_employees():
            days = self._attendance.classify_employee_month(employee, year, month, now=now)
            rows.append(grid_row(employee, days))
        logger.info("Built attendance grid for %s with %d employee(s)", first.strftime("%Y-%m"), len(rows))
        return MonthGrid(year=year, month=month, days_in_month=last.day, rows=rows)

    def build_month_grids(self, months: Sequence[Tuple[int, int]], *, now: datetime) -> List[MonthGrid]:
        return [self.build_month_grid(y, m, now=now) for y, m in months]
