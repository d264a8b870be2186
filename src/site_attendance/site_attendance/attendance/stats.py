from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import week_start
from ..core.constants import STANDARD_WORKDAY_HOURS
from .model import DayStatus
from .workday import is_workday


@dataclass(frozen=True)
class MonthlyStats:
    days_present: int
    weekly_hours: float
    expected_weekly_hours: float
    monthly_hours: float
    avg_hours_per_day: float
    last_active: Optional[datetime] = None


def days_present(days: Sequence[DayStatus]) -> int:
    return sum(1 for d in days if d.counts_as_present)


def monthly_hours(days: Sequence[DayStatus]) -> float:
    return sum(d.hours_worked for d in days)


def _week_window(days: Sequence[DayStatus], reference: date) -> tuple[date, date]:
    # Only the month's start clips the week; a last partial week still spans to Sunday.
    start = week_start(reference)
    end = start + timedelta(days=6)
    if days:
        start = max(start, days[0].work_date)
    return start, end


def weekly_hours(days: Sequence[DayStatus], reference: date) -> float:
    """Hours in the Monday-start week containing ``reference``, clipped to the month's start."""
    start, end = _week_window(days, reference)
    return sum(d.hours_worked for d in days if start <= d.work_date <= end)


def expected_weekly_hours(days: Sequence[DayStatus], reference: date, role) -> float:
    start, end = _week_window(days, reference)
    workdays = 0
    day = start
    while day <= end:
        if is_workday(day, role):
            workdays += 1
        day += timedelta(days=1)
    return float(workdays * STANDARD_WORKDAY_HOURS)


def average_hours_per_day(days: Sequence[DayStatus]) -> float:
    present = days_present(days)
    if present == 0:
        return 0.0
    return monthly_hours(days) / present


def last_active(days: Sequence[DayStatus]) -> Optional[datetime]:
    stamps = [d.clock_in for d in days if d.clock_in is not None]
    return max(stamps) if stamps else None


def summarize(days: Sequence[DayStatus], *, role, reference: date) -> MonthlyStats:
    """All list-view aggregates for one employee-month.

    ``reference`` picks the week; callers pass today when the month is current,
    otherwise a day inside the month.
    """

    return MonthlyStats(
        days_present=days_present(days),
        weekly_hours=weekly_hours(days, reference),
        expected_weekly_hours=expected_weekly_hours(days, reference, role),
        monthly_hours=monthly_hours(days),
        avg_hours_per_day=average_hours_per_day(days),
        last_active=last_active(days),
    )
