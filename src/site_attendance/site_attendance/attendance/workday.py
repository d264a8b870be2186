from __future__ import annotations

from datetime import date, datetime

from ..core.constants import ABSENCE_CUTOFF_HOUR
from ..core.enums import FIELD_ROLES, DayStatusKind, Role

SATURDAY = 5
SUNDAY = 6


def is_field_role(role) -> bool:
    """Unknown role strings count as non-field roles."""
    value = role.value if isinstance(role, Role) else str(role or "")
    return value in {r.value for r in FIELD_ROLES}


def is_workday(day: date, role) -> bool:
    weekday = day.weekday()
    if weekday == SUNDAY:
        return False
    if weekday == SATURDAY and not is_field_role(role):
        return False
    return True


def resolve_workday_status(
    *,
    day: date,
    role,
    today: datetime,
    hours_worked: float = 0.0,
    has_incomplete: bool = False,
) -> DayStatusKind:
    """Pick Present/Incomplete/Absent/NotApplicable for a day without leave or WFH."""

    if day > today.date():
        return DayStatusKind.NOT_APPLICABLE
    if not is_workday(day, role):
        return DayStatusKind.NOT_APPLICABLE

    if hours_worked > 0:
        return DayStatusKind.PRESENT
    if has_incomplete:
        return DayStatusKind.INCOMPLETE
    # Too early in the day to call it an absence.
    if day == today.date() and today.hour < ABSENCE_CUTOFF_HOUR:
        return DayStatusKind.NOT_APPLICABLE
    return DayStatusKind.ABSENT
