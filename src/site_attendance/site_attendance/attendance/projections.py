from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Optional

from ..core.enums import DayStatusKind
from .model import DayStatus

NOT_APPLICABLE_MARK = "—"

GLYPHS = {
    DayStatusKind.PRESENT: "P",
    DayStatusKind.INCOMPLETE: "I",
    DayStatusKind.ABSENT: "A",
    DayStatusKind.LEAVE: "L",
    DayStatusKind.WFH: "W",
    DayStatusKind.INCOMPLETE_WFH: "I-W",
    DayStatusKind.NOT_APPLICABLE: NOT_APPLICABLE_MARK,
}

# Spreadsheet column scheme {P, A, I, L, W, —}
EXPORT_LETTERS = {
    DayStatusKind.PRESENT: "P",
    DayStatusKind.INCOMPLETE: "I",
    DayStatusKind.ABSENT: "A",
    DayStatusKind.LEAVE: "L",
    DayStatusKind.WFH: "W",
    DayStatusKind.INCOMPLETE_WFH: "I",
    DayStatusKind.NOT_APPLICABLE: NOT_APPLICABLE_MARK,
}

CSS_CLASSES = {
    DayStatusKind.PRESENT: "bg-success",
    DayStatusKind.INCOMPLETE: "bg-warning text-dark",
    DayStatusKind.ABSENT: "bg-danger",
    DayStatusKind.LEAVE: "bg-secondary",
    DayStatusKind.WFH: "bg-primary",
    DayStatusKind.INCOMPLETE_WFH: "bg-warning text-dark",
    DayStatusKind.NOT_APPLICABLE: "bg-light text-muted",
}

LABELS = {
    DayStatusKind.PRESENT: "Present",
    DayStatusKind.INCOMPLETE: "Incomplete",
    DayStatusKind.ABSENT: "Absent",
    DayStatusKind.LEAVE: "Leave",
    DayStatusKind.WFH: "Work from home",
    DayStatusKind.INCOMPLETE_WFH: "Incomplete WFH",
    DayStatusKind.NOT_APPLICABLE: "Not applicable",
}


def glyph(status: DayStatusKind) -> str:
    return GLYPHS[status]


def export_letter(status: DayStatusKind) -> str:
    return EXPORT_LETTERS[status]


def _fmt_time(value: Optional[datetime], zone: Optional[tzinfo]) -> str:
    if value is None:
        return "-"
    if zone is not None and value.tzinfo is not None:
        value = value.astimezone(zone)
    return value.strftime("%H:%M")


def to_detail_row(day: DayStatus, *, zone: Optional[tzinfo] = None) -> dict:
    """Calendar detail cell for one day."""

    return {
        "date": day.work_date.strftime("%Y-%m-%d"),
        "status": day.status.value,
        "glyph": glyph(day.status),
        "label": LABELS[day.status],
        "css_class": CSS_CLASSES[day.status],
        "clock_in": _fmt_time(day.clock_in, zone),
        "clock_out": _fmt_time(day.clock_out, zone),
        "hours_worked": round(day.hours_worked, 2),
    }
