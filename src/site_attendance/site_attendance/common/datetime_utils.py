from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import InvalidInput


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise InvalidInput(f"Invalid date (YYYY-MM-DD): {value!r}")


def parse_month(value: str) -> Tuple[int, int]:
    """Parse a YYYY-MM string into (year, month)."""
    try:
        parsed = datetime.strptime((value or "").strip(), "%Y-%m")
    except (TypeError, ValueError):
        raise InvalidInput(f"Invalid month (YYYY-MM): {value!r}")
    return parsed.year, parsed.month


def parse_timestamp(value) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Naive values are taken as UTC, which is how the data store writes them.
    """

    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, str):
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            ts = datetime.fromisoformat(raw)
        except ValueError:
            raise InvalidInput(f"Invalid timestamp: {value!r}")
    else:
        raise InvalidInput(f"Invalid timestamp: {value!r}")

    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def validate_month(year: int, month: int) -> None:
    if not isinstance(year, int) or not isinstance(month, int) or isinstance(year, bool):
        raise InvalidInput(f"Invalid month: {year!r}-{month!r}")
    if not 1 <= month <= 12 or not 1 <= year <= 9999:
        raise InvalidInput(f"Invalid month: {year}-{month}")


def days_in_month(year: int, month: int) -> int:
    validate_month(year, month)
    return calendar.monthrange(year, month)[1]


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last calendar day of the month."""
    last = days_in_month(year, month)
    return date(year, month, 1), date(year, month, last)


def week_start(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def get_zone(name: Optional[str]) -> tzinfo:
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        raise InvalidInput(f"Unknown time zone: {name!r}")


def local_date(ts: datetime, zone: tzinfo = timezone.utc) -> date:
    """Calendar day a UTC timestamp falls on in ``zone``."""
    return parse_timestamp(ts).astimezone(zone).date()


def utc_now() -> datetime:
    """Current aware UTC time.

    Note: Wrapped so tests can patch it.
    """
    return datetime.now(timezone.utc)


def get_local_zone(name: Optional[str]) -> Optional[tzinfo]:
    """Zone for the evaluator's wall clock; ``None`` (blank setting) means the host's zone."""
    if not name or not name.strip():
        return None
    return get_zone(name.strip())


def local_now(now, zone: Optional[tzinfo] = None) -> datetime:
    """``now`` as evaluator wall-clock time: in ``zone``, or the host's zone when ``None``."""
    return parse_timestamp(now).astimezone(zone)
