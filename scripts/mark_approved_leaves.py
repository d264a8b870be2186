"""Nightly job: record today's approved leave and flag stale WFH sessions.

Schedule it shortly after midnight, e.g. ``5 0 * * * python scripts/mark_approved_leaves.py``.
"""

from __future__ import annotations

import argparse
import importlib
import json
import logging

from config import get_settings_module

from site_attendance.common.datetime_utils import get_zone, parse_iso_date, utc_now
from site_attendance.container import build_container

logger = logging.getLogger("mark_approved_leaves")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--date", help="Day to mark (YYYY-MM-DD); defaults to today in EVENT_TIMEZONE")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(logging, str(getattr(settings, "LOG_LEVEL", "INFO")).upper(), logging.INFO))

    zone = get_zone(getattr(settings, "EVENT_TIMEZONE", "UTC"))
    container = build_container(db_config=settings.DB_CONFIG, zone=zone)

    today = parse_iso_date(args.date) if args.date else None
    result = container.leave_marker.run(today=today, now=utc_now())
    logger.info("Done: %s", result)
    print(json.dumps(result))


if __name__ == "__main__":
    main()
