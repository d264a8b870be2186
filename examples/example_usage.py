"""Example: use the service layer without Flask.

Prints this month's attendance letters for every active employee.
"""

import importlib

from config import get_settings_module

from site_attendance.common.datetime_utils import get_local_zone, get_zone, local_now, utc_now
from site_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    zone = get_zone(getattr(settings, "EVENT_TIMEZONE", "UTC"))
    local_zone = get_local_zone(getattr(settings, "LOCAL_TIMEZONE", ""))
    container = build_container(db_config=settings.DB_CONFIG, zone=zone, local_zone=local_zone)

    now = utc_now()
    today = local_now(now, local_zone).date()
    grid = container.report_service.build_month_grid(today.year, today.month, now=now)
    print(grid.sheet_name)
    for row in grid.rows:
        print(f"{row.full_name:<25} {' '.join(row.letters)}  P={row.total_p} A={row.total_a} I={row.total_i}")


if __name__ == "__main__":
    main()
