from __future__ import annotations

from flask import Flask

from ..common import datetime_utils
from ..common.datetime_utils import local_date
from ..common.web import current_employee_id, login_required, ok
from ..container import Container
from .service import format_duration


def _session_to_ui(s) -> dict:
    return {
        "session_id": s.session_id,
        "date": s.work_date.strftime("%Y-%m-%d"),
        "status": s.status.value,
        "clock_in_time": s.clock_in_time.isoformat(),
        "clock_out_time": s.clock_out_time.isoformat() if s.clock_out_time else None,
        "duration_minutes": s.duration_minutes,
        "duration": format_duration(s.duration_minutes),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/wfh/today", methods=["GET"], endpoint="wfh_today")
    @login_required
    def wfh_today():
        today = local_date(datetime_utils.utc_now(), container.zone)
        session_ = container.wfh_service.get_today(current_employee_id(), today=today)
        return ok(session=_session_to_ui(session_) if session_ else None)

    @app.route("/api/wfh/clock-in", methods=["POST"], endpoint="wfh_clock_in")
    @login_required
    def wfh_clock_in():
        session_ = container.wfh_service.clock_in(current_employee_id(), now=datetime_utils.utc_now())
        return ok("WFH session started", session=_session_to_ui(session_))

    @app.route("/api/wfh/clock-out", methods=["POST"], endpoint="wfh_clock_out")
    @login_required
    def wfh_clock_out():
        session_ = container.wfh_service.clock_out(current_employee_id(), now=datetime_utils.utc_now())
        return ok("WFH session completed", session=_session_to_ui(session_))
