from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import timezone, tzinfo
from typing import Callable, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .bins.mysql_bin_repository import MySQLBinRepository
from .bins.repository import BinRepository
from .bins.service import BinService
from .common.request_queue import RequestQueue
from .core.constants import DEFAULT_MAX_RETRIES, DEFAULT_TEMP_EMAIL_DOMAIN
from .database.connection import DBConfig, DatabaseConnection
from .leaves.marker import LeaveMarker
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveRequestService
from .reports.service import AttendanceReportService
from .sites.mysql_site_repository import MySQLSiteRepository
from .sites.repository import SiteRepository
from .sites.service import SiteService
from .users.mysql_employee_repository import MySQLEmployeeRepository
from .users.repository import EmployeeRepository
from .users.service import AuthService, UserService
from .waste_forms.mysql_waste_form_repository import MySQLWasteFormRepository
from .waste_forms.repository import WasteFormRepository
from .waste_forms.service import WasteFormService
from .wfh.mysql_wfh_repository import MySQLWfhRepository
from .wfh.repository import WfhRepository
from .wfh.service import WfhService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    zone: tzinfo
    # None means the host's zone
    local_zone: Optional[tzinfo]

    employees_repo: EmployeeRepository
    sites_repo: SiteRepository
    attendance_repo: AttendanceRepository
    wfh_repo: WfhRepository
    leaves_repo: LeaveRepository
    bins_repo: BinRepository
    waste_forms_repo: WasteFormRepository
    request_queue: RequestQueue

    auth_service: AuthService
    user_service: UserService
    site_service: SiteService
    attendance_service: AttendanceService
    wfh_service: WfhService
    leave_service: LeaveRequestService
    leave_marker: LeaveMarker
    report_service: AttendanceReportService
    bin_service: BinService
    waste_form_service: WasteFormService


def wire_services(
    *,
    employees_repo: EmployeeRepository,
    sites_repo: SiteRepository,
    attendance_repo: AttendanceRepository,
    wfh_repo: WfhRepository,
    leaves_repo: LeaveRepository,
    bins_repo: BinRepository,
    waste_forms_repo: WasteFormRepository,
    conn: Optional[DatabaseConnection] = None,
    zone: tzinfo = timezone.utc,
    local_zone: Optional[tzinfo] = None,
    max_retries: int = DEFAULT_MAX_RETRIES,
    temp_email_domain: str = DEFAULT_TEMP_EMAIL_DOMAIN,
    sleep: Callable[[float], None] = time.sleep,
) -> Container:
    """Build services on top of any repository implementations (MySQL or in-memory)."""

    request_queue = RequestQueue(sleep=sleep)

    user_service = UserService(employees_repo, temp_email_domain=temp_email_domain)
    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        sites_repo,
        wfh_repo,
        leaves_repo,
        zone=zone,
        local_zone=local_zone,
        queue=request_queue,
        max_retries=max_retries,
    )

    return Container(
        conn=conn,
        zone=zone,
        local_zone=local_zone,
        employees_repo=employees_repo,
        sites_repo=sites_repo,
        attendance_repo=attendance_repo,
        wfh_repo=wfh_repo,
        leaves_repo=leaves_repo,
        bins_repo=bins_repo,
        waste_forms_repo=waste_forms_repo,
        request_queue=request_queue,
        auth_service=AuthService(employees_repo),
        user_service=user_service,
        site_service=SiteService(sites_repo),
        attendance_service=attendance_service,
        wfh_service=WfhService(wfh_repo, leaves_repo, zone=zone),
        leave_service=LeaveRequestService(leaves_repo),
        leave_marker=LeaveMarker(leaves_repo, wfh_repo, zone=zone),
        report_service=AttendanceReportService(attendance_service, user_service),
        bin_service=BinService(bins_repo, sites_repo),
        waste_form_service=WasteFormService(waste_forms_repo, bins_repo, sites_repo, employees_repo, zone=zone),
    )


def build_container(
    *,
    db_config: dict,
    zone: tzinfo = timezone.utc,
    local_zone: Optional[tzinfo] = None,
    max_retries: int = DEFAULT_MAX_RETRIES,
    temp_email_domain: str = DEFAULT_TEMP_EMAIL_DOMAIN,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_services(
        conn=conn,
        employees_repo=MySQLEmployeeRepository(conn),
        sites_repo=MySQLSiteRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        wfh_repo=MySQLWfhRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        bins_repo=MySQLBinRepository(conn),
        waste_forms_repo=MySQLWasteFormRepository(conn),
        zone=zone,
        local_zone=local_zone,
        max_retries=max_retries,
        temp_email_domain=temp_email_domain,
    )
