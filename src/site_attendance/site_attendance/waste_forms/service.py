from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Iterable, List, Mapping, Optional, Sequence

from ..bins.repository import BinRepository
from ..common.datetime_utils import days_in_month, local_date, parse_timestamp
from ..core.constants import OTHER_OPTION, WASTE_FORM_PERIODS, WASTE_ISSUE_OPTIONS, WASTE_REMARK_OPTIONS
from ..core.enums import Role, WorkflowStage
from ..core.exceptions import AuthorizationError, ValidationError
from ..sites.repository import SiteRepository
from ..users.repository import EmployeeRepository
from .model import ScannedBin, WasteForm
from .repository import WasteFormRepository

logger = logging.getLogger(__name__)


def parse_stage(value) -> WorkflowStage:
    if isinstance(value, WorkflowStage):
        return value
    try:
        return WorkflowStage(str(value or "").strip())
    except ValueError:
        raise ValidationError(f"Unknown composter stage: {value!r}")


def collect_issues(selected: Iterable[str], other_issue: Optional[str]) -> List[str]:
    """Chosen issue options plus the free-text one; "Other" itself is never stored."""
    issues: List[str] = []
    for issue in selected or ():
        issue = (issue or "").strip()
        if not issue or issue == OTHER_OPTION:
            continue
        if issue not in WASTE_ISSUE_OPTIONS:
            raise ValidationError(f"Unknown issue: {issue!r}")
        if issue not in issues:
            issues.append(issue)
    extra = (other_issue or "").strip()
    if extra and extra not in issues:
        issues.append(extra)
    return issues


def resolve_remarks(remarks: Optional[str], other_remark: Optional[str]) -> Optional[str]:
    remarks = (remarks or "").strip()
    if remarks == OTHER_OPTION:
        return (other_remark or "").strip() or OTHER_OPTION
    if not remarks:
        return None
    if remarks not in WASTE_REMARK_OPTIONS:
        raise ValidationError(f"Unknown remark: {remarks!r}")
    return remarks


def workflow_stage_for(scanned: Sequence[ScannedBin]) -> WorkflowStage:
    if any(b.stage == WorkflowStage.HARVEST for b in scanned):
        return WorkflowStage.HARVEST
    return WorkflowStage.START_LOADED


def _one_month_back(day: date) -> date:
    year, month = (day.year, day.month - 1) if day.month > 1 else (day.year - 1, 12)
    return date(year, month, min(day.day, days_in_month(year, month)))


class WasteFormService:
    """Use case: submit and review waste-management field forms.

    A form belongs to one community (site). Every bin scanned on it must be an
    active bin of that site, and no bin may appear twice.
    """

    def __init__(
        self,
        forms: WasteFormRepository,
        bins: BinRepository,
        sites: SiteRepository,
        employees: EmployeeRepository,
        *,
        zone: tzinfo = timezone.utc,
    ):
        self._forms = forms
        self._bins = bins
        self._sites = sites
        self._employees = employees
        self._zone = zone

    @staticmethod
    def options() -> dict:
        return {
            "issues": list(WASTE_ISSUE_OPTIONS) + [OTHER_OPTION],
            "remarks": list(WASTE_REMARK_OPTIONS) + [OTHER_OPTION],
            "stages": [s.value for s in WorkflowStage],
            "periods": list(WASTE_FORM_PERIODS),
        }

    def _scan_bins(self, scans: Sequence[Mapping], site_id: Optional[int]) -> List[ScannedBin]:
        scanned: List[ScannedBin] = []
        for scan in scans:
            stage = parse_stage(scan.get("stage"))
            found = self._bins.get_by_qr((scan.get("qr_data") or "").strip())
            if not found or not found.active:
                raise ValidationError("Invalid bin QR code")
            if site_id is None:
                # The first bin scanned picks the community.
                site_id = found.site_id
            if found.site_id != site_id:
                raise ValidationError(f"Bin {found.bin_code} belongs to a different site")
            if any(b.bin_id == found.bin_id for b in scanned):
                raise ValidationError(f"Bin {found.bin_code} has already been scanned")
            scanned.append(ScannedBin(bin_id=found.bin_id, bin_code=found.bin_code, site_id=found.site_id, stage=stage))
        return scanned

    def submit(
        self,
        employee_id: int,
        *,
        scanned_bins: Sequence[Mapping],
        now: datetime,
        site_id: Optional[int] = None,
        waste_segregated: bool = False,
        total_bins_50kg=0,
        issues: Iterable[str] = (),
        other_issue: Optional[str] = None,
        remarks: Optional[str] = None,
        other_remark: Optional[str] = None,
    ) -> WasteForm:
        now = parse_timestamp(now)
        employee = self._employees.get_by_id(int(employee_id))
        if not employee or not employee.active:
            raise ValidationError("Employee information not found")
        if not scanned_bins:
            raise ValidationError("Please scan at least one bin")

        try:
            total = int(total_bins_50kg or 0)
        except (TypeError, ValueError):
            raise ValidationError("Total bins must be a whole number")
        if total < 0:
            raise ValidationError("Total bins cannot be negative")

        if site_id is not None:
            site_id = int(site_id)
        scanned = self._scan_bins(scanned_bins, site_id)
        site = self._sites.get_by_id(scanned[0].site_id)
        if not site or not site.active:
            raise ValidationError("Site not found or inactive")

        issue_list = collect_issues(issues, other_issue)
        remark = resolve_remarks(remarks, other_remark)
        stage = workflow_stage_for(scanned)
        form_date = local_date(now, self._zone)

        form_id = self._forms.create(
            employee_id=employee.employee_id,
            site_id=site.site_id,
            community=site.name,
            form_date=form_date,
            recorded_by=employee.full_name,
            waste_segregated=bool(waste_segregated),
            total_bins_50kg=total,
            issues_identified=issue_list,
            workflow_stage=stage,
            scanned_bins=scanned,
            remarks=remark,
            created_at=now,
        )
        logger.info("Waste form %s submitted by %s for %s (%d bins)", form_id, employee.employee_code, site.name, len(scanned))
        return WasteForm(
            form_id=form_id,
            employee_id=employee.employee_id,
            site_id=site.site_id,
            community=site.name,
            form_date=form_date,
            recorded_by=employee.full_name,
            waste_segregated=bool(waste_segregated),
            total_bins_50kg=total,
            issues_identified=tuple(issue_list),
            workflow_stage=stage,
            scanned_bins=tuple(scanned),
            remarks=remark,
            created_at=now,
        )

    def period_start(self, period: str, now: datetime) -> Optional[datetime]:
        """Earliest submission time a period filter keeps; ``None`` for "all"."""
        period = (period or "all").strip().lower()
        if period not in WASTE_FORM_PERIODS:
            raise ValidationError(f"Unknown period: {period!r}")
        now = parse_timestamp(now)
        if period == "today":
            start = datetime.combine(local_date(now, self._zone), time.min).replace(tzinfo=self._zone)
            return start.astimezone(timezone.utc)
        if period == "week":
            return now - timedelta(days=7)
        if period == "month":
            return datetime.combine(_one_month_back(now.date()), now.time(), tzinfo=timezone.utc)
        return None

    def list_for_employee(self, employee_id: int, *, period: str = "all", now: datetime) -> List[WasteForm]:
        return list(
            self._forms.list_forms(employee_id=int(employee_id), created_since=self.period_start(period, now))
        )

    def list_for_admin(
        self,
        *,
        community: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        recorded_by: Optional[str] = None,
    ) -> List[WasteForm]:
        if date_from and date_to and date_to < date_from:
            raise ValidationError("End date must be on or after start date")
        return list(
            self._forms.list_forms(
                community=(community or "").strip() or None,
                date_from=date_from,
                date_to=date_to,
                recorded_by=(recorded_by or "").strip() or None,
            )
        )

    def delete_form(self, *, current_role: Role, form_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can delete waste forms")
        if not self._forms.get(int(form_id)):
            raise ValidationError("Waste form not found")
        self._forms.delete(int(form_id))
        logger.info("Waste form %s deleted", form_id)
