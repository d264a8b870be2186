from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from site_attendance.attendance.model import ClockEvent, LeaveDay
from site_attendance.bins.model import Bin
from site_attendance.container import wire_services
from site_attendance.core.enums import BinType, EventType, RequestStatus, Role, WfhStatus
from site_attendance.leaves.model import LeaveRequest
from site_attendance.sites.model import Site
from site_attendance.users.model import Employee
from site_attendance.waste_forms.model import WasteForm
from site_attendance.wfh.model import WfhSession

UTC = timezone.utc


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=UTC)


class InMemoryEmployees:
    def __init__(self):
        self._by_id: dict[int, Employee] = {}
        self._next_id = 1

    def add(self, *, role: Role = Role.FIELD_WORKER, password: str = "secret1", **overrides) -> Employee:
        employee_id = self._next_id
        self._next_id += 1
        username = overrides.pop("username", f"user{employee_id}")
        employee = Employee(
            employee_id=employee_id,
            employee_code=overrides.pop("employee_code", f"EMP{employee_id:03d}"),
            full_name=overrides.pop("full_name", f"Employee {employee_id}"),
            username=username,
            email=overrides.pop("email", f"{username}@example.com"),
            password_hash=generate_password_hash(password),
            role=role,
            **overrides,
        )
        self._by_id[employee_id] = employee
        return employee

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._by_id.get(int(employee_id))

    def get_by_username(self, username: str) -> Optional[Employee]:
        return next((e for e in self._by_id.values() if e.username == username), None)

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        return next((e for e in self._by_id.values() if e.employee_code == employee_code), None)

    def create_employee(self, *, employee_code, full_name, username, email, password_hash, role, phone, date_of_joining):
        employee_id = self._next_id
        self._next_id += 1
        self._by_id[employee_id] = Employee(
            employee_id=employee_id,
            employee_code=employee_code,
            full_name=full_name,
            username=username,
            email=email,
            password_hash=password_hash,
            role=role,
            phone=phone,
            date_of_joining=date_of_joining,
        )
        return employee_id

    def delete_by_id(self, employee_id: int) -> bool:
        return self._by_id.pop(int(employee_id), None) is not None

    def update_password(self, employee_id: int, password_hash: str) -> bool:
        employee = self._by_id.get(int(employee_id))
        if not employee:
            return False
        self._by_id[employee.employee_id] = replace(employee, password_hash=password_hash)
        return True

    def list_employees(self, *, role=None, active_only=True):
        rows = [
            e for e in self._by_id.values()
            if (not active_only or e.active) and (role is None or e.role == role)
        ]
        return sorted(rows, key=lambda e: e.full_name)


class InMemorySites:
    def __init__(self):
        self._by_id: dict[int, Site] = {}
        self._next_id = 1

    def add(self, name: str = "North Yard", qr_code_data: Optional[str] = None, active: bool = True) -> Site:
        site_id = self.create(
            name=name,
            address=f"{name} road",
            qr_code_data=qr_code_data or f"SITE-{self._next_id}",
            latitude=None,
            longitude=None,
        )
        if not active:
            self.set_active(site_id, active=False)
        return self._by_id[site_id]

    def get_by_id(self, site_id: int) -> Optional[Site]:
        return self._by_id.get(int(site_id))

    def get_active_by_qr(self, qr_code_data: str) -> Optional[Site]:
        return next((s for s in self._by_id.values() if s.qr_code_data == qr_code_data and s.active), None)

    def create(self, *, name, address, qr_code_data, latitude, longitude) -> int:
        site_id = self._next_id
        self._next_id += 1
        self._by_id[site_id] = Site(
            site_id=site_id,
            name=name,
            address=address,
            qr_code_data=qr_code_data,
            latitude=latitude,
            longitude=longitude,
        )
        return site_id

    def set_active(self, site_id: int, *, active: bool) -> bool:
        site = self._by_id.get(int(site_id))
        if not site:
            return False
        self._by_id[site.site_id] = replace(site, active=active)
        return True

    def list_all(self, *, include_inactive=True):
        return [s for s in self._by_id.values() if include_inactive or s.active]


class InMemoryAttendance:
    def __init__(self):
        self.events: list[ClockEvent] = []

    def add(self, employee_id: int, site_id: int, event_type: EventType, timestamp: datetime) -> None:
        self.create_event(employee_id=employee_id, site_id=site_id, event_type=event_type, timestamp=timestamp)

    def list_events(self, *, employee_id, start, end):
        rows = [e for e in self.events if e.employee_id == employee_id and start <= e.timestamp < end]
        return sorted(rows, key=lambda e: (e.timestamp, e.event_id))

    def create_event(self, *, employee_id, site_id, event_type, timestamp, latitude=None, longitude=None, notes=None):
        event_id = len(self.events) + 1
        self.events.append(
            ClockEvent(
                event_id=event_id,
                employee_id=employee_id,
                site_id=site_id,
                event_type=event_type,
                timestamp=timestamp,
                latitude=latitude,
                longitude=longitude,
                notes=notes,
            )
        )
        return event_id


class InMemoryWfh:
    def __init__(self):
        self.sessions: dict[tuple[int, date], WfhSession] = {}
        self._next_id = 1

    def get_for_date(self, *, employee_id, work_date):
        return self.sessions.get((int(employee_id), work_date))

    def list_for_range(self, *, employee_id, start_date, end_date):
        rows = [
            s for (eid, d), s in self.sessions.items()
            if eid == int(employee_id) and start_date <= d <= end_date
        ]
        return sorted(rows, key=lambda s: s.work_date)

    def create(self, *, employee_id, work_date, clock_in_time):
        session_id = self._next_id
        self._next_id += 1
        self.sessions[(int(employee_id), work_date)] = WfhSession(
            session_id=session_id,
            employee_id=int(employee_id),
            work_date=work_date,
            clock_in_time=clock_in_time,
            status=WfhStatus.ACTIVE,
        )
        return session_id

    def complete(self, *, session_id, clock_out_time, duration_minutes):
        for key, s in self.sessions.items():
            if s.session_id == session_id and s.status == WfhStatus.ACTIVE:
                self.sessions[key] = replace(
                    s,
                    clock_out_time=clock_out_time,
                    duration_minutes=duration_minutes,
                    status=WfhStatus.COMPLETE,
                )
                return True
        return False

    def mark_stale_incomplete(self, *, clock_in_before):
        count = 0
        for key, s in self.sessions.items():
            if s.status == WfhStatus.ACTIVE and s.clock_in_time < clock_in_before:
                self.sessions[key] = replace(s, status=WfhStatus.INCOMPLETE)
                count += 1
        return count


class InMemoryLeaves:
    def __init__(self):
        self.requests: dict[int, LeaveRequest] = {}
        self.leave_days: dict[tuple[int, date], LeaveDay] = {}
        self._next_id = 1

    def add_request(self, employee_id, request_type, start_date, end_date, status=RequestStatus.PENDING) -> LeaveRequest:
        request_id = self.create_request(
            employee_id=employee_id,
            request_type=request_type,
            start_date=start_date,
            end_date=end_date,
            reason="family",
        )
        self.requests[request_id] = replace(self.requests[request_id], status=status)
        return self.requests[request_id]

    def create_request(self, *, employee_id, request_type, start_date, end_date, reason):
        request_id = self._next_id
        self._next_id += 1
        self.requests[request_id] = LeaveRequest(
            request_id=request_id,
            employee_id=int(employee_id),
            request_type=request_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=utc(2024, 6, 1, 9, 0),
        )
        return request_id

    def get_request(self, *, request_id):
        return self.requests.get(int(request_id))

    def list_requests(self, *, status=None, employee_id=None, limit=200):
        rows = [
            r for r in self.requests.values()
            if (status is None or r.status == status) and (employee_id is None or r.employee_id == employee_id)
        ]
        rows.sort(key=lambda r: r.request_id, reverse=True)
        return [
            {
                "request_id": r.request_id,
                "employee_id": r.employee_id,
                "full_name": None,
                "employee_code": None,
                "request_type": r.request_type.value,
                "start_date": r.start_date,
                "end_date": r.end_date,
                "reason": r.reason,
                "status": r.status.value,
                "created_at": r.created_at,
                "approved_by": r.approved_by,
                "approved_by_name": None,
                "approved_at": r.approved_at,
                "rejection_reason": r.rejection_reason,
            }
            for r in rows[:limit]
        ]

    def decide(self, *, request_id, status, decided_by, decided_at, rejection_reason=None):
        req = self.requests.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        self.requests[req.request_id] = replace(
            req,
            status=status,
            approved_by=decided_by,
            approved_at=decided_at,
            rejection_reason=rejection_reason,
        )
        return True

    def count_pending(self):
        return sum(1 for r in self.requests.values() if r.status == RequestStatus.PENDING)

    def list_approved_covering(self, *, request_type, day, employee_id=None):
        return [
            r for r in self.requests.values()
            if r.status == RequestStatus.APPROVED
            and r.request_type == request_type
            and r.covers(day)
            and (employee_id is None or r.employee_id == employee_id)
        ]

    def upsert_leave_days(self, days):
        written = 0
        for d in days:
            key = (d.employee_id, d.work_date)
            if key not in self.leave_days:
                self.leave_days[key] = d
                written += 1
        return written

    def list_leave_days(self, *, employee_id, start_date, end_date):
        rows = [
            d for (eid, day), d in self.leave_days.items()
            if eid == int(employee_id) and start_date <= day <= end_date
        ]
        return sorted(rows, key=lambda d: d.work_date)


class InMemoryBins:
    def __init__(self):
        self._by_id: dict[int, Bin] = {}
        self._next_id = 1

    def add(self, site_id: int, bin_code: str = "B-01", *, qr_code_data: Optional[str] = None, active: bool = True) -> Bin:
        bin_id = self.create(
            site_id=site_id,
            bin_code=bin_code,
            bin_type=BinType.ORGANIC,
            capacity_kg=50,
            qr_code_data=qr_code_data or f"BIN-{site_id}-{bin_code}",
            location_details=None,
        )
        if not active:
            self._by_id[bin_id] = replace(self._by_id[bin_id], active=False)
        return self._by_id[bin_id]

    def get_by_id(self, bin_id: int) -> Optional[Bin]:
        return self._by_id.get(int(bin_id))

    def get_by_qr(self, qr_code_data: str) -> Optional[Bin]:
        return next((b for b in self._by_id.values() if b.qr_code_data == qr_code_data), None)

    def get_by_code(self, *, site_id, bin_code):
        return next((b for b in self._by_id.values() if b.site_id == site_id and b.bin_code == bin_code), None)

    def list_for_site(self, site_id):
        rows = [b for b in self._by_id.values() if b.site_id == int(site_id)]
        return sorted(rows, key=lambda b: b.bin_id, reverse=True)

    def create(self, *, site_id, bin_code, bin_type, capacity_kg, qr_code_data, location_details):
        bin_id = self._next_id
        self._next_id += 1
        self._by_id[bin_id] = Bin(
            bin_id=bin_id,
            site_id=int(site_id),
            bin_code=bin_code,
            bin_type=bin_type,
            capacity_kg=capacity_kg,
            qr_code_data=qr_code_data,
            location_details=location_details,
        )
        return bin_id

    def update(self, bin_id, *, bin_code, bin_type, capacity_kg, location_details):
        current = self._by_id.get(int(bin_id))
        if not current:
            return False
        self._by_id[current.bin_id] = replace(
            current, bin_code=bin_code, bin_type=bin_type, capacity_kg=capacity_kg, location_details=location_details
        )
        return True

    def delete(self, bin_id):
        return self._by_id.pop(int(bin_id), None) is not None


class InMemoryWasteForms:
    def __init__(self):
        self.forms: dict[int, WasteForm] = {}
        self._next_id = 1

    def create(self, *, employee_id, site_id, community, form_date, recorded_by, waste_segregated, total_bins_50kg,
               issues_identified, workflow_stage, scanned_bins, remarks, created_at):
        form_id = self._next_id
        self._next_id += 1
        self.forms[form_id] = WasteForm(
            form_id=form_id,
            employee_id=employee_id,
            site_id=site_id,
            community=community,
            form_date=form_date,
            recorded_by=recorded_by,
            waste_segregated=waste_segregated,
            total_bins_50kg=total_bins_50kg,
            issues_identified=tuple(issues_identified),
            workflow_stage=workflow_stage,
            scanned_bins=tuple(scanned_bins),
            remarks=remarks,
            created_at=created_at,
        )
        return form_id

    def get(self, form_id):
        return self.forms.get(int(form_id))

    def list_forms(self, *, employee_id=None, created_since=None, community=None, date_from=None, date_to=None,
                   recorded_by=None):
        rows = [
            f for f in self.forms.values()
            if (employee_id is None or f.employee_id == employee_id)
            and (created_since is None or f.created_at >= created_since)
            and (not community or f.community == community)
            and (date_from is None or f.form_date >= date_from)
            and (date_to is None or f.form_date <= date_to)
            and (not recorded_by or f.recorded_by == recorded_by)
        ]
        return sorted(rows, key=lambda f: (f.form_date, f.created_at, f.form_id), reverse=True)

    def delete(self, form_id):
        return self.forms.pop(int(form_id), None) is not None


@pytest.fixture
def fixed_now() -> datetime:
    # Wednesday afternoon
    return utc(2024, 6, 19, 15, 30)


@pytest.fixture
def employees() -> InMemoryEmployees:
    return InMemoryEmployees()


@pytest.fixture
def sites() -> InMemorySites:
    return InMemorySites()


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def wfh_repo() -> InMemoryWfh:
    return InMemoryWfh()


@pytest.fixture
def leaves_repo() -> InMemoryLeaves:
    return InMemoryLeaves()


@pytest.fixture
def bins_repo() -> InMemoryBins:
    return InMemoryBins()


@pytest.fixture
def waste_forms_repo() -> InMemoryWasteForms:
    return InMemoryWasteForms()


@pytest.fixture
def sleeps() -> list:
    return []


@pytest.fixture
def container(employees, sites, attendance_repo, wfh_repo, leaves_repo, bins_repo, waste_forms_repo, sleeps):
    return wire_services(
        employees_repo=employees,
        sites_repo=sites,
        attendance_repo=attendance_repo,
        wfh_repo=wfh_repo,
        leaves_repo=leaves_repo,
        bins_repo=bins_repo,
        waste_forms_repo=waste_forms_repo,
        local_zone=UTC,
        sleep=sleeps.append,
    )
