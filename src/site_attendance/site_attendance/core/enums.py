from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Employee roles. Field roles work six-day weeks."""

    FIELD_WORKER = "field_worker"
    FIELD_SUPERVISOR = "field_supervisor"
    MANAGER = "manager"
    ADMIN = "admin"
    INTERN = "intern"
    OFFICE_EMPLOYEE = "office_employee"

    @property
    def is_field_role(self) -> bool:
        return self in FIELD_ROLES

    @property
    def can_approve(self) -> bool:
        return self in {Role.ADMIN, Role.MANAGER}


FIELD_ROLES = frozenset({Role.FIELD_WORKER, Role.FIELD_SUPERVISOR})


class EventType(str, Enum):
    CLOCK_IN = "clock_in"
    CLOCK_OUT = "clock_out"


class WfhStatus(str, Enum):
    ACTIVE = "active"
    COMPLETE = "complete"
    INCOMPLETE = "incomplete"


class DayStatusKind(str, Enum):
    """Derived per-day attendance status."""

    PRESENT = "present"
    ABSENT = "absent"
    INCOMPLETE = "incomplete"
    LEAVE = "leave"
    WFH = "wfh"
    INCOMPLETE_WFH = "incomplete_wfh"
    NOT_APPLICABLE = "not_applicable"


class RequestType(str, Enum):
    LEAVE = "leave"
    WFH = "wfh"


class RequestStatus(str, Enum):
    """Approval workflow state of a leave/WFH request."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class BinType(str, Enum):
    ORGANIC = "organic"
    RECYCLABLE = "recyclable"
    NON_RECYCLABLE = "non_recyclable"
    HAZARDOUS = "hazardous"
    COMPOST = "compost"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").upper()


class WorkflowStage(str, Enum):
    """Composter stage a bin is scanned for on a waste form."""

    START_LOADED = "start_loaded"
    HARVEST = "harvest"
