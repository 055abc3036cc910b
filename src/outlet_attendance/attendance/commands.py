from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common.identifiers import AttendanceId, EmployeeId, OutletId
from ..common.temporal import DateTime
from ..core.constants import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT

# Commands


@dataclass(frozen=True)
class CheckinCommand:
    employee_id: EmployeeId
    outlet_id: OutletId
    checkin_time: DateTime
    image_proof_path: str
    late_notes: Optional[str] = None
    late_present_proof_path: Optional[str] = None


@dataclass(frozen=True)
class CheckoutCommand:
    employee_id: EmployeeId
    checkout_time: DateTime
    image_proof_path: str


@dataclass(frozen=True)
class ApproveLateArrivalCommand:
    attendance_id: int
    approver_id: EmployeeId


@dataclass(frozen=True)
class RejectLateArrivalCommand:
    attendance_id: int
    approver_id: EmployeeId


@dataclass(frozen=True)
class RemoveAttendanceCommand:
    attendance_id: int


# Queries


@dataclass(frozen=True)
class GetTodayAttendanceQuery:
    employee_id: EmployeeId
    date: DateTime


@dataclass(frozen=True)
class GetAttendanceDetailsQuery:
    attendance_id: AttendanceId


@dataclass(frozen=True)
class GetOutletAttendancesQuery:
    outlet_id: OutletId
    start_date: DateTime
    end_date: DateTime
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_LIMIT


@dataclass(frozen=True)
class GetEmployeeAttendancesQuery:
    employee_id: EmployeeId
    start_date: DateTime
    end_date: DateTime


@dataclass(frozen=True)
class GetScheduledEmployeeAttendanceQuery:
    user_id: int
    date: DateTime


@dataclass(frozen=True)
class GetOutletRosterQuery:
    outlet_id: OutletId
    date: DateTime
