from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Optional, Sequence

from ..core.enums import AttendanceStatus, LateApprovalStatus
from ..employees.model import Employee
from .model import Attendance


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class AttendanceResult:
    """Flattened attendance returned by every handler."""

    id: int
    employee_id: int
    outlet_id: int
    checkin_time: datetime
    lateness: int
    status: AttendanceStatus
    is_active: bool
    checkout_time: Optional[datetime] = None
    working_hours: Optional[int] = None
    late_approval_status: Optional[LateApprovalStatus] = None

    @classmethod
    def from_domain(cls, attendance: Attendance) -> "AttendanceResult":
        checkout = attendance.checkout_details
        return cls(
            id=attendance.id.value,
            employee_id=attendance.employee_id.value,
            outlet_id=attendance.outlet_id.value,
            checkin_time=attendance.checkin_details.checkin_time.value,
            lateness=attendance.lateness.value,
            status=attendance.get_attendance_status(),
            is_active=attendance.is_active,
            checkout_time=checkout.checkout_time.value if checkout else None,
            working_hours=attendance.calculate_working_hours().value if checkout else None,
            late_approval_status=attendance.late_approval_status,
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["checkin_time"] = _iso(self.checkin_time)
        data["checkout_time"] = _iso(self.checkout_time)
        data["status"] = self.status.value
        data["late_approval_status"] = self.late_approval_status.value if self.late_approval_status else None
        return data


@dataclass(frozen=True)
class AttendanceItemView:
    """List row; lateness is pre-formatted for display."""

    id: int
    employee_id: int
    outlet_id: int
    checkin_time: datetime
    lateness: str
    status: AttendanceStatus
    checkout_time: Optional[datetime] = None
    late_approval_status: Optional[LateApprovalStatus] = None

    @classmethod
    def from_domain(cls, attendance: Attendance) -> "AttendanceItemView":
        checkout = attendance.checkout_details
        return cls(
            id=attendance.id.value,
            employee_id=attendance.employee_id.value,
            outlet_id=attendance.outlet_id.value,
            checkin_time=attendance.checkin_details.checkin_time.value,
            lateness=attendance.lateness.to_hours_and_minutes(),
            status=attendance.get_attendance_status(),
            checkout_time=checkout.checkout_time.value if checkout else None,
            late_approval_status=attendance.late_approval_status,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "outlet_id": self.outlet_id,
            "checkin_time": _iso(self.checkin_time),
            "lateness": self.lateness,
            "status": self.status.value,
            "checkout_time": _iso(self.checkout_time),
            "late_approval_status": self.late_approval_status.value if self.late_approval_status else None,
        }


@dataclass(frozen=True)
class AttendanceListView:
    data: Sequence[AttendanceItemView]
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def create(cls, attendances: Sequence[Attendance], total: int, page: int, limit: int) -> "AttendanceListView":
        return cls(
            data=[AttendanceItemView.from_domain(a) for a in attendances],
            total=int(total),
            page=int(page),
            limit=int(limit),
            total_pages=math.ceil(total / limit) if limit else 0,
        )

    def pagination(self) -> dict[str, int]:
        return {"total": self.total, "page": self.page, "limit": self.limit, "total_pages": self.total_pages}


@dataclass(frozen=True)
class RosterEntry:
    """One assigned employee and what they did on the roster day."""

    employee_id: int
    employee_name: str
    checked_in: bool
    checked_out: bool
    status: AttendanceStatus
    lateness: int
    attendance_id: Optional[int] = None

    @classmethod
    def build(cls, employee: Employee, attendance: Optional[Attendance]) -> "RosterEntry":
        if attendance is None:
            return cls(
                employee_id=employee.id.value,
                employee_name=employee.name,
                checked_in=False,
                checked_out=False,
                status=AttendanceStatus.ABSENT,
                lateness=0,
            )
        return cls(
            employee_id=employee.id.value,
            employee_name=employee.name,
            checked_in=True,
            checked_out=attendance.is_checked_out(),
            status=attendance.get_attendance_status(),
            lateness=attendance.lateness.value,
            attendance_id=attendance.id.value,
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data
