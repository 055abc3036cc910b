from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from ..common import datetime_utils
from ..common.identifiers import AttendanceId, EmployeeId, OutletId
from ..common.temporal import DateTime
from ..core.aggregate import DomainEvent


@dataclass(frozen=True)
class AttendanceCreated(DomainEvent):
    """An employee checked in."""

    attendance_id: AttendanceId
    employee_id: EmployeeId
    outlet_id: OutletId
    checkin_time: DateTime
    is_late: bool
    occurred_at: datetime = field(default_factory=lambda: datetime_utils.now_local())


@dataclass(frozen=True)
class AttendanceCompleted(DomainEvent):
    """An employee checked out."""

    attendance_id: AttendanceId
    employee_id: EmployeeId
    outlet_id: OutletId
    checkin_time: DateTime
    checkout_time: DateTime
    occurred_at: datetime = field(default_factory=lambda: datetime_utils.now_local())


@dataclass(frozen=True)
class LateArrivalApproved(DomainEvent):
    attendance_id: AttendanceId
    employee_id: EmployeeId
    approver_id: EmployeeId
    occurred_at: datetime = field(default_factory=lambda: datetime_utils.now_local())


@dataclass(frozen=True)
class LateArrivalRejected(DomainEvent):
    attendance_id: AttendanceId
    employee_id: EmployeeId
    approver_id: EmployeeId
    occurred_at: datetime = field(default_factory=lambda: datetime_utils.now_local())
