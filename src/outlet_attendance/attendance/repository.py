from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from ..common.identifiers import AttendanceId, EmployeeId, OutletId
from ..common.temporal import DateTime
from .model import Attendance


@dataclass(frozen=True)
class AttendancePage:
    items: Sequence[Attendance]
    total: int


class AttendanceRepository(Protocol):
    """Persistence port for the attendance aggregate.

    Only active records are returned by the finders; ``remove`` is a soft delete.
    """

    def next_identity(self) -> AttendanceId:
        raise NotImplementedError

    def save(self, attendance: Attendance) -> None:
        raise NotImplementedError

    def find_by_id(self, attendance_id: AttendanceId) -> Optional[Attendance]:
        raise NotImplementedError

    def find_today_attendance(self, employee_id: EmployeeId, date: DateTime) -> Optional[Attendance]:
        raise NotImplementedError

    def exists_for_employee_on_date(self, employee_id: EmployeeId, date: DateTime) -> bool:
        raise NotImplementedError

    def find_by_outlet_and_date_range(self, outlet_id: OutletId, start: DateTime, end: DateTime) -> Sequence[Attendance]:
        raise NotImplementedError

    def find_page_by_outlet_and_date_range(
        self,
        outlet_id: OutletId,
        start: DateTime,
        end: DateTime,
        *,
        offset: int,
        limit: int,
    ) -> AttendancePage:
        """Newest check-in first; ``total`` counts the whole range."""

        raise NotImplementedError

    def find_by_employee_and_date_range(
        self, employee_id: EmployeeId, start: DateTime, end: DateTime
    ) -> Sequence[Attendance]:
        raise NotImplementedError

    def update(self, attendance: Attendance) -> None:
        """Persist checkout and approval changes."""

        raise NotImplementedError

    def remove(self, attendance_id: AttendanceId) -> None:
        raise NotImplementedError
