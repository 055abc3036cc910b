from __future__ import annotations

from typing import List, Optional

from ..common.identifiers import EmployeeId
from ..core.constants import MAX_PAGE_LIMIT
from ..core.exceptions import AttendanceNotFoundError, EmployeeNotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .commands import (
    GetAttendanceDetailsQuery,
    GetEmployeeAttendancesQuery,
    GetOutletAttendancesQuery,
    GetOutletRosterQuery,
    GetScheduledEmployeeAttendanceQuery,
    GetTodayAttendanceQuery,
)
from .repository import AttendanceRepository
from .results import AttendanceListView, AttendanceResult, RosterEntry


class GetTodayAttendanceQueryHandler:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def handle(self, query: GetTodayAttendanceQuery) -> Optional[AttendanceResult]:
        attendance = self._attendance.find_today_attendance(query.employee_id, query.date)
        return AttendanceResult.from_domain(attendance) if attendance else None


class GetAttendanceDetailsQueryHandler:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def handle(self, query: GetAttendanceDetailsQuery) -> AttendanceResult:
        attendance = self._attendance.find_by_id(query.attendance_id)
        if attendance is None:
            raise AttendanceNotFoundError(query.attendance_id.value)
        return AttendanceResult.from_domain(attendance)


class GetOutletAttendancesQueryHandler:
    """Paginated outlet listing; offset/limit are applied by the repository."""

    def __init__(self, attendance: AttendanceRepository, *, max_limit: int = MAX_PAGE_LIMIT):
        self._attendance = attendance
        self._max_limit = int(max_limit)

    def handle(self, query: GetOutletAttendancesQuery) -> AttendanceListView:
        page, limit = int(query.page), int(query.limit)
        if page < 1:
            raise ValidationError("page must be >= 1")
        if limit < 1 or limit > self._max_limit:
            raise ValidationError(f"limit must be between 1 and {self._max_limit}")
        if query.end_date.is_before(query.start_date):
            raise ValidationError("end_date cannot be before start_date")

        result = self._attendance.find_page_by_outlet_and_date_range(
            query.outlet_id,
            query.start_date,
            query.end_date,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return AttendanceListView.create(result.items, result.total, page, limit)


class GetEmployeeAttendancesQueryHandler:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def handle(self, query: GetEmployeeAttendancesQuery) -> List[AttendanceResult]:
        if query.end_date.is_before(query.start_date):
            raise ValidationError("end_date cannot be before start_date")
        rows = self._attendance.find_by_employee_and_date_range(query.employee_id, query.start_date, query.end_date)
        return [AttendanceResult.from_domain(a) for a in rows]


class GetScheduledEmployeeAttendanceQueryHandler:
    """Resolve the employee scheduled for a user's outlet, then load their day."""

    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository):
        self._attendance = attendance
        self._employees = employees

    def handle(self, query: GetScheduledEmployeeAttendanceQuery) -> Optional[AttendanceResult]:
        employee_id: Optional[EmployeeId] = self._employees.find_scheduled_employee_by_user_id(
            int(query.user_id), query.date
        )
        if employee_id is None:
            raise EmployeeNotFoundError(
                "No employee is scheduled for this outlet today",
                {"user_id": int(query.user_id), "date": query.date.date().isoformat()},
            )

        attendance = self._attendance.find_today_attendance(employee_id, query.date)
        return AttendanceResult.from_domain(attendance) if attendance else None


class GetOutletRosterQueryHandler:
    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository):
        self._attendance = attendance
        self._employees = employees

    def handle(self, query: GetOutletRosterQuery) -> List[RosterEntry]:
        employees = self._employees.find_employees_assigned_to_outlet(query.outlet_id, query.date)
        return [
            RosterEntry.build(employee, self._attendance.find_today_attendance(employee.id, query.date))
            for employee in employees
        ]
