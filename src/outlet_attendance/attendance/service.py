from __future__ import annotations

from typing import Optional

from ..core.constants import MAX_PAGE_LIMIT
from ..core.event_bus import EventPublisher
from ..employees.repository import EmployeeRepository
from ..schedules.repository import ScheduleRepository
from .handlers import (
    ApproveLateArrivalCommandHandler,
    CheckinCommandHandler,
    CheckoutCommandHandler,
    DuplicateAttendanceChecker,
    RejectLateArrivalCommandHandler,
    RemoveAttendanceCommandHandler,
)
from .query_handlers import (
    GetAttendanceDetailsQueryHandler,
    GetEmployeeAttendancesQueryHandler,
    GetOutletAttendancesQueryHandler,
    GetOutletRosterQueryHandler,
    GetScheduledEmployeeAttendanceQueryHandler,
    GetTodayAttendanceQueryHandler,
)
from .repository import AttendanceRepository


class AttendanceApplicationService:
    """Facade used by the transport layer: one accessor per command/query handler.

    ``service.checkin.handle(CheckinCommand(...))``
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        schedules: ScheduleRepository,
        publisher: Optional[EventPublisher] = None,
        *,
        allow_late_decision_reversal: bool = False,
        max_page_limit: int = MAX_PAGE_LIMIT,
    ):
        duplicate_checker = DuplicateAttendanceChecker(attendance)

        self._checkin = CheckinCommandHandler(attendance, employees, schedules, duplicate_checker, publisher)
        self._checkout = CheckoutCommandHandler(attendance, publisher)
        self._approve_late = ApproveLateArrivalCommandHandler(
            attendance, publisher, allow_reversal=allow_late_decision_reversal
        )
        self._reject_late = RejectLateArrivalCommandHandler(
            attendance, publisher, allow_reversal=allow_late_decision_reversal
        )
        self._remove = RemoveAttendanceCommandHandler(attendance, publisher)

        self._get_today_attendance = GetTodayAttendanceQueryHandler(attendance)
        self._get_attendance_details = GetAttendanceDetailsQueryHandler(attendance)
        self._get_outlet_attendances = GetOutletAttendancesQueryHandler(attendance, max_limit=max_page_limit)
        self._get_employee_attendances = GetEmployeeAttendancesQueryHandler(attendance)
        self._get_scheduled_employee_attendance = GetScheduledEmployeeAttendanceQueryHandler(attendance, employees)
        self._get_outlet_roster = GetOutletRosterQueryHandler(attendance, employees)

    # Commands

    @property
    def checkin(self) -> CheckinCommandHandler:
        return self._checkin

    @property
    def checkout(self) -> CheckoutCommandHandler:
        return self._checkout

    @property
    def approve_late(self) -> ApproveLateArrivalCommandHandler:
        return self._approve_late

    @property
    def reject_late(self) -> RejectLateArrivalCommandHandler:
        return self._reject_late

    @property
    def remove(self) -> RemoveAttendanceCommandHandler:
        return self._remove

    # Queries

    @property
    def get_today_attendance(self) -> GetTodayAttendanceQueryHandler:
        return self._get_today_attendance

    @property
    def get_attendance_details(self) -> GetAttendanceDetailsQueryHandler:
        return self._get_attendance_details

    @property
    def get_outlet_attendances(self) -> GetOutletAttendancesQueryHandler:
        return self._get_outlet_attendances

    @property
    def get_employee_attendances(self) -> GetEmployeeAttendancesQueryHandler:
        return self._get_employee_attendances

    @property
    def get_scheduled_employee_attendance(self) -> GetScheduledEmployeeAttendanceQueryHandler:
        return self._get_scheduled_employee_attendance

    @property
    def get_outlet_roster(self) -> GetOutletRosterQueryHandler:
        return self._get_outlet_roster
