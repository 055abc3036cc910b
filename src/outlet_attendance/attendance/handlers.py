from __future__ import annotations

import logging
from typing import Optional

from ..common.identifiers import AttendanceId, EmployeeId
from ..common.temporal import DateTime
from ..core.event_bus import EventPublisher
from ..core.exceptions import (
    AttendanceAlreadyExistsError,
    AttendanceNotFoundError,
    EmployeeNotAssignedError,
    EmployeeNotFoundError,
    NoCheckinRecordError,
    NoScheduleFoundError,
)
from ..employees.repository import EmployeeRepository
from ..schedules.repository import ScheduleRepository
from .commands import (
    ApproveLateArrivalCommand,
    CheckinCommand,
    CheckoutCommand,
    RejectLateArrivalCommand,
    RemoveAttendanceCommand,
)
from .model import Attendance
from .repository import AttendanceRepository
from .results import AttendanceResult
from .values import ImageProof

logger = logging.getLogger(__name__)


class DuplicateAttendanceChecker:
    """Domain service: one attendance per employee per calendar day.

    This is a read-then-write check; concurrent check-ins can both pass it, so the
    storage layer has to enforce uniqueness as well.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def ensure_no_attendance_on(self, employee_id: EmployeeId, moment: DateTime) -> None:
        if self._attendance.exists_for_employee_on_date(employee_id, moment):
            raise AttendanceAlreadyExistsError(employee_id.value, moment.date())


class _AttendanceCommandHandler:
    def __init__(self, attendance: AttendanceRepository, publisher: Optional[EventPublisher] = None):
        self._attendance = attendance
        self._publisher = publisher

    def _publish(self, attendance: Attendance) -> None:
        # After the write only: subscribers see committed state.
        events = attendance.pull_events()
        if not self._publisher or not events:
            return
        try:
            self._publisher.publish_all(events)
        except Exception:
            logger.exception("Failed to publish %d event(s) for attendance %s", len(events), attendance.id)

    def _load(self, attendance_id: int) -> Attendance:
        attendance = self._attendance.find_by_id(AttendanceId.from_number(attendance_id))
        if attendance is None:
            raise AttendanceNotFoundError(attendance_id)
        return attendance


class CheckinCommandHandler(_AttendanceCommandHandler):
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        schedules: ScheduleRepository,
        duplicate_checker: DuplicateAttendanceChecker,
        publisher: Optional[EventPublisher] = None,
    ):
        super().__init__(attendance, publisher)
        self._employees = employees
        self._schedules = schedules
        self._duplicates = duplicate_checker

    def handle(self, command: CheckinCommand) -> AttendanceResult:
        employee_id, outlet_id, checkin_time = command.employee_id, command.outlet_id, command.checkin_time

        if self._employees.find_by_id(employee_id) is None:
            raise EmployeeNotFoundError(details={"employee_id": employee_id.value})

        if not self._employees.is_employee_assigned_to_outlet(employee_id, outlet_id, checkin_time):
            raise EmployeeNotAssignedError(employee_id.value, outlet_id.value)

        self._duplicates.ensure_no_attendance_on(employee_id, checkin_time)

        schedule = self._schedules.find_active_schedule_for_outlet(outlet_id, checkin_time)
        if schedule is None:
            raise NoScheduleFoundError(outlet_id.value, checkin_time.get_week_day().value)

        attendance = Attendance.create(
            employee_id,
            outlet_id,
            checkin_time,
            ImageProof.from_path(command.image_proof_path),
            schedule.scheduled_checkin_on(checkin_time),
            command.late_notes,
            command.late_present_proof_path,
            attendance_id=self._attendance.next_identity(),
        )

        self._attendance.save(attendance)
        logger.info(
            "Check-in recorded: attendance=%s employee=%s outlet=%s lateness=%s",
            attendance.id, employee_id, outlet_id, attendance.lateness,
        )
        self._publish(attendance)
        return AttendanceResult.from_domain(attendance)


class CheckoutCommandHandler(_AttendanceCommandHandler):
    def handle(self, command: CheckoutCommand) -> AttendanceResult:
        attendance = self._attendance.find_today_attendance(command.employee_id, command.checkout_time)
        if attendance is None:
            raise NoCheckinRecordError()

        attendance.checkout(command.checkout_time, ImageProof.from_path(command.image_proof_path))
        self._attendance.update(attendance)
        logger.info("Check-out recorded: attendance=%s employee=%s", attendance.id, command.employee_id)

        self._publish(attendance)
        return AttendanceResult.from_domain(attendance)


class _LateDecisionHandler(_AttendanceCommandHandler):
    def __init__(
        self,
        attendance: AttendanceRepository,
        publisher: Optional[EventPublisher] = None,
        *,
        allow_reversal: bool = False,
    ):
        super().__init__(attendance, publisher)
        self._allow_reversal = bool(allow_reversal)


class ApproveLateArrivalCommandHandler(_LateDecisionHandler):
    def handle(self, command: ApproveLateArrivalCommand) -> AttendanceResult:
        attendance = self._load(command.attendance_id)

        attendance.approve_late_arrival(command.approver_id, allow_reversal=self._allow_reversal)
        self._attendance.update(attendance)
        logger.info("Late arrival approved: attendance=%s approver=%s", attendance.id, command.approver_id)

        self._publish(attendance)
        return AttendanceResult.from_domain(attendance)


class RejectLateArrivalCommandHandler(_LateDecisionHandler):
    def handle(self, command: RejectLateArrivalCommand) -> AttendanceResult:
        attendance = self._load(command.attendance_id)

        attendance.reject_late_arrival(command.approver_id, allow_reversal=self._allow_reversal)
        self._attendance.update(attendance)
        logger.info("Late arrival rejected: attendance=%s approver=%s", attendance.id, command.approver_id)

        self._publish(attendance)
        return AttendanceResult.from_domain(attendance)


class RemoveAttendanceCommandHandler(_AttendanceCommandHandler):
    """Soft delete: the record stays, its derived status becomes ABSENT."""

    def handle(self, command: RemoveAttendanceCommand) -> AttendanceResult:
        attendance = self._load(command.attendance_id)

        attendance.mark_inactive()
        self._attendance.remove(attendance.id)
        logger.info("Attendance removed: attendance=%s", attendance.id)

        return AttendanceResult.from_domain(attendance)
