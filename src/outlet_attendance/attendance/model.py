from __future__ import annotations

from datetime import time
from typing import Optional, Union

from ..common.identifiers import AttendanceId, EmployeeId, OutletId
from ..common.temporal import DateTime, Minutes
from ..core.aggregate import AggregateRoot
from ..core.enums import AttendanceStatus, LateApprovalStatus
from ..core.exceptions import (
    AlreadyCheckedOutError,
    InvalidCheckoutTimeError,
    InvalidLateApprovalError,
    NoCheckinRecordError,
    ValidationError,
)
from .events import AttendanceCompleted, AttendanceCreated, LateArrivalApproved, LateArrivalRejected
from .values import CheckinDetails, CheckoutDetails, ImageProof


class Attendance(AggregateRoot):
    """Aggregate root: one employee's attendance for one workday.

    All state changes go through the methods below; none of them touch storage.
    Lifecycle is derived rather than stored:

    - checked in (no check-out details) -> completed (check-out details present)
    - late approval on the check-in: PENDING -> APPROVED | REJECTED
    - active -> inactive (soft delete, one-way)
    """

    def __init__(
        self,
        attendance_id: AttendanceId,
        employee_id: EmployeeId,
        outlet_id: OutletId,
        checkin: CheckinDetails,
        checkout: Optional[CheckoutDetails] = None,
        is_active: bool = True,
    ):
        super().__init__()
        self._id = attendance_id
        self._employee_id = employee_id
        self._outlet_id = outlet_id
        self._checkin = checkin
        self._checkout = checkout
        self._work_date = checkin.checkin_time.start_of_day()
        self._is_active = bool(is_active)

    @classmethod
    def create(
        cls,
        employee_id: EmployeeId,
        outlet_id: OutletId,
        checkin_time: DateTime,
        image_proof: ImageProof,
        scheduled_time: Union[DateTime, time],
        late_notes: Optional[str] = None,
        late_present_proof: Optional[str] = None,
        *,
        attendance_id: Optional[AttendanceId] = None,
    ) -> "Attendance":
        checkin = CheckinDetails.create(checkin_time, image_proof, scheduled_time, late_notes, late_present_proof)
        attendance = cls(attendance_id or AttendanceId.generate(), employee_id, outlet_id, checkin)
        attendance.raise_event(
            AttendanceCreated(
                attendance_id=attendance.id,
                employee_id=employee_id,
                outlet_id=outlet_id,
                checkin_time=checkin_time,
                is_late=checkin.is_late(),
            )
        )
        return attendance

    @classmethod
    def from_persistence(
        cls,
        attendance_id: AttendanceId,
        employee_id: EmployeeId,
        outlet_id: OutletId,
        checkin: CheckinDetails,
        checkout: Optional[CheckoutDetails] = None,
        is_active: bool = True,
    ) -> "Attendance":
        """Rebuild a stored record; raises no event. Work date is re-derived from the check-in."""
        return cls(attendance_id, employee_id, outlet_id, checkin, checkout, is_active)

    # Commands

    def checkout(self, checkout_time: DateTime, image_proof: ImageProof) -> AttendanceCompleted:
        self._validate_checkout(checkout_time)
        self._checkout = CheckoutDetails.create(checkout_time, image_proof)
        return self.raise_event(
            AttendanceCompleted(
                attendance_id=self._id,
                employee_id=self._employee_id,
                outlet_id=self._outlet_id,
                checkin_time=self._checkin.checkin_time,
                checkout_time=checkout_time,
            )
        )

    def approve_late_arrival(self, approver_id: EmployeeId, *, allow_reversal: bool = False) -> LateArrivalApproved:
        try:
            self._checkin = self._checkin.approve_late_arrival(approver_id, allow_reversal=allow_reversal)
        except ValidationError as e:
            raise InvalidLateApprovalError(str(e), {"attendance_id": self._id.value}) from e

        return self.raise_event(LateArrivalApproved(self._id, self._employee_id, approver_id))

    def reject_late_arrival(self, approver_id: EmployeeId, *, allow_reversal: bool = False) -> LateArrivalRejected:
        try:
            self._checkin = self._checkin.reject_late_arrival(approver_id, allow_reversal=allow_reversal)
        except ValidationError as e:
            raise InvalidLateApprovalError(str(e), {"attendance_id": self._id.value}) from e

        return self.raise_event(LateArrivalRejected(self._id, self._employee_id, approver_id))

    def mark_inactive(self) -> None:
        self._is_active = False

    # Queries

    def calculate_working_hours(self) -> Minutes:
        if self._checkout is None:
            raise NoCheckinRecordError()
        try:
            return self._checkout.calculate_working_hours(self._checkin)
        except ValidationError as e:
            raise InvalidCheckoutTimeError(str(e)) from e

    def get_attendance_status(self) -> AttendanceStatus:
        if not self._is_active:
            return AttendanceStatus.ABSENT
        if self.is_late() and not self.is_late_approved():
            return AttendanceStatus.LATE
        return AttendanceStatus.PRESENT

    @property
    def id(self) -> AttendanceId:
        return self._id

    @property
    def employee_id(self) -> EmployeeId:
        return self._employee_id

    @property
    def outlet_id(self) -> OutletId:
        return self._outlet_id

    @property
    def checkin_details(self) -> CheckinDetails:
        return self._checkin

    @property
    def checkout_details(self) -> Optional[CheckoutDetails]:
        return self._checkout

    @property
    def work_date(self) -> DateTime:
        return self._work_date

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def lateness(self) -> Minutes:
        return self._checkin.lateness

    @property
    def late_approval_status(self) -> LateApprovalStatus:
        return self._checkin.late_approval_status

    def is_checked_out(self) -> bool:
        return self._checkout is not None

    def is_late(self) -> bool:
        return self._checkin.is_late()

    def is_pending_late_approval(self) -> bool:
        return self._checkin.is_pending_late_approval()

    def is_late_approved(self) -> bool:
        return self._checkin.is_late_approved()

    def _validate_checkout(self, checkout_time: DateTime) -> None:
        if self.is_checked_out():
            raise AlreadyCheckedOutError()

        checkin_time = self._checkin.checkin_time
        if not checkout_time.is_same_day(checkin_time):
            raise InvalidCheckoutTimeError("Checkout must be on the same day as checkin")
        if checkout_time.is_before(checkin_time):
            raise InvalidCheckoutTimeError("Checkout time cannot be before checkin time")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Attendance):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return (
            f"Attendance(id={self._id.value}, employee_id={self._employee_id.value}, "
            f"outlet_id={self._outlet_id.value}, work_date={self._work_date.date().isoformat()}, "
            f"checked_out={self.is_checked_out()}, active={self._is_active})"
        )
