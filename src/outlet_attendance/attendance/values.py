from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import time
from typing import Optional, Union

from ..common.identifiers import EmployeeId
from ..common.temporal import DateTime, Minutes
from ..common.validators import optional_text
from ..core.enums import LateApprovalStatus
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ImageProof:
    """Reference to an evidentiary image (upload path or blob key)."""

    path: str

    def __post_init__(self):
        if not isinstance(self.path, str) or not self.path.strip():
            raise ValidationError("Image proof path cannot be empty")
        object.__setattr__(self, "path", self.path.strip())

    @classmethod
    def from_path(cls, path: str) -> "ImageProof":
        return cls(path)

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class CheckinDetails:
    """Everything about the arrival event.

    Lateness is computed once, at creation, and never recomputed on reconstruction.
    Approval transitions return a new instance.
    """

    checkin_time: DateTime
    image_proof: ImageProof
    lateness: Minutes
    late_approval_status: LateApprovalStatus = LateApprovalStatus.PENDING
    late_notes: Optional[str] = None
    late_present_proof: Optional[ImageProof] = None

    @classmethod
    def create(
        cls,
        checkin_time: DateTime,
        image_proof: ImageProof,
        scheduled_time: Union[DateTime, time],
        late_notes: Optional[str] = None,
        late_present_proof: Union[str, ImageProof, None] = None,
    ) -> "CheckinDetails":
        if isinstance(late_present_proof, str):
            late_present_proof = ImageProof.from_path(late_present_proof) if late_present_proof.strip() else None

        return cls(
            checkin_time=checkin_time,
            image_proof=image_proof,
            lateness=cls.calculate_lateness(checkin_time, scheduled_time),
            late_approval_status=LateApprovalStatus.PENDING,
            late_notes=optional_text(late_notes),
            late_present_proof=late_present_proof,
        )

    @classmethod
    def from_existing(
        cls,
        checkin_time: DateTime,
        image_proof: ImageProof,
        lateness: Minutes,
        late_approval_status: LateApprovalStatus,
        late_notes: Optional[str] = None,
        late_present_proof: Optional[ImageProof] = None,
    ) -> "CheckinDetails":
        return cls(checkin_time, image_proof, lateness, late_approval_status, late_notes, late_present_proof)

    @staticmethod
    def calculate_lateness(checkin_time: DateTime, scheduled_time: Union[DateTime, time]) -> Minutes:
        """Elapsed minutes past the scheduled check-in, floored at zero.

        The scheduled time-of-day is anchored to the check-in's calendar day and
        both instants are compared at minute precision.
        """
        scheduled_of_day = scheduled_time.time() if isinstance(scheduled_time, DateTime) else scheduled_time
        scheduled = DateTime.combine(checkin_time, scheduled_of_day).truncate_to_minute()
        return Minutes.from_number(scheduled.minutes_until(checkin_time.truncate_to_minute()))

    def is_late(self) -> bool:
        return self.lateness.is_positive()

    def is_pending_late_approval(self) -> bool:
        return self.is_late() and self.late_approval_status == LateApprovalStatus.PENDING

    def is_late_approved(self) -> bool:
        return self.is_late() and self.late_approval_status == LateApprovalStatus.APPROVED

    def is_late_rejected(self) -> bool:
        return self.is_late() and self.late_approval_status == LateApprovalStatus.REJECTED

    def approve_late_arrival(self, approver: EmployeeId, *, allow_reversal: bool = False) -> "CheckinDetails":
        if not self.is_late():
            raise ValidationError("Cannot approve late arrival for on-time checkin")
        if self.late_approval_status == LateApprovalStatus.APPROVED:
            raise ValidationError("Late arrival already approved")
        if self.late_approval_status == LateApprovalStatus.REJECTED and not allow_reversal:
            raise ValidationError("Late arrival already rejected")
        return replace(self, late_approval_status=LateApprovalStatus.APPROVED)

    def reject_late_arrival(self, approver: EmployeeId, *, allow_reversal: bool = False) -> "CheckinDetails":
        if not self.is_late():
            raise ValidationError("Cannot reject late arrival for on-time checkin")
        if self.late_approval_status == LateApprovalStatus.REJECTED:
            raise ValidationError("Late arrival already rejected")
        if self.late_approval_status == LateApprovalStatus.APPROVED and not allow_reversal:
            raise ValidationError("Late arrival already approved")
        return replace(self, late_approval_status=LateApprovalStatus.REJECTED)


@dataclass(frozen=True)
class CheckoutDetails:
    checkout_time: DateTime
    image_proof: ImageProof

    @classmethod
    def create(cls, checkout_time: DateTime, image_proof: ImageProof) -> "CheckoutDetails":
        return cls(checkout_time, image_proof)

    def calculate_working_hours(self, checkin_details: CheckinDetails) -> Minutes:
        checkin_time = checkin_details.checkin_time

        if not self.checkout_time.is_same_day(checkin_time):
            raise ValidationError("Checkout and checkin must be on the same day")
        if self.checkout_time.is_before(checkin_time):
            raise ValidationError("Checkout time cannot be before checkin time")

        start = checkin_time.truncate_to_minute()
        return Minutes.from_number(start.minutes_until(self.checkout_time.truncate_to_minute()))
