from __future__ import annotations

from datetime import date
from enum import Enum

from .exceptions import ValidationError


class AttendanceStatus(str, Enum):
    """Attendance status derived on read (never persisted)."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    EXCUSED = "EXCUSED"


class LateApprovalStatus(str, Enum):
    """Supervisor decision on a late check-in."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class WeekDay(str, Enum):
    SUNDAY = "SUNDAY"
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"

    @classmethod
    def from_string(cls, name: str) -> "WeekDay":
        key = (name or "").strip().upper()
        try:
            return cls(key)
        except ValueError:
            raise ValidationError(f"Invalid week day: {name}") from None

    @classmethod
    def from_date(cls, day: date) -> "WeekDay":
        # date.weekday(): Monday == 0
        return _BY_PY_WEEKDAY[day.weekday()]


_BY_PY_WEEKDAY = (
    WeekDay.MONDAY,
    WeekDay.TUESDAY,
    WeekDay.WEDNESDAY,
    WeekDay.THURSDAY,
    WeekDay.FRIDAY,
    WeekDay.SATURDAY,
    WeekDay.SUNDAY,
)
