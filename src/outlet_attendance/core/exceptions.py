from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    """Stable codes for every business-rule failure."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    ATTENDANCE_ALREADY_EXISTS = "ATTENDANCE_ALREADY_EXISTS"
    ATTENDANCE_NOT_FOUND = "ATTENDANCE_NOT_FOUND"
    ALREADY_CHECKED_OUT = "ALREADY_CHECKED_OUT"
    NO_CHECKIN_RECORD = "NO_CHECKIN_RECORD"
    INVALID_CHECKOUT_TIME = "INVALID_CHECKOUT_TIME"
    NO_SCHEDULE_FOUND = "NO_SCHEDULE_FOUND"
    INVALID_LATE_APPROVAL = "INVALID_LATE_APPROVAL"
    EMPLOYEE_NOT_FOUND = "EMPLOYEE_NOT_FOUND"
    EMPLOYEE_NOT_ASSIGNED = "EMPLOYEE_NOT_ASSIGNED"


class DomainError(Exception):
    """Base exception for business rule violations."""

    code: ErrorCode = ErrorCode.VALIDATION_ERROR

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code.value, "message": self.message, "details": self.details}


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = ErrorCode.VALIDATION_ERROR


class AttendanceAlreadyExistsError(DomainError):
    code = ErrorCode.ATTENDANCE_ALREADY_EXISTS

    def __init__(self, employee_id: int, work_date: date):
        super().__init__(
            f"Attendance already exists for employee {employee_id} on {work_date.isoformat()}",
            {"employee_id": int(employee_id), "date": work_date.isoformat()},
        )


class AttendanceNotFoundError(DomainError):
    code = ErrorCode.ATTENDANCE_NOT_FOUND

    def __init__(self, attendance_id: int):
        super().__init__(f"Attendance with ID {attendance_id} not found", {"attendance_id": int(attendance_id)})


class AlreadyCheckedOutError(DomainError):
    code = ErrorCode.ALREADY_CHECKED_OUT

    def __init__(self):
        super().__init__("Employee has already checked out today")


class NoCheckinRecordError(DomainError):
    code = ErrorCode.NO_CHECKIN_RECORD

    def __init__(self):
        super().__init__("No check-in record found for today. Please check in first.")


class InvalidCheckoutTimeError(DomainError):
    code = ErrorCode.INVALID_CHECKOUT_TIME


class NoScheduleFoundError(DomainError):
    code = ErrorCode.NO_SCHEDULE_FOUND

    def __init__(self, outlet_id: int, day: str):
        super().__init__(
            f"No schedule found for {day} at outlet {outlet_id}. "
            "Please contact your manager to set up outlet schedules.",
            {"outlet_id": int(outlet_id), "day": day},
        )


class InvalidLateApprovalError(DomainError):
    code = ErrorCode.INVALID_LATE_APPROVAL


class EmployeeNotFoundError(DomainError):
    code = ErrorCode.EMPLOYEE_NOT_FOUND

    def __init__(self, message: str = "Employee not found", details: Optional[dict[str, Any]] = None):
        super().__init__(message, details)


class EmployeeNotAssignedError(DomainError):
    code = ErrorCode.EMPLOYEE_NOT_ASSIGNED

    def __init__(self, employee_id: int, outlet_id: int):
        super().__init__(
            "Employee is not assigned to this outlet",
            {"employee_id": int(employee_id), "outlet_id": int(outlet_id)},
        )
