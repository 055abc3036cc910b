from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import Flask, jsonify, request

from ..common import datetime_utils
from ..common.identifiers import AttendanceId, EmployeeId, OutletId
from ..common.temporal import DateTime
from ..common.validators import optional_text, require_non_empty, require_positive_int
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_DAYS, DEFAULT_PAGE, DEFAULT_PAGE_LIMIT
from ..core.exceptions import DomainError, ErrorCode, ValidationError
from .commands import (
    ApproveLateArrivalCommand,
    CheckinCommand,
    CheckoutCommand,
    GetAttendanceDetailsQuery,
    GetEmployeeAttendancesQuery,
    GetOutletAttendancesQuery,
    GetOutletRosterQuery,
    GetScheduledEmployeeAttendanceQuery,
    GetTodayAttendanceQuery,
    RejectLateArrivalCommand,
    RemoveAttendanceCommand,
)

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {
    ErrorCode.ATTENDANCE_NOT_FOUND,
    ErrorCode.EMPLOYEE_NOT_FOUND,
    ErrorCode.NO_CHECKIN_RECORD,
    ErrorCode.NO_SCHEDULE_FOUND,
}
_CONFLICT_CODES = {ErrorCode.ATTENDANCE_ALREADY_EXISTS, ErrorCode.ALREADY_CHECKED_OUT}


def status_for(error: DomainError) -> int:
    if error.code in _NOT_FOUND_CODES:
        return 404
    if error.code in _CONFLICT_CODES:
        return 409
    return 400


def _success(data: Any, *, message: Optional[str] = None, status: int = 200, **extra: Any):
    body: dict[str, Any] = {"status": "success"}
    if message:
        body["message"] = message
    body["data"] = data
    body.update(extra)
    return jsonify(body), status


def _error(code: str, message: str, details: Optional[dict] = None, *, status: int):
    return jsonify({"status": "error", "code": code, "message": message, "details": details or {}}), status


def _json_endpoint(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            logger.info("%s %s rejected: %s (%s)", request.method, request.path, e.code.value, e.message)
            return _error(e.code.value, e.message, e.details, status=status_for(e))
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.path)
            return _error("INTERNAL_ERROR", "Internal server error", status=500)

    return wrapper


def _json_body() -> dict[str, Any]:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def _now() -> DateTime:
    return DateTime(datetime_utils.now_local().replace(microsecond=0))


def _date_arg(name: str, default: DateTime) -> DateTime:
    raw = request.args.get(name)
    if not raw:
        return default
    return DateTime.combine(datetime_utils.parse_iso_date(raw), default.time())


def _int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer") from None


def _range_args(default_days: int) -> tuple[DateTime, DateTime]:
    today = _now()
    start = _date_arg("start_date", today.start_of_day().subtract_minutes(default_days * 24 * 60))
    end = _date_arg("end_date", today)
    return start.start_of_day(), end.end_of_day()


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    # Commands

    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="attendance_checkin")
    @_json_endpoint
    def checkin():
        body = _json_body()
        result = service.checkin.handle(
            CheckinCommand(
                employee_id=EmployeeId(body.get("employee_id")),
                outlet_id=OutletId(body.get("outlet_id")),
                checkin_time=_now(),
                image_proof_path=require_non_empty(body.get("image_proof"), "image_proof"),
                late_notes=optional_text(body.get("late_notes")),
                late_present_proof_path=optional_text(body.get("late_present_proof")),
            )
        )
        return _success(result.to_dict(), message="Check-in successful", status=201)

    @app.route("/api/attendance/checkout", methods=["POST"], endpoint="attendance_checkout")
    @_json_endpoint
    def checkout():
        body = _json_body()
        result = service.checkout.handle(
            CheckoutCommand(
                employee_id=EmployeeId(body.get("employee_id")),
                checkout_time=_now(),
                image_proof_path=require_non_empty(body.get("image_proof"), "image_proof"),
            )
        )
        return _success(result.to_dict(), message="Check-out successful")

    @app.route("/api/attendance/<attendance_id>/approve-late", methods=["PATCH"], endpoint="attendance_approve_late")
    @_json_endpoint
    def approve_late(attendance_id: str):
        body = _json_body()
        result = service.approve_late.handle(
            ApproveLateArrivalCommand(
                attendance_id=require_positive_int(attendance_id, "attendance_id"),
                approver_id=EmployeeId(body.get("approver_id")),
            )
        )
        return _success(result.to_dict(), message="Late arrival approved")

    @app.route("/api/attendance/<attendance_id>/reject-late", methods=["PATCH"], endpoint="attendance_reject_late")
    @_json_endpoint
    def reject_late(attendance_id: str):
        body = _json_body()
        result = service.reject_late.handle(
            RejectLateArrivalCommand(
                attendance_id=require_positive_int(attendance_id, "attendance_id"),
                approver_id=EmployeeId(body.get("approver_id")),
            )
        )
        return _success(result.to_dict(), message="Late arrival rejected")

    @app.route("/api/attendance/<attendance_id>", methods=["DELETE"], endpoint="attendance_remove")
    @_json_endpoint
    def remove(attendance_id: str):
        result = service.remove.handle(
            RemoveAttendanceCommand(attendance_id=require_positive_int(attendance_id, "attendance_id"))
        )
        return _success(result.to_dict(), message="Attendance removed")

    # Queries

    @app.route("/api/attendance/today/<employee_id>", methods=["GET"], endpoint="attendance_today")
    @_json_endpoint
    def today(employee_id: str):
        employee = EmployeeId(employee_id)
        result = service.get_today_attendance.handle(GetTodayAttendanceQuery(employee_id=employee, date=_now()))
        if result is None:
            return _error(
                ErrorCode.NO_CHECKIN_RECORD.value,
                "No attendance recorded today",
                {"employee_id": employee.value},
                status=404,
            )
        return _success(result.to_dict())

    @app.route("/api/attendance/<attendance_id>", methods=["GET"], endpoint="attendance_details")
    @_json_endpoint
    def details(attendance_id: str):
        result = service.get_attendance_details.handle(GetAttendanceDetailsQuery(attendance_id=AttendanceId(attendance_id)))
        return _success(result.to_dict())

    @app.route("/api/outlets/<outlet_id>/attendances", methods=["GET"], endpoint="outlet_attendances")
    @_json_endpoint
    def outlet_attendances(outlet_id: str):
        start, end = _range_args(0)
        view = service.get_outlet_attendances.handle(
            GetOutletAttendancesQuery(
                outlet_id=OutletId(outlet_id),
                start_date=start,
                end_date=end,
                page=_int_arg("page", DEFAULT_PAGE),
                limit=_int_arg("limit", int(app.config.get("DEFAULT_PAGE_LIMIT", DEFAULT_PAGE_LIMIT))),
            )
        )
        return _success([item.to_dict() for item in view.data], pagination=view.pagination())

    @app.route("/api/outlets/<outlet_id>/roster", methods=["GET"], endpoint="outlet_roster")
    @_json_endpoint
    def outlet_roster(outlet_id: str):
        day = _date_arg("date", _now())
        entries = service.get_outlet_roster.handle(GetOutletRosterQuery(outlet_id=OutletId(outlet_id), date=day))
        return _success([entry.to_dict() for entry in entries])

    @app.route("/api/employees/<employee_id>/attendances", methods=["GET"], endpoint="employee_attendances")
    @_json_endpoint
    def employee_attendances(employee_id: str):
        start, end = _range_args(DEFAULT_HISTORY_DAYS)
        results = service.get_employee_attendances.handle(
            GetEmployeeAttendancesQuery(employee_id=EmployeeId(employee_id), start_date=start, end_date=end)
        )
        return _success([r.to_dict() for r in results])

    @app.route("/api/users/<user_id>/attendance/today", methods=["GET"], endpoint="scheduled_employee_today")
    @_json_endpoint
    def scheduled_employee_today(user_id: str):
        result = service.get_scheduled_employee_attendance.handle(
            GetScheduledEmployeeAttendanceQuery(user_id=require_positive_int(user_id, "user_id"), date=_now())
        )
        return _success(result.to_dict() if result else None)
