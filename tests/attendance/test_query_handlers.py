from __future__ import annotations

from datetime import datetime

import pytest

from outlet_attendance.attendance.commands import (
    ApproveLateArrivalCommand,
    CheckinCommand,
    CheckoutCommand,
    GetAttendanceDetailsQuery,
    GetEmployeeAttendancesQuery,
    GetOutletAttendancesQuery,
    GetOutletRosterQuery,
    GetScheduledEmployeeAttendanceQuery,
    GetTodayAttendanceQuery,
)
from outlet_attendance.common.identifiers import AttendanceId, EmployeeId, OutletId
from outlet_attendance.common.temporal import DateTime
from outlet_attendance.core.enums import AttendanceStatus
from outlet_attendance.core.exceptions import AttendanceNotFoundError, EmployeeNotFoundError, ValidationError

DAY = DateTime(datetime(2024, 3, 1, 12, 0))


def at(hour: int, minute: int) -> DateTime:
    return DateTime(datetime(2024, 3, 1, hour, minute))


def check_in(service, employee_id: int, when: DateTime):
    return service.checkin.handle(CheckinCommand(EmployeeId(employee_id), OutletId(3), when, "in.jpg"))


def outlet_query(page: int = 1, limit: int = 10) -> GetOutletAttendancesQuery:
    return GetOutletAttendancesQuery(OutletId(3), DAY.start_of_day(), DAY.end_of_day(), page=page, limit=limit)


@pytest.fixture
def staffed(service, employees):
    for employee_id in range(10, 15):
        employees.add(employee_id, f"Staff {employee_id}")
        check_in(service, employee_id, at(8, employee_id))
    return service


def test_today_attendance_optional(service):
    assert service.get_today_attendance.handle(GetTodayAttendanceQuery(EmployeeId(7), DAY)) is None

    check_in(service, 7, at(9, 5))
    result = service.get_today_attendance.handle(GetTodayAttendanceQuery(EmployeeId(7), DAY))
    assert result.lateness == 5


def test_details_raise_when_missing(service):
    with pytest.raises(AttendanceNotFoundError):
        service.get_attendance_details.handle(GetAttendanceDetailsQuery(AttendanceId(1)))

    check_in(service, 7, at(9, 0))
    assert service.get_attendance_details.handle(GetAttendanceDetailsQuery(AttendanceId(1))).id == 1


def test_outlet_attendances_are_paginated_newest_first(staffed):
    first = staffed.get_outlet_attendances.handle(outlet_query(page=1, limit=2))
    last = staffed.get_outlet_attendances.handle(outlet_query(page=3, limit=2))

    assert first.pagination() == {"total": 5, "page": 1, "limit": 2, "total_pages": 3}
    assert [item.employee_id for item in first.data] == [14, 13]
    assert [item.employee_id for item in last.data] == [10]


def test_outlet_page_past_the_end_is_empty(staffed):
    view = staffed.get_outlet_attendances.handle(outlet_query(page=9, limit=10))
    assert view.data == [] and view.total == 5 and view.total_pages == 1


def test_empty_outlet_has_zero_pages(service):
    view = service.get_outlet_attendances.handle(outlet_query())
    assert view.total == 0 and view.total_pages == 0


def test_list_items_carry_formatted_lateness(service):
    check_in(service, 7, at(10, 15))
    item = service.get_outlet_attendances.handle(outlet_query()).data[0]

    assert item.lateness == "1 hours 15 minutes"
    assert item.to_dict()["status"] == "LATE"


@pytest.mark.parametrize("page, limit", [(0, 10), (1, 0), (1, 101)])
def test_outlet_paging_bounds(service, page, limit):
    with pytest.raises(ValidationError):
        service.get_outlet_attendances.handle(outlet_query(page=page, limit=limit))


def test_outlet_range_must_be_ordered(service):
    with pytest.raises(ValidationError):
        service.get_outlet_attendances.handle(
            GetOutletAttendancesQuery(OutletId(3), DAY.end_of_day(), DAY.start_of_day())
        )


def test_employee_history(service, employees):
    check_in(service, 7, at(9, 0))
    service.checkout.handle(CheckoutCommand(EmployeeId(7), at(17, 0), "out.jpg"))

    history = service.get_employee_attendances.handle(
        GetEmployeeAttendancesQuery(EmployeeId(7), DAY.subtract_minutes(7 * 24 * 60), DAY.end_of_day())
    )
    assert [(r.employee_id, r.working_hours) for r in history] == [(7, 480)]


def test_scheduled_employee_attendance(service):
    assert service.get_scheduled_employee_attendance.handle(GetScheduledEmployeeAttendanceQuery(42, DAY)) is None

    check_in(service, 7, at(9, 3))
    result = service.get_scheduled_employee_attendance.handle(GetScheduledEmployeeAttendanceQuery(42, DAY))
    assert result.employee_id == 7


def test_scheduled_employee_missing(service):
    with pytest.raises(EmployeeNotFoundError) as exc:
        service.get_scheduled_employee_attendance.handle(GetScheduledEmployeeAttendanceQuery(1, DAY))
    assert exc.value.details == {"user_id": 1, "date": "2024-03-01"}


def test_roster_marks_absent_and_checked_in(service):
    check_in(service, 7, at(9, 30))
    service.approve_late.handle(ApproveLateArrivalCommand(1, EmployeeId(99)))

    roster = service.get_outlet_roster.handle(GetOutletRosterQuery(OutletId(3), DAY))
    by_id = {entry.employee_id: entry for entry in roster}

    assert by_id[7].checked_in and not by_id[7].checked_out
    assert by_id[7].status is AttendanceStatus.PRESENT
    assert by_id[7].lateness == 30
    assert by_id[8].status is AttendanceStatus.ABSENT
    assert by_id[8].to_dict() == {
        "employee_id": 8,
        "employee_name": "Ben",
        "checked_in": False,
        "checked_out": False,
        "status": "ABSENT",
        "lateness": 0,
        "attendance_id": None,
    }
