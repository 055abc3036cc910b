from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import Optional

import pytest

from outlet_attendance.attendance.model import Attendance
from outlet_attendance.attendance.repository import AttendancePage
from outlet_attendance.attendance.service import AttendanceApplicationService
from outlet_attendance.common.identifiers import AttendanceId, EmployeeId, OutletId
from outlet_attendance.common.temporal import DateTime
from outlet_attendance.core.aggregate import DomainEvent
from outlet_attendance.core.enums import WeekDay
from outlet_attendance.core.event_bus import InMemoryEventBus
from outlet_attendance.core.exceptions import AttendanceAlreadyExistsError
from outlet_attendance.employees.model import Employee
from outlet_attendance.schedules.model import WorkSchedule

# 2024-03-01 is a Friday.
WORK_DAY = date(2024, 3, 1)
OUTLET = 3


class InMemoryAttendance:
    def __init__(self):
        self.items: dict[int, Attendance] = {}
        self.saved: list[Attendance] = []
        self.updated: list[Attendance] = []
        self.removed: list[AttendanceId] = []
        self._seq = 0

    def _active(self):
        return [a for a in self.items.values() if a.is_active]

    def next_identity(self) -> AttendanceId:
        self._seq += 1
        return AttendanceId(self._seq)

    def save(self, attendance: Attendance) -> None:
        if self.exists_for_employee_on_date(attendance.employee_id, attendance.checkin_details.checkin_time):
            raise AttendanceAlreadyExistsError(attendance.employee_id.value, attendance.work_date.date())
        self.items[attendance.id.value] = attendance
        self.saved.append(attendance)

    def find_by_id(self, attendance_id: AttendanceId) -> Optional[Attendance]:
        a = self.items.get(attendance_id.value)
        return a if a and a.is_active else None

    def find_today_attendance(self, employee_id: EmployeeId, date: DateTime) -> Optional[Attendance]:
        matches = [
            a for a in self._active()
            if a.employee_id == employee_id and a.checkin_details.checkin_time.is_same_day(date)
        ]
        matches.sort(key=lambda a: a.checkin_details.checkin_time, reverse=True)
        return matches[0] if matches else None

    def exists_for_employee_on_date(self, employee_id: EmployeeId, date: DateTime) -> bool:
        return self.find_today_attendance(employee_id, date) is not None

    def _in_range(self, a: Attendance, start: DateTime, end: DateTime) -> bool:
        t = a.checkin_details.checkin_time
        return not t.is_before(start) and not t.is_after(end)

    def find_by_outlet_and_date_range(self, outlet_id: OutletId, start: DateTime, end: DateTime):
        items = [a for a in self._active() if a.outlet_id == outlet_id and self._in_range(a, start, end)]
        items.sort(key=lambda a: a.checkin_details.checkin_time, reverse=True)
        return items

    def find_page_by_outlet_and_date_range(self, outlet_id, start, end, *, offset: int, limit: int) -> AttendancePage:
        items = self.find_by_outlet_and_date_range(outlet_id, start, end)
        return AttendancePage(items=items[offset:offset + limit], total=len(items))

    def find_by_employee_and_date_range(self, employee_id: EmployeeId, start: DateTime, end: DateTime):
        items = [a for a in self._active() if a.employee_id == employee_id and self._in_range(a, start, end)]
        items.sort(key=lambda a: a.checkin_details.checkin_time, reverse=True)
        return items

    def update(self, attendance: Attendance) -> None:
        self.items[attendance.id.value] = attendance
        self.updated.append(attendance)

    def remove(self, attendance_id: AttendanceId) -> None:
        self.items[attendance_id.value].mark_inactive()
        self.removed.append(attendance_id)


@dataclass
class InMemoryEmployees:
    employees: dict[int, Employee] = field(default_factory=dict)
    # (employee_id, outlet_id, day)
    assignments: set[tuple[int, int, date]] = field(default_factory=set)
    outlet_by_user: dict[int, int] = field(default_factory=dict)

    def add(self, employee_id: int, name: str, *, outlet_id: int = OUTLET, day: date = WORK_DAY) -> Employee:
        employee = Employee(EmployeeId(employee_id), name)
        self.employees[employee_id] = employee
        self.assignments.add((employee_id, outlet_id, day))
        return employee

    def find_by_id(self, employee_id: EmployeeId) -> Optional[Employee]:
        return self.employees.get(employee_id.value)

    def is_employee_assigned_to_outlet(self, employee_id: EmployeeId, outlet_id: OutletId, date: DateTime) -> bool:
        return (employee_id.value, outlet_id.value, date.date()) in self.assignments

    def find_scheduled_employee_by_user_id(self, user_id: int, date: DateTime) -> Optional[EmployeeId]:
        outlet_id = self.outlet_by_user.get(user_id)
        for emp_id, out_id, day in sorted(self.assignments):
            if out_id == outlet_id and day == date.date():
                return EmployeeId(emp_id)
        return None

    def find_employees_assigned_to_outlet(self, outlet_id: OutletId, date: DateTime):
        ids = sorted(e for e, o, d in self.assignments if o == outlet_id.value and d == date.date())
        return [self.employees[i] for i in ids if i in self.employees]


@dataclass
class InMemorySchedules:
    schedules: list[WorkSchedule] = field(default_factory=list)

    def add(self, outlet_id: int, day: WeekDay, check_in: time, check_out: time) -> None:
        self.schedules.append(WorkSchedule(day, check_in, check_out, OutletId(outlet_id)))

    def find_by_outlet_and_day(self, outlet_id: OutletId, day: WeekDay):
        found = [s for s in self.schedules if s.outlet_id == outlet_id and s.day == day]
        return sorted(found, key=lambda s: s.check_in_time)

    def find_active_schedule_for_outlet(self, outlet_id: OutletId, date: DateTime):
        found = self.find_by_outlet_and_day(outlet_id, date.get_week_day())
        return found[0] if found else None


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def employees() -> InMemoryEmployees:
    repo = InMemoryEmployees()
    repo.add(7, "Ana")
    repo.add(8, "Ben")
    repo.outlet_by_user[42] = OUTLET
    return repo


@pytest.fixture
def schedules() -> InMemorySchedules:
    repo = InMemorySchedules()
    repo.add(OUTLET, WeekDay.FRIDAY, time(9, 0), time(17, 0))
    return repo


@pytest.fixture
def event_bus() -> InMemoryEventBus:
    return InMemoryEventBus()


@pytest.fixture
def published(event_bus):
    events = []
    event_bus.subscribe(DomainEvent, events.append)
    return events


@pytest.fixture
def service(attendance_repo, employees, schedules, event_bus) -> AttendanceApplicationService:
    return AttendanceApplicationService(attendance_repo, employees, schedules, event_bus)
