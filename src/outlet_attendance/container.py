from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceApplicationService
from .core.constants import MAX_PAGE_LIMIT
from .core.event_bus import InMemoryEventBus
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    attendance_repo: AttendanceRepository
    employees_repo: EmployeeRepository
    schedules_repo: ScheduleRepository
    event_bus: InMemoryEventBus

    attendance_service: AttendanceApplicationService


def build_service_container(
    *,
    attendance_repo: AttendanceRepository,
    employees_repo: EmployeeRepository,
    schedules_repo: ScheduleRepository,
    conn: Optional[DatabaseConnection] = None,
    allow_late_decision_reversal: bool = False,
    max_page_limit: int = MAX_PAGE_LIMIT,
) -> Container:
    """Wire the application service around any set of repositories."""
    event_bus = InMemoryEventBus()
    attendance_service = AttendanceApplicationService(
        attendance_repo,
        employees_repo,
        schedules_repo,
        event_bus,
        allow_late_decision_reversal=allow_late_decision_reversal,
        max_page_limit=max_page_limit,
    )
    return Container(
        conn=conn,
        attendance_repo=attendance_repo,
        employees_repo=employees_repo,
        schedules_repo=schedules_repo,
        event_bus=event_bus,
        attendance_service=attendance_service,
    )


def build_container(
    *,
    db_config: dict,
    allow_late_decision_reversal: bool = False,
    max_page_limit: int = MAX_PAGE_LIMIT,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return build_service_container(
        attendance_repo=MySQLAttendanceRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        conn=conn,
        allow_late_decision_reversal=allow_late_decision_reversal,
        max_page_limit=max_page_limit,
    )
