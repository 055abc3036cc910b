from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..common.identifiers import EmployeeId, OutletId
from ..common.temporal import DateTime
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository


def _row_to_employee(r: Dict[str, Any]) -> Employee:
    return Employee(
        id=EmployeeId(int(r["employee_id"])),
        name=str(r["full_name"]),
        is_active=bool(r["is_active"]),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_by_id(self, employee_id: EmployeeId) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, full_name, is_active
                FROM employees
                WHERE employee_id=%s AND is_active=1
                """,
                (employee_id.value,),
            )
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def is_employee_assigned_to_outlet(self, employee_id: EmployeeId, outlet_id: OutletId, date: DateTime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n
                FROM outlet_employees
                WHERE employee_id=%s AND outlet_id=%s AND assigned_date=%s AND is_active=1
                """,
                (employee_id.value, outlet_id.value, date.date()),
            )
            return fetch_count(cur) > 0

    def find_scheduled_employee_by_user_id(self, user_id: int, date: DateTime) -> Optional[EmployeeId]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT oe.employee_id
                FROM outlet_employees oe
                JOIN outlets o ON o.outlet_id = oe.outlet_id
                WHERE o.user_id=%s AND o.is_active=1
                  AND oe.assigned_date=%s AND oe.is_active=1
                ORDER BY oe.assignment_id
                LIMIT 1
                """,
                (int(user_id), date.date()),
            )
            row = fetchone(cur)
            return EmployeeId(int(row["employee_id"])) if row else None

    def find_employees_assigned_to_outlet(self, outlet_id: OutletId, date: DateTime) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DISTINCT e.employee_id, e.full_name, e.is_active
                FROM outlet_employees oe
                JOIN employees e ON e.employee_id = oe.employee_id
                WHERE oe.outlet_id=%s AND oe.assigned_date=%s
                  AND oe.is_active=1 AND e.is_active=1
                ORDER BY e.full_name, e.employee_id
                """,
                (outlet_id.value, date.date()),
            )
            return [_row_to_employee(r) for r in fetchall(cur)]
