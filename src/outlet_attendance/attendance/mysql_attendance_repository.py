from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..common.identifiers import AttendanceId, EmployeeId, OutletId
from ..common.temporal import DateTime, Minutes
from ..core.enums import LateApprovalStatus
from ..core.exceptions import AttendanceAlreadyExistsError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall, fetchone, is_duplicate_key
from .model import Attendance
from .repository import AttendancePage, AttendanceRepository
from .values import CheckinDetails, CheckoutDetails, ImageProof

_COLUMNS = """
    attendance_id, employee_id, outlet_id, checkin_time, checkin_image_proof,
    checkout_time, checkout_image_proof, late_minutes, late_notes, late_present_proof,
    late_approval_status, is_active
"""


def _whole_seconds(value: datetime) -> datetime:
    return value.replace(microsecond=0)


def row_to_attendance(r: Dict[str, Any]) -> Attendance:
    checkin = CheckinDetails.from_existing(
        checkin_time=DateTime(r["checkin_time"]),
        image_proof=ImageProof.from_path(r["checkin_image_proof"]),
        lateness=Minutes.from_number(int(r.get("late_minutes") or 0)),
        late_approval_status=LateApprovalStatus(r["late_approval_status"]),
        late_notes=r.get("late_notes"),
        late_present_proof=ImageProof.from_path(r["late_present_proof"]) if r.get("late_present_proof") else None,
    )

    checkout = None
    if bool(r.get("checkout_time")) != bool(r.get("checkout_image_proof")):
        raise ValueError(f"Attendance {r['attendance_id']}: checkout_time and checkout_image_proof must be set together")
    if r.get("checkout_time"):
        checkout = CheckoutDetails.create(DateTime(r["checkout_time"]), ImageProof.from_path(r["checkout_image_proof"]))

    return Attendance.from_persistence(
        AttendanceId(int(r["attendance_id"])),
        EmployeeId(int(r["employee_id"])),
        OutletId(int(r["outlet_id"])),
        checkin,
        checkout,
        is_active=bool(r["is_active"]),
    )


def attendance_to_row(attendance: Attendance) -> Dict[str, Any]:
    checkin = attendance.checkin_details
    checkout = attendance.checkout_details
    work_date = attendance.work_date.date()
    return {
        "attendance_id": attendance.id.value,
        "employee_id": attendance.employee_id.value,
        "outlet_id": attendance.outlet_id.value,
        "work_date": work_date,
        "active_work_date": work_date if attendance.is_active else None,
        "checkin_time": _whole_seconds(checkin.checkin_time.value),
        "checkin_image_proof": checkin.image_proof.path,
        "checkout_time": _whole_seconds(checkout.checkout_time.value) if checkout else None,
        "checkout_image_proof": checkout.image_proof.path if checkout else None,
        "late_minutes": checkin.lateness.value,
        "late_notes": checkin.late_notes,
        "late_present_proof": checkin.late_present_proof.path if checkin.late_present_proof else None,
        "late_approval_status": checkin.late_approval_status.value,
        "is_active": 1 if attendance.is_active else 0,
    }


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def next_identity(self) -> AttendanceId:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO attendance_id_sequence () VALUES ()")
            return AttendanceId(int(cur.lastrowid))

    def save(self, attendance: Attendance) -> None:
        row = attendance_to_row(attendance)
        columns = ", ".join(row)
        placeholders = ", ".join(["%s"] * len(row))
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO attendance_records({columns}) VALUES({placeholders})",
                    tuple(row.values()),
                )
        except IntegrityError as e:
            # Concurrent check-ins that both passed the duplicate pre-check.
            if is_duplicate_key(e):
                raise AttendanceAlreadyExistsError(attendance.employee_id.value, row["work_date"]) from e
            raise

    def find_by_id(self, attendance_id: AttendanceId) -> Optional[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s AND is_active=1",
                (attendance_id.value,),
            )
            r = fetchone(cur)
            return row_to_attendance(r) if r else None

    def find_today_attendance(self, employee_id: EmployeeId, date: DateTime) -> Optional[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s AND is_active=1
                ORDER BY checkin_time DESC
                LIMIT 1
                """,
                (employee_id.value, date.date()),
            )
            r = fetchone(cur)
            return row_to_attendance(r) if r else None

    def exists_for_employee_on_date(self, employee_id: EmployeeId, date: DateTime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s AND is_active=1
                """,
                (employee_id.value, date.date()),
            )
            return fetch_count(cur) > 0

    def find_by_outlet_and_date_range(self, outlet_id: OutletId, start: DateTime, end: DateTime) -> Sequence[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE outlet_id=%s AND checkin_time BETWEEN %s AND %s AND is_active=1
                ORDER BY checkin_time DESC
                """,
                (outlet_id.value, start.value, end.value),
            )
            return [row_to_attendance(r) for r in fetchall(cur)]

    def find_page_by_outlet_and_date_range(
        self,
        outlet_id: OutletId,
        start: DateTime,
        end: DateTime,
        *,
        offset: int,
        limit: int,
    ) -> AttendancePage:
        where = "outlet_id=%s AND checkin_time BETWEEN %s AND %s AND is_active=1"
        params = (outlet_id.value, start.value, end.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM attendance_records WHERE {where}", params)
            total = fetch_count(cur)

            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY checkin_time DESC, attendance_id DESC
                LIMIT %s OFFSET %s
                """,
                params + (int(limit), int(offset)),
            )
            items = [row_to_attendance(r) for r in fetchall(cur)]

        return AttendancePage(items=items, total=total)

    def find_by_employee_and_date_range(
        self, employee_id: EmployeeId, start: DateTime, end: DateTime
    ) -> Sequence[Attendance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND checkin_time BETWEEN %s AND %s AND is_active=1
                ORDER BY checkin_time DESC
                """,
                (employee_id.value, start.value, end.value),
            )
            return [row_to_attendance(r) for r in fetchall(cur)]

    def update(self, attendance: Attendance) -> None:
        row = attendance_to_row(attendance)
        attendance_id = row.pop("attendance_id")
        assignments = ", ".join(f"{col}=%s" for col in row)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE attendance_records SET {assignments} WHERE attendance_id=%s",
                tuple(row.values()) + (attendance_id,),
            )

    def remove(self, attendance_id: AttendanceId) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET is_active=0, active_work_date=NULL WHERE attendance_id=%s",
                (attendance_id.value,),
            )
