from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..common.identifiers import OutletId
from ..common.temporal import DateTime
from ..core.enums import WeekDay
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_time
from .model import WorkSchedule
from .repository import ScheduleRepository


def _row_to_schedule(r: Dict[str, Any]) -> WorkSchedule:
    return WorkSchedule(
        day=WeekDay(r["week_day"]),
        check_in_time=normalize_mysql_time(r["check_in_time"]),
        check_out_time=normalize_mysql_time(r["check_out_time"]),
        outlet_id=OutletId(int(r["outlet_id"])),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_by_outlet_and_day(self, outlet_id: OutletId, day: WeekDay) -> Sequence[WorkSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT outlet_id, week_day, check_in_time, check_out_time
                FROM outlet_schedules
                WHERE outlet_id=%s AND week_day=%s
                ORDER BY check_in_time ASC, schedule_id ASC
                """,
                (outlet_id.value, day.value),
            )
            return [_row_to_schedule(r) for r in fetchall(cur)]

    def find_active_schedule_for_outlet(self, outlet_id: OutletId, date: DateTime) -> Optional[WorkSchedule]:
        # Several shifts on one day: the earliest one governs lateness.
        schedules = self.find_by_outlet_and_day(outlet_id, date.get_week_day())
        return schedules[0] if schedules else None
