from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..common.identifiers import OutletId
from ..common.temporal import DateTime
from ..core.enums import WeekDay
from .model import WorkSchedule


class ScheduleRepository(Protocol):
    def find_by_outlet_and_day(self, outlet_id: OutletId, day: WeekDay) -> Sequence[WorkSchedule]:
        """Schedules for the week day, earliest check-in first."""

        raise NotImplementedError

    def find_active_schedule_for_outlet(self, outlet_id: OutletId, date: DateTime) -> Optional[WorkSchedule]:
        raise NotImplementedError
