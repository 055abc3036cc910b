from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..common.identifiers import OutletId
from ..common.temporal import DateTime
from ..core.enums import WeekDay


@dataclass(frozen=True)
class WorkSchedule:
    """An outlet's expected check-in/check-out time for one week day."""

    day: WeekDay
    check_in_time: time
    check_out_time: time
    outlet_id: OutletId

    def scheduled_checkin_on(self, moment: DateTime) -> DateTime:
        return DateTime.combine(moment, self.check_in_time)
