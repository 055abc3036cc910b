from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Union

from ..core.constants import END_OF_DAY_MICROSECOND
from ..core.enums import WeekDay
from ..core.exceptions import ValidationError
from . import datetime_utils
from .datetime_utils import parse_iso_datetime


@dataclass(frozen=True, order=True)
class DateTime:
    """Immutable point in time (naive local datetime).

    Every "mutator" returns a new instance.
    """

    value: datetime

    def __post_init__(self):
        if not isinstance(self.value, datetime):
            raise ValidationError(f"Invalid datetime value: {self.value!r}")

    @classmethod
    def now(cls) -> "DateTime":
        return cls(datetime_utils.now_local())

    @classmethod
    def from_datetime(cls, value: datetime) -> "DateTime":
        return cls(value)

    @classmethod
    def from_string(cls, value: str) -> "DateTime":
        return cls(parse_iso_datetime(value))

    @classmethod
    def combine(cls, day: Union[date, "DateTime"], time_of_day: time) -> "DateTime":
        if isinstance(day, DateTime):
            day = day.date()
        return cls(datetime.combine(day, time_of_day.replace(tzinfo=None)))

    # Comparisons

    def is_before(self, other: "DateTime") -> bool:
        return self.value < other.value

    def is_after(self, other: "DateTime") -> bool:
        return self.value > other.value

    def is_same_day(self, other: "DateTime") -> bool:
        return self.value.date() == other.value.date()

    # Components

    @property
    def hour(self) -> int:
        return self.value.hour

    @property
    def minute(self) -> int:
        return self.value.minute

    def date(self) -> date:
        return self.value.date()

    def time(self) -> time:
        return self.value.time()

    def get_time_in_minutes(self) -> int:
        """Minute of the day (hour * 60 + minute), not elapsed time."""
        return self.value.hour * 60 + self.value.minute

    def get_week_day(self) -> WeekDay:
        return WeekDay.from_date(self.value.date())

    # Arithmetic

    def add_minutes(self, minutes: int) -> "DateTime":
        return DateTime(self.value + timedelta(minutes=int(minutes)))

    def subtract_minutes(self, minutes: int) -> "DateTime":
        return DateTime(self.value - timedelta(minutes=int(minutes)))

    def start_of_day(self) -> "DateTime":
        return DateTime(self.value.replace(hour=0, minute=0, second=0, microsecond=0))

    def end_of_day(self) -> "DateTime":
        return DateTime(self.value.replace(hour=23, minute=59, second=59, microsecond=END_OF_DAY_MICROSECOND))

    def truncate_to_minute(self) -> "DateTime":
        return DateTime(self.value.replace(second=0, microsecond=0))

    def minutes_until(self, other: "DateTime") -> int:
        """Elapsed whole minutes from ``self`` to ``other`` (negative if ``other`` is earlier)."""
        return int((other.value - self.value).total_seconds() // 60)

    def isoformat(self) -> str:
        return self.value.isoformat()

    def to_time_string(self) -> str:
        return self.value.strftime("%H:%M:%S")

    def __str__(self) -> str:
        return self.isoformat()


@dataclass(frozen=True, order=True)
class Minutes:
    """Non-negative duration in whole minutes."""

    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(f"Minutes must be an integer: {self.value!r}")
        if self.value < 0:
            raise ValidationError("Minutes cannot be negative")

    @classmethod
    def from_number(cls, value: Union[int, float]) -> "Minutes":
        return cls(max(0, int(value)))

    @classmethod
    def zero(cls) -> "Minutes":
        return cls(0)

    def is_zero(self) -> bool:
        return self.value == 0

    def is_positive(self) -> bool:
        return self.value > 0

    def add(self, other: "Minutes") -> "Minutes":
        return Minutes(self.value + other.value)

    def subtract(self, other: "Minutes") -> "Minutes":
        return Minutes(max(0, self.value - other.value))

    def to_hours_and_minutes(self) -> str:
        hours, minutes = divmod(self.value, 60)
        if hours == 0:
            return f"{minutes} minutes"
        if minutes == 0:
            return f"{hours} hours"
        return f"{hours} hours {minutes} minutes"

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        if self.value == 1:
            return "1 minute"
        return f"{self.value} minutes"
