from __future__ import annotations

import secrets
from dataclasses import dataclass

from .validators import require_positive_int


@dataclass(frozen=True)
class _PositiveId:
    value: int

    def __post_init__(self):
        object.__setattr__(self, "value", require_positive_int(self.value, type(self).__name__))

    @classmethod
    def from_number(cls, value: int):
        return cls(value)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class AttendanceId(_PositiveId):
    @classmethod
    def generate(cls) -> "AttendanceId":
        """Random id for aggregates built outside a repository (tests, previews)."""
        return cls(secrets.randbelow(999_999) + 1)


@dataclass(frozen=True)
class EmployeeId(_PositiveId):
    pass


@dataclass(frozen=True)
class OutletId(_PositiveId):
    pass
