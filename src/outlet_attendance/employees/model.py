from __future__ import annotations

from dataclasses import dataclass

from ..common.identifiers import EmployeeId


@dataclass(frozen=True)
class Employee:
    """Employee as seen by the attendance context (read-only here)."""

    id: EmployeeId
    name: str
    is_active: bool = True
