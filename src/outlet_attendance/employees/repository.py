from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..common.identifiers import EmployeeId, OutletId
from ..common.temporal import DateTime
from .model import Employee


class EmployeeRepository(Protocol):
    """Employee lookups needed by the attendance handlers.

    Note (DIP): handlers depend on this interface, never on a concrete database.
    """

    def find_by_id(self, employee_id: EmployeeId) -> Optional[Employee]:
        raise NotImplementedError

    def is_employee_assigned_to_outlet(self, employee_id: EmployeeId, outlet_id: OutletId, date: DateTime) -> bool:
        raise NotImplementedError

    def find_scheduled_employee_by_user_id(self, user_id: int, date: DateTime) -> Optional[EmployeeId]:
        """Employee scheduled on ``date`` at the outlet owned by ``user_id``."""

        raise NotImplementedError

    def find_employees_assigned_to_outlet(self, outlet_id: OutletId, date: DateTime) -> Sequence[Employee]:
        raise NotImplementedError
