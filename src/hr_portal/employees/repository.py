from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Services depend on this protocol, never on a concrete database.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_for_hr(self, hr_id: int, *, order_by: str = "created_at") -> Sequence[Employee]:
        """EMPLOYEE accounts owned by ``hr_id``.

        ``order_by`` is ``"created_at"`` (newest first) or ``"name"`` (A-Z).
        """

        raise NotImplementedError
