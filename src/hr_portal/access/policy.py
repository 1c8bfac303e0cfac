"""Who may act on which employee's data.

Every service receives the acting employee explicitly; nothing here reads
the Flask session. HR accounts only ever see and adjudicate the EMPLOYEE
accounts whose ``hr_id`` points at them.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository


def matches_search(employee: Employee, query: Optional[str]) -> bool:
    """Case-insensitive substring match on name, email or employee code."""
    q = (query or "").strip().lower()
    if not q:
        return True
    for value in (employee.full_name, employee.email, employee.employee_code):
        if value and q in value.lower():
            return True
    return False


def filter_by_search(employees: Iterable[Employee], query: Optional[str]) -> List[Employee]:
    return [e for e in employees if matches_search(e, query)]


def owns(hr: Employee, employee: Employee) -> bool:
    return hr.is_hr and employee.role == Role.EMPLOYEE and employee.hr_id == hr.employee_id


class AccessPolicy:
    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def require_actor(self, actor_id: Optional[int]) -> Employee:
        if actor_id is None:
            raise AuthenticationError("Unauthorized")
        actor = self._employees.get_by_id(int(actor_id))
        if not actor:
            raise AuthenticationError("User not found")
        return actor

    @staticmethod
    def require_hr(actor: Employee, action: str = "perform this action") -> None:
        if not actor.is_hr:
            raise AuthorizationError(f"Only HR can {action}")

    def resolve_create_target(self, actor: Employee, target_employee_id: Optional[int]) -> Employee:
        """Employee a new request is filed for.

        Employees file for themselves only. HR must name one of their own
        employees; HR accounts have no owner to adjudicate their requests.
        """
        if not actor.is_hr:
            if target_employee_id is None or int(target_employee_id) == actor.employee_id:
                return actor
            raise AuthorizationError("Employees can only create requests for themselves")

        if target_employee_id is None:
            raise ValidationError("Employee is required")
        if int(target_employee_id) == actor.employee_id:
            raise AuthorizationError("HR cannot create time off requests for themselves")

        target = self._employees.get_by_id(int(target_employee_id))
        if not target:
            raise NotFoundError("Employee not found")
        if not owns(actor, target):
            raise AuthorizationError("Employee doesn't belong to you")
        return target

    @staticmethod
    def ensure_can_adjudicate(actor: Employee, owner: Employee) -> None:
        if not actor.is_hr:
            raise AuthorizationError("Only HR can approve or reject time off requests")
        if not owns(actor, owner):
            raise AuthorizationError("Unauthorized to act on this request")

    def ensure_can_read(self, actor: Employee, employee_id: Optional[int]) -> Employee:
        """Employee whose data ``actor`` asked for (defaults to self)."""
        if employee_id is None or int(employee_id) == actor.employee_id:
            return actor
        if not actor.is_hr:
            raise AuthorizationError("You can only view your own records")
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        if not owns(actor, employee):
            raise AuthorizationError("Employee doesn't belong to you")
        return employee

    def team(self, actor: Employee, *, search: Optional[str] = None, order_by: str = "created_at") -> List[Employee]:
        """HR's own employees, narrowed by ``search``."""
        self.require_hr(actor, "view employees")
        return filter_by_search(self._employees.list_for_hr(actor.employee_id, order_by=order_by), search)
