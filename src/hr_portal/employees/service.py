from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash

from ..access.policy import AccessPolicy
from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionActor:
    """What we store into the Flask session after login."""

    employee_id: int
    full_name: str
    role: Role


class AuthService:
    """Use case: authenticate an account (login)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def authenticate(self, email: str, password: str) -> SessionActor:
        email = require_non_empty(email, "Email").lower()
        employee = self._employees.get_by_email(email)
        if not employee:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(employee.password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hashes
            ok = False

        if not ok:
            logger.info("Failed login for %s", email)
            raise AuthenticationError("Invalid email or password")

        return SessionActor(employee_id=employee.employee_id, full_name=employee.full_name, role=employee.role)


class EmployeeService:
    """Use case: resolve the acting employee and list an HR's team."""

    def __init__(self, policy: AccessPolicy):
        self._policy = policy

    def resolve_actor(self, session_user_id: Optional[int]) -> Employee:
        return self._policy.require_actor(session_user_id)

    def list_team(self, actor: Employee, *, search: Optional[str] = None) -> list[dict]:
        out: list[dict] = []
        for e in self._policy.team(actor, search=search):
            out.append(
                {
                    "id": e.employee_id,
                    "name": e.full_name,
                    "email": e.email,
                    "employee_code": e.employee_code,
                    "job_position": e.job_position,
                    "department": e.department,
                    "phone_number": e.phone_number,
                    "created_at": e.created_at.strftime("%Y-%m-%d %H:%M") if e.created_at else None,
                }
            )
        return out
