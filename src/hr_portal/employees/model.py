from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: an HR or EMPLOYEE account.

    Plain data object; no DB access here.
    """

    employee_id: int
    full_name: str
    email: str
    role: Role
    hr_id: Optional[int] = None
    employee_code: Optional[str] = None
    job_position: Optional[str] = None
    department: Optional[str] = None
    phone_number: Optional[str] = None
    password_hash: str = ""
    created_at: Optional[datetime] = None

    @property
    def is_hr(self) -> bool:
        return self.role == Role.HR
