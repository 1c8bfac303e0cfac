from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveType, RequestStatus


@dataclass(frozen=True)
class TimeOffRequest:
    request_id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    days: int
    status: RequestStatus
    created_at: datetime
    attachment: Optional[str] = None
    notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejected_by: Optional[int] = None
    rejected_at: Optional[datetime] = None

    @property
    def is_resolved(self) -> bool:
        return self.status != RequestStatus.PENDING


@dataclass(frozen=True)
class NewTimeOffRequest:
    """Validated input for the store; ``days`` is already computed."""

    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    days: int
    attachment: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class Balance:
    total: int
    used: int
    available: int

    def as_dict(self) -> dict:
        return {"total": self.total, "used": self.used, "available": self.available}
