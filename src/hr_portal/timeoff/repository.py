from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional, Protocol, Sequence

from ..core.enums import LeaveType, RequestStatus
from .model import NewTimeOffRequest, TimeOffRequest


class TimeOffRepository(Protocol):
    def get_by_id(self, request_id: int) -> Optional[TimeOffRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        hr_owner_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 500,
    ) -> Sequence[TimeOffRequest]:
        """Matching requests, newest ``created_at`` first."""

        raise NotImplementedError

    def create(self, data: NewTimeOffRequest) -> TimeOffRequest:
        """Persist a PENDING request; the store assigns id and ``created_at``."""

        raise NotImplementedError

    def update_status(
        self,
        *,
        request_id: int,
        expected_status: RequestStatus,
        new_status: RequestStatus,
        decided_by: int,
        decided_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> TimeOffRequest:
        """Conditional write: only applies while status == ``expected_status``.

        Raises ConflictError when no row matched.
        """

        raise NotImplementedError

    def sum_approved_days(self, *, employee_id: int, leave_type: LeaveType) -> int:
        raise NotImplementedError

    def sum_approved_days_by_employee(self, employee_ids: Sequence[int]) -> Mapping[int, Mapping[LeaveType, int]]:
        """Approved days per employee and leave type, in one query.

        Employees or types with nothing approved are simply absent.
        """

        raise NotImplementedError
