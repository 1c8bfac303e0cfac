from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional, Union

from ..access.policy import AccessPolicy
from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import optional_text, require_enum
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import LeaveType, RequestStatus
from ..core.exceptions import InvalidStateError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .duration import inclusive_days
from .ledger import BalanceLedger
from .model import Balance, NewTimeOffRequest, TimeOffRequest
from .repository import TimeOffRepository

logger = logging.getLogger(__name__)

DateInput = Union[date, str, None]


@dataclass(frozen=True)
class Decision:
    request: TimeOffRequest
    over_allocated: bool = False


def _as_date(value: DateInput, field_name: str) -> date:
    if value is None or value == "":
        raise ValidationError(f"{field_name} is required")
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value))


def request_row(req: TimeOffRequest, employee: Optional[Employee] = None) -> dict:
    row = {
        "id": req.request_id,
        "start_date": req.start_date.isoformat(),
        "end_date": req.end_date.isoformat(),
        "leave_type": req.leave_type.value,
        "days": req.days,
        "status": req.status.value,
        "attachment": req.attachment,
        "notes": req.notes,
        "rejection_reason": req.rejection_reason,
        "created_at": req.created_at.isoformat() if req.created_at else None,
    }
    if employee is not None:
        row.update(
            {
                "employee_id": employee.employee_id,
                "employee_name": employee.full_name,
                "employee_email": employee.email,
                "employee_code": employee.employee_code,
            }
        )
    return row


def allocations_payload(allocations: dict[LeaveType, Balance]) -> dict:
    return {t.value: b.as_dict() for t, b in allocations.items()}


class TimeOffService:
    """Time-off request lifecycle: PENDING -> APPROVED | REJECTED.

    The acting employee is always passed in by the caller; resolved
    requests are never touched again.
    """

    def __init__(
        self,
        requests: TimeOffRepository,
        employees: EmployeeRepository,
        policy: AccessPolicy,
        ledger: BalanceLedger,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._requests = requests
        self._employees = employees
        self._policy = policy
        self._ledger = ledger
        self._clock = clock

    def create(
        self,
        *,
        actor: Employee,
        leave_type: Union[LeaveType, str, None],
        start_date: DateInput,
        end_date: DateInput,
        target_employee_id: Optional[int] = None,
        notes: Optional[str] = None,
        attachment: Optional[str] = None,
    ) -> TimeOffRequest:
        leave_type = require_enum(leave_type, LeaveType, "Time off type")
        start = _as_date(start_date, "Start date")
        end = _as_date(end_date, "End date")
        if end < start:
            raise ValidationError("End date must be on or after start date")

        target = self._policy.resolve_create_target(actor, target_employee_id)

        created = self._requests.create(
            NewTimeOffRequest(
                employee_id=target.employee_id,
                leave_type=leave_type,
                start_date=start,
                end_date=end,
                days=inclusive_days(start, end),
                attachment=optional_text(attachment, "Attachment"),
                notes=optional_text(notes, "Notes"),
            )
        )
        logger.info(
            "Time off request %s created by %s for %s (%s, %s days)",
            created.request_id,
            actor.employee_id,
            target.employee_id,
            leave_type.value,
            created.days,
        )
        return created

    def _load_for_decision(self, actor: Employee, request_id: int) -> TimeOffRequest:
        self._policy.require_hr(actor, "approve or reject time off requests")

        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Time off request not found")

        owner = self._employees.get_by_id(req.employee_id)
        if not owner:
            raise NotFoundError("Employee not found")
        self._policy.ensure_can_adjudicate(actor, owner)

        if req.status != RequestStatus.PENDING:
            raise InvalidStateError(f"Time off request is already {req.status.value.lower()}")
        return req

    def approve(self, *, actor: Employee, request_id: int) -> Decision:
        req = self._load_for_decision(actor, request_id)
        updated = self._requests.update_status(
            request_id=req.request_id,
            expected_status=RequestStatus.PENDING,
            new_status=RequestStatus.APPROVED,
            decided_by=actor.employee_id,
            decided_at=self._clock(),
        )

        over_allocated = False
        if updated.leave_type in self._ledger.capped_types:
            balance = self._ledger.available_balance(updated.employee_id, updated.leave_type)
            if balance.available < 0:
                over_allocated = True
                logger.warning(
                    "Employee %s is over the %s allocation after request %s (used %s of %s)",
                    updated.employee_id,
                    updated.leave_type.value,
                    updated.request_id,
                    balance.used,
                    balance.total,
                )

        logger.info("Time off request %s approved by %s", updated.request_id, actor.employee_id)
        return Decision(request=updated, over_allocated=over_allocated)

    def reject(self, *, actor: Employee, request_id: int, reason: Optional[str] = None) -> Decision:
        req = self._load_for_decision(actor, request_id)
        updated = self._requests.update_status(
            request_id=req.request_id,
            expected_status=RequestStatus.PENDING,
            new_status=RequestStatus.REJECTED,
            decided_by=actor.employee_id,
            decided_at=self._clock(),
            rejection_reason=optional_text(reason, "Reason"),
        )
        logger.info("Time off request %s rejected by %s", updated.request_id, actor.employee_id)
        return Decision(request=updated)

    def available_balance(
        self,
        *,
        actor: Employee,
        leave_type: Union[LeaveType, str, None],
        employee_id: Optional[int] = None,
    ) -> Balance:
        leave_type = require_enum(leave_type, LeaveType, "Time off type")
        employee = self._policy.ensure_can_read(actor, employee_id)
        return self._ledger.available_balance(employee.employee_id, leave_type)

    def list_my_requests(self, *, actor: Employee) -> dict:
        reqs = self._requests.list_requests(employee_id=actor.employee_id, limit=DEFAULT_LIST_LIMIT)
        return {
            "time_off_requests": [request_row(r) for r in reqs],
            "allocations": allocations_payload(self._ledger.allocations(actor.employee_id)),
        }

    def list_team_requests(self, *, actor: Employee, search: Optional[str] = None) -> dict:
        team = {e.employee_id: e for e in self._policy.team(actor, search=search)}
        reqs = self._requests.list_requests(hr_owner_id=actor.employee_id, limit=DEFAULT_LIST_LIMIT)
        balances = self._ledger.allocations_for(team)
        return {
            "time_off_requests": [request_row(r, team[r.employee_id]) for r in reqs if r.employee_id in team],
            "allocations": {str(emp_id): allocations_payload(b) for emp_id, b in balances.items()},
        }
