from __future__ import annotations

from typing import Iterable, Mapping, Optional

from ..core.constants import DEFAULT_LEAVE_ALLOCATIONS
from ..core.enums import LeaveType
from ..core.exceptions import ValidationError
from .model import Balance
from .repository import TimeOffRepository


class BalanceLedger:
    """Remaining leave per employee and leave type.

    Balances are derived from the approved requests on every call; there is
    no stored counter to keep in sync. ``available`` goes negative when more
    days were approved than allocated.
    """

    def __init__(self, requests: TimeOffRepository, *, allocations: Optional[Mapping] = None):
        self._requests = requests
        source = allocations if allocations is not None else DEFAULT_LEAVE_ALLOCATIONS
        self._allocations = {LeaveType(k): int(v) for k, v in source.items()}

    @property
    def capped_types(self) -> list[LeaveType]:
        return [t for t in LeaveType if t in self._allocations]

    def total_for(self, leave_type: LeaveType) -> int:
        try:
            return self._allocations[leave_type]
        except KeyError:
            raise ValidationError(f"{leave_type.value} has no allocation")

    def available_balance(self, employee_id: int, leave_type: LeaveType) -> Balance:
        total = self.total_for(leave_type)
        used = int(self._requests.sum_approved_days(employee_id=int(employee_id), leave_type=leave_type))
        return Balance(total=total, used=used, available=total - used)

    def allocations(self, employee_id: int) -> dict[LeaveType, Balance]:
        return {t: self.available_balance(employee_id, t) for t in self.capped_types}

    def allocations_for(self, employee_ids: Iterable[int]) -> dict[int, dict[LeaveType, Balance]]:
        """``allocations`` for many employees from a single grouped sum."""
        ids = [int(i) for i in employee_ids]
        used = self._requests.sum_approved_days_by_employee(ids)
        out: dict[int, dict[LeaveType, Balance]] = {}
        for emp_id in ids:
            per_type = used.get(emp_id, {})
            out[emp_id] = {}
            for t in self.capped_types:
                total = self._allocations[t]
                spent = int(per_type.get(t, 0))
                out[emp_id][t] = Balance(total=total, used=spent, available=total - spent)
        return out
