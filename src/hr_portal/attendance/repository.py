from __future__ import annotations

from datetime import date
from typing import Mapping, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def list_for_employee(self, employee_id: int, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        """Records in [start_date, end_date], newest work_date first."""

        raise NotImplementedError

    def list_for_employees_on_date(
        self, employee_ids: Sequence[int], work_date: date
    ) -> Mapping[int, AttendanceRecord]:
        """employee_id -> record for that day; employees without one are absent."""

        raise NotImplementedError
