from __future__ import annotations

from datetime import date
from typing import Optional

from ..access.policy import AccessPolicy
from ..common.datetime_utils import format_clock, format_day_month_year, format_hours, month_bounds
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..employees.model import Employee
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _times(record: Optional[AttendanceRecord]) -> dict:
    if record is None:
        return {"check_in": None, "check_out": None, "work_hours": None, "extra_hours": None}
    return {
        "check_in": format_clock(record.check_in),
        "check_out": format_clock(record.check_out),
        "work_hours": format_hours(record.work_hours),
        "extra_hours": format_hours(record.extra_hours),
    }


class AttendanceService:
    """Read-only attendance views for employees and their HR."""

    def __init__(self, attendance: AttendanceRepository, policy: AccessPolicy):
        self._attendance = attendance
        self._policy = policy

    def my_attendance(self, *, actor: Employee, month: int, year: int) -> dict:
        try:
            month, year = int(month), int(year)
        except (TypeError, ValueError):
            raise ValidationError("Month and year must be numbers")

        start, end = month_bounds(year, month)
        records = self._attendance.list_for_employee(actor.employee_id, start_date=start, end_date=end)

        rows = []
        for r in records:
            row = {"id": r.attendance_id, "date": format_day_month_year(r.work_date), "status": r.status.value}
            row.update(_times(r))
            rows.append(row)

        present = {AttendanceStatus.PRESENT, AttendanceStatus.HALF_DAY}
        return {
            "attendance": rows,
            "summary": {
                "days_present": sum(1 for r in records if r.status in present),
                "leaves_count": sum(1 for r in records if r.status == AttendanceStatus.LEAVE),
                "total_working_days": len(records),
            },
        }

    def team_attendance(self, *, actor: Employee, work_date: date, search: Optional[str] = None) -> dict:
        self._policy.require_hr(actor, "view attendance")
        team = self._policy.team(actor, search=search, order_by="name")
        by_employee = self._attendance.list_for_employees_on_date([e.employee_id for e in team], work_date)

        rows = []
        for e in team:
            record = by_employee.get(e.employee_id)
            row = {
                "id": e.employee_id,
                "name": e.full_name,
                "email": e.email,
                "employee_code": e.employee_code,
                "status": record.status.value if record else AttendanceStatus.ABSENT.value,
            }
            row.update(_times(record))
            rows.append(row)

        return {"attendance": rows, "date": work_date.isoformat()}
