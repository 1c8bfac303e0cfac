from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional, Sequence

from ..core.enums import LeaveType, RequestStatus
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone, in_clause
from .model import NewTimeOffRequest, TimeOffRequest
from .repository import TimeOffRepository

_COLUMNS = """
    r.request_id, r.employee_id, r.leave_type, r.start_date, r.end_date, r.days,
    r.status, r.attachment, r.notes, r.rejection_reason,
    r.approved_by, r.approved_at, r.rejected_by, r.rejected_at, r.created_at
"""


def _to_request(r: dict) -> TimeOffRequest:
    return TimeOffRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        days=int(as_decimal(r["days"])),
        status=RequestStatus(r["status"]),
        created_at=r["created_at"],
        attachment=r.get("attachment"),
        notes=r.get("notes"),
        rejection_reason=r.get("rejection_reason"),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        rejected_by=r.get("rejected_by"),
        rejected_at=r.get("rejected_at"),
    )


class MySQLTimeOffRepository(TimeOffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select_one(self, cur, request_id: int) -> Optional[TimeOffRequest]:
        cur.execute(f"SELECT {_COLUMNS} FROM time_off_requests r WHERE r.request_id=%s", (int(request_id),))
        row = fetchone(cur)
        return _to_request(row) if row else None

    def get_by_id(self, request_id: int) -> Optional[TimeOffRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._select_one(cur, request_id)

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        hr_owner_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 500,
    ) -> Sequence[TimeOffRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if employee_id is not None:
            clauses.append("r.employee_id=%s")
            params.append(int(employee_id))
        if hr_owner_id is not None:
            clauses.append("e.hr_id=%s")
            params.append(int(hr_owner_id))
        if status is not None:
            clauses.append("r.status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_off_requests r
                JOIN employees e ON e.employee_id = r.employee_id
                WHERE {where}
                ORDER BY r.created_at DESC, r.request_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def create(self, data: NewTimeOffRequest) -> TimeOffRequest:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_off_requests(
                    employee_id, leave_type, start_date, end_date, days, attachment, notes, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(data.employee_id),
                    data.leave_type.value,
                    data.start_date,
                    data.end_date,
                    int(data.days),
                    data.attachment,
                    data.notes,
                    RequestStatus.PENDING.value,
                ),
            )
            return self._select_one(cur, int(cur.lastrowid))

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
        if new_status == RequestStatus.APPROVED:
            assignments = "status=%s, approved_by=%s, approved_at=%s"
            params: list[object] = [new_status.value, int(decided_by), decided_at]
        elif new_status == RequestStatus.REJECTED:
            assignments = "status=%s, rejected_by=%s, rejected_at=%s, rejection_reason=%s"
            params = [new_status.value, int(decided_by), decided_at, rejection_reason]
        else:
            raise ValueError(f"Unsupported target status: {new_status!r}")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE time_off_requests
                SET {assignments}
                WHERE request_id=%s AND status=%s
                """,
                tuple(params + [int(request_id), expected_status.value]),
            )
            if cur.rowcount == 0:
                raise ConflictError("Time off request was already processed")
            return self._select_one(cur, request_id)

    def sum_approved_days(self, *, employee_id: int, leave_type: LeaveType) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE(SUM(days), 0) AS used
                FROM time_off_requests
                WHERE employee_id=%s AND leave_type=%s AND status=%s
                """,
                (int(employee_id), leave_type.value, RequestStatus.APPROVED.value),
            )
            row = fetchone(cur)
            return int(as_decimal(row["used"])) if row else 0

    def sum_approved_days_by_employee(self, employee_ids: Sequence[int]) -> Mapping[int, Mapping[LeaveType, int]]:
        ids = [int(i) for i in employee_ids]
        if not ids:
            return {}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT employee_id, leave_type, COALESCE(SUM(days), 0) AS used
                FROM time_off_requests
                WHERE status=%s AND employee_id IN ({in_clause(ids)})
                GROUP BY employee_id, leave_type
                """,
                tuple([RequestStatus.APPROVED.value] + ids),
            )
            totals: dict[int, dict[LeaveType, int]] = {}
            for r in fetchall(cur):
                totals.setdefault(int(r["employee_id"]), {})[LeaveType(r["leave_type"])] = int(as_decimal(r["used"]))
            return totals
