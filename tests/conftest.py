from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from hr_portal.attendance.model import AttendanceRecord
from hr_portal.container import wire
from hr_portal.core.enums import AttendanceStatus, LeaveType, RequestStatus, Role
from hr_portal.core.exceptions import ConflictError
from hr_portal.employees.model import Employee
from hr_portal.timeoff.model import NewTimeOffRequest, TimeOffRequest


class InMemoryEmployees:
    def __init__(self, employees):
        self._by_id = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._by_id.get(int(employee_id))

    def get_by_email(self, email: str) -> Optional[Employee]:
        for e in self._by_id.values():
            if e.email == email:
                return e
        return None

    def list_for_hr(self, hr_id: int, *, order_by: str = "created_at"):
        items = [e for e in self._by_id.values() if e.hr_id == hr_id and e.role == Role.EMPLOYEE]
        if order_by == "name":
            return sorted(items, key=lambda e: e.full_name)
        return sorted(items, key=lambda e: e.created_at, reverse=True)


class InMemoryTimeOff:
    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self._items: dict[int, TimeOffRequest] = {}
        self._next_id = 1
        self.update_calls = 0
        self.sum_calls = 0
        self.grouped_sum_calls = 0

    def get_by_id(self, request_id: int) -> Optional[TimeOffRequest]:
        return self._items.get(int(request_id))

    def list_requests(self, *, employee_id=None, hr_owner_id=None, status=None, limit=500):
        out = []
        for r in self._items.values():
            if employee_id is not None and r.employee_id != employee_id:
                continue
            if hr_owner_id is not None and self._employees.get_by_id(r.employee_id).hr_id != hr_owner_id:
                continue
            if status is not None and r.status != status:
                continue
            out.append(r)
        out.sort(key=lambda r: r.created_at, reverse=True)
        return out[:limit]

    def create(self, data: NewTimeOffRequest) -> TimeOffRequest:
        rid = self._next_id
        self._next_id += 1
        req = TimeOffRequest(
            request_id=rid,
            employee_id=data.employee_id,
            leave_type=data.leave_type,
            start_date=data.start_date,
            end_date=data.end_date,
            days=data.days,
            status=RequestStatus.PENDING,
            created_at=datetime(2026, 2, 1, 9, 0) + timedelta(minutes=rid),
            attachment=data.attachment,
            notes=data.notes,
        )
        self._items[rid] = req
        return req

    def update_status(
        self,
        *,
        request_id,
        expected_status,
        new_status,
        decided_by,
        decided_at,
        rejection_reason=None,
    ):
        self.update_calls += 1
        req = self._items.get(int(request_id))
        if not req or req.status != expected_status:
            raise ConflictError("Time off request was already processed")
        if new_status == RequestStatus.APPROVED:
            updated = replace(req, status=new_status, approved_by=decided_by, approved_at=decided_at)
        else:
            updated = replace(
                req,
                status=new_status,
                rejected_by=decided_by,
                rejected_at=decided_at,
                rejection_reason=rejection_reason,
            )
        self._items[req.request_id] = updated
        return updated

    def sum_approved_days(self, *, employee_id: int, leave_type: LeaveType) -> int:
        self.sum_calls += 1
        return sum(
            r.days
            for r in self._items.values()
            if r.employee_id == employee_id and r.leave_type == leave_type and r.status == RequestStatus.APPROVED
        )

    def sum_approved_days_by_employee(self, employee_ids):
        self.grouped_sum_calls += 1
        ids = set(employee_ids)
        totals: dict = {}
        for r in self._items.values():
            if r.employee_id in ids and r.status == RequestStatus.APPROVED:
                per_type = totals.setdefault(r.employee_id, {})
                per_type[r.leave_type] = per_type.get(r.leave_type, 0) + r.days
        return totals

    # test helper: seed a request in any state
    def add(self, *, employee_id, leave_type, days, status=RequestStatus.PENDING):
        req = self.create(
            NewTimeOffRequest(
                employee_id=employee_id,
                leave_type=leave_type,
                start_date=date(2026, 3, 1),
                end_date=date(2026, 3, 1) + timedelta(days=days - 1),
                days=days,
            )
        )
        if status != RequestStatus.PENDING:
            req = replace(req, status=status)
            self._items[req.request_id] = req
        return req


class InMemoryAttendance:
    def __init__(self, records=()):
        self._records = list(records)

    def list_for_employee(self, employee_id, *, start_date, end_date):
        items = [r for r in self._records if r.employee_id == employee_id and start_date <= r.work_date <= end_date]
        return sorted(items, key=lambda r: r.work_date, reverse=True)

    def list_for_employees_on_date(self, employee_ids, work_date):
        ids = set(employee_ids)
        return {r.employee_id: r for r in self._records if r.employee_id in ids and r.work_date == work_date}


class StubCursor:
    def __init__(self, *, rowcount=1, rows=()):
        self.rowcount = rowcount
        self.lastrowid = None
        self.executed = []
        self._rows = list(rows)
        self.closed = False

    def execute(self, sql, params=()):
        self.executed.append((" ".join(sql.split()), tuple(params)))

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows

    def close(self):
        self.closed = True


class StubConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class StubConnectionFactory:
    def __init__(self, cursor):
        self.cursor = cursor
        self.connections = []

    def connect(self, *, with_database=True):
        conn = StubConnection(self.cursor)
        self.connections.append(conn)
        return conn


HR_ONE = 1
HR_TWO = 2
ALICE = 10
BOB = 11
CAROL = 20


@pytest.fixture
def employees():
    created = datetime(2026, 1, 1, 8, 0)
    return InMemoryEmployees(
        [
            Employee(employee_id=HR_ONE, full_name="Hannah HR", email="hannah@corp.test", role=Role.HR,
                     password_hash=generate_password_hash("hr-secret"), created_at=created),
            Employee(employee_id=HR_TWO, full_name="Henry HR", email="henry@corp.test", role=Role.HR,
                     created_at=created),
            Employee(employee_id=ALICE, full_name="Alice Nguyen", email="alice@corp.test", role=Role.EMPLOYEE,
                     hr_id=HR_ONE, employee_code="EMP-010", password_hash=generate_password_hash("alice-secret"),
                     created_at=created + timedelta(days=1)),
            Employee(employee_id=BOB, full_name="Bob Tran", email="bob@corp.test", role=Role.EMPLOYEE,
                     hr_id=HR_ONE, employee_code="EMP-011", created_at=created + timedelta(days=2)),
            Employee(employee_id=CAROL, full_name="Carol Le", email="carol@corp.test", role=Role.EMPLOYEE,
                     hr_id=HR_TWO, employee_code="EMP-020", created_at=created + timedelta(days=3)),
        ]
    )


@pytest.fixture
def timeoff_repo(employees):
    return InMemoryTimeOff(employees)


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance(
        [
            AttendanceRecord(
                attendance_id=1,
                employee_id=ALICE,
                work_date=date(2026, 2, 2),
                status=AttendanceStatus.PRESENT,
                check_in=datetime(2026, 2, 2, 9, 5),
                check_out=datetime(2026, 2, 2, 18, 20),
                work_hours=Decimal("9.25"),
                extra_hours=Decimal("1.25"),
            ),
            AttendanceRecord(
                attendance_id=2,
                employee_id=ALICE,
                work_date=date(2026, 2, 3),
                status=AttendanceStatus.HALF_DAY,
                check_in=datetime(2026, 2, 3, 9, 0),
                check_out=datetime(2026, 2, 3, 13, 0),
                work_hours=Decimal("4.00"),
            ),
            AttendanceRecord(attendance_id=3, employee_id=ALICE, work_date=date(2026, 2, 4), status=AttendanceStatus.LEAVE),
            AttendanceRecord(attendance_id=4, employee_id=ALICE, work_date=date(2026, 3, 1), status=AttendanceStatus.PRESENT),
            AttendanceRecord(attendance_id=5, employee_id=CAROL, work_date=date(2026, 2, 2), status=AttendanceStatus.PRESENT),
        ]
    )


@pytest.fixture
def container(employees, timeoff_repo, attendance_repo):
    return wire(employees_repo=employees, attendance_repo=attendance_repo, timeoff_repo=timeoff_repo)


@pytest.fixture
def actor(employees):
    def _get(employee_id: int) -> Employee:
        return employees.get_by_id(employee_id)

    return _get


@pytest.fixture
def stub_db():
    """Connection factory whose single cursor records SQL and replays ``rows``."""

    def _build(*, rows=(), rowcount=1) -> StubConnectionFactory:
        return StubConnectionFactory(StubCursor(rowcount=rowcount, rows=rows))

    return _build
