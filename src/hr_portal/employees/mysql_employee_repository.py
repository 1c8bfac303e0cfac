from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, full_name, email, password_hash, role, hr_id,
    employee_code, job_position, department, phone_number, created_at
"""

_ORDERINGS = {
    "created_at": "created_at DESC, employee_id DESC",
    "name": "full_name ASC",
}


def _to_employee(row: dict) -> Employee:
    return Employee(
        employee_id=int(row["employee_id"]),
        full_name=row["full_name"],
        email=row["email"],
        role=Role(row["role"]),
        hr_id=int(row["hr_id"]) if row.get("hr_id") is not None else None,
        employee_code=row.get("employee_code"),
        job_position=row.get("job_position"),
        department=row.get("department"),
        phone_number=row.get("phone_number"),
        password_hash=row.get("password_hash") or "",
        created_at=row.get("created_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_for_hr(self, hr_id: int, *, order_by: str = "created_at") -> Sequence[Employee]:
        ordering = _ORDERINGS.get(order_by)
        if ordering is None:
            raise ValueError(f"Unsupported ordering: {order_by!r}")
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees
                WHERE hr_id=%s AND role=%s
                ORDER BY {ordering}
                """,
                (int(hr_id), Role.EMPLOYEE.value),
            )
            return [_to_employee(r) for r in fetchall(cur)]
