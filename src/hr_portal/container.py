from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .access.policy import AccessPolicy
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import AuthService, EmployeeService
from .timeoff.ledger import BalanceLedger
from .timeoff.mysql_timeoff_repository import MySQLTimeOffRepository
from .timeoff.repository import TimeOffRepository
from .timeoff.service import TimeOffService


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    timeoff_repo: TimeOffRepository

    policy: AccessPolicy
    ledger: BalanceLedger

    auth_service: AuthService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    timeoff_service: TimeOffService

    conn: Optional[DatabaseConnection] = None


def wire(
    *,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    timeoff_repo: TimeOffRepository,
    leave_allocations: Optional[Mapping] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    policy = AccessPolicy(employees_repo)
    ledger = BalanceLedger(timeoff_repo, allocations=leave_allocations)

    return Container(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        timeoff_repo=timeoff_repo,
        policy=policy,
        ledger=ledger,
        auth_service=AuthService(employees_repo),
        employee_service=EmployeeService(policy),
        attendance_service=AttendanceService(attendance_repo, policy),
        timeoff_service=TimeOffService(timeoff_repo, employees_repo, policy, ledger),
        conn=conn,
    )


def build_container(*, db_config: dict, leave_allocations: Optional[Mapping] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire(
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        timeoff_repo=MySQLTimeOffRepository(conn),
        leave_allocations=leave_allocations,
        conn=conn,
    )
