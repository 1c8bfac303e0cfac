from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access checks."""

    HR = "HR"
    EMPLOYEE = "EMPLOYEE"


class LeaveType(str, Enum):
    PAID_TIME_OFF = "PAID_TIME_OFF"
    SICK_LEAVE = "SICK_LEAVE"
    UNPAID_LEAVE = "UNPAID_LEAVE"


class RequestStatus(str, Enum):
    """Approval flow of a time-off request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the database."""

    PRESENT = "PRESENT"
    HALF_DAY = "HALF_DAY"
    LEAVE = "LEAVE"
    ABSENT = "ABSENT"
