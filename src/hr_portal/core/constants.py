"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import LeaveType

DEFAULT_SESSION_DAYS = 7
DEFAULT_LIST_LIMIT = 500

# Annual allocation per leave type. UNPAID_LEAVE is uncapped.
DEFAULT_LEAVE_ALLOCATIONS = {
    LeaveType.PAID_TIME_OFF: 24,
    LeaveType.SICK_LEAVE: 7,
}
