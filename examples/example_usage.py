"""Example: drive the time-off services directly, without Flask.

Controllers are a thin layer; all rules live in the services.
"""

import importlib

from hr_portal.config import get_settings_module
from hr_portal.container import build_container
from hr_portal.core.enums import LeaveType
from hr_portal.database.bootstrap import DEMO_EMPLOYEE_EMAIL


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    employee = container.employees_repo.get_by_email(DEMO_EMPLOYEE_EMAIL)
    actor = container.employee_service.resolve_actor(employee.employee_id)
    print(container.timeoff_service.available_balance(actor=actor, leave_type=LeaveType.PAID_TIME_OFF))
    print(container.timeoff_service.list_my_requests(actor=actor))


if __name__ == "__main__":
    main()
