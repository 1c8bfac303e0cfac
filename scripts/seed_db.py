from __future__ import annotations

import importlib
from pathlib import Path

from hr_portal.config import get_settings_module
from hr_portal.database.bootstrap import DEMO_EMPLOYEE_EMAIL, DEMO_HR_EMAIL, apply_seed_sql, ensure_demo_users


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    # accounts first: seed.sql references the demo employee
    ensure_demo_users(db_config)
    seed_path = Path(__file__).resolve().parents[1] / "database" / "seed.sql"
    apply_seed_sql(db_config, seed_path=seed_path)

    print(f"OK: Seeded {db_config.get('database')} (HR: {DEMO_HR_EMAIL}, employee: {DEMO_EMPLOYEE_EMAIL})")


if __name__ == "__main__":
    main()
