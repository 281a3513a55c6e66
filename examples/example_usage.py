"""Example: use the service layer directly (no Flask).

Controllers stay thin; payroll and analytics live in the services.
"""

import importlib
import json

from dayflow_hrms.container import build_container
from dayflow_hrms.core.enums import Role
from dayflow_hrms.settings import get_settings_module


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        mirror_data_dir=settings.MIRROR_DATA_DIR,
        sync_enabled=False,
    )
    slip = container.payroll_service.salary_slip(
        current_role=Role.ADMIN,
        current_employee_id="ADMIN001",
        employee_code="EMP0001",
    )
    print(json.dumps(slip.to_dict(), indent=2))


if __name__ == "__main__":
    main()
