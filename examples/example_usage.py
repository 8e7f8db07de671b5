"""Example: use the service layer directly (no Flask).

Controllers are thin; ownership rules and attribution live in the services.
"""

import importlib

from payroll_manager.config import get_settings_module
from payroll_manager.container import build_container
from payroll_manager.employees.service import EmployeeInput


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    greg = container.manager_details.load_principal("greg")

    created = container.employee_service.create(
        greg, EmployeeInput(first_name="Tom", last_name="Bombadil", description="river master")
    )
    print(created)

    for employee in container.employee_service.list_page(greg, size=10).items:
        print(employee.employee_id, employee.first_name, employee.last_name, employee.manager.name if employee.manager else "-")


if __name__ == "__main__":
    main()
