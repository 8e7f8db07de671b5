from __future__ import annotations

import logging

from werkzeug.security import generate_password_hash

from ..core.enums import Role
from ..core.exceptions import DuplicateManagerError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..managers.model import Manager
from ..managers.repository import ManagerRepository

logger = logging.getLogger(__name__)

DEMO_MANAGERS = (
    ("greg", "turnquist"),
    ("oliver", "gierke"),
)

DEMO_EMPLOYEES = (
    ("Frodo", "Baggins", "ring bearer", "greg"),
    ("Bilbo", "Baggins", "burglar", "greg"),
    ("Gandalf", "the Grey", "wizard", "greg"),
    ("Samwise", "Gamgee", "gardener", "oliver"),
    ("Meriadoc", "Brandybuck", "pony rider", "oliver"),
    ("Peregrin", "Took", "pipe smoker", "oliver"),
)


def _ensure_manager(managers: ManagerRepository, name: str, password: str) -> Manager:
    existing = managers.find_by_name(name)
    if existing is not None:
        return existing
    try:
        return managers.create(
            Manager(
                manager_id=None,
                name=name,
                password_hash=generate_password_hash(password),
                roles=(Role.MANAGER.value,),
            )
        )
    except DuplicateManagerError:
        return managers.find_by_name(name)


def load_demo_data(managers: ManagerRepository, employees: EmployeeRepository) -> int:
    """Insert the demo managers and employees when no employee exists yet.

    Returns the number of employees inserted (0 when the store was not empty).
    """
    if employees.count() > 0:
        return 0

    owners = {name: _ensure_manager(managers, name, password) for name, password in DEMO_MANAGERS}
    for first_name, last_name, description, owner in DEMO_EMPLOYEES:
        employees.create(
            Employee(
                employee_id=None,
                first_name=first_name,
                last_name=last_name,
                description=description,
                manager=owners[owner],
            )
        )
    logger.info("Loaded %d demo employees", len(DEMO_EMPLOYEES))
    return len(DEMO_EMPLOYEES)
