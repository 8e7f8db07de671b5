"""Ownership rules for Employee writes.

Every rule is a plain predicate over (principal, employee). Services call them
before touching storage and raise AuthorizationError on a False result.
"""

from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..employees.model import Employee
from .principal import Principal


class _EmployeeLookup(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        ...


def _manager_name(employee: Optional[Employee]) -> Optional[str]:
    if employee is None or employee.manager is None:
        return None
    return employee.manager.name


def can_save(principal: Principal, employee: Employee) -> bool:
    """Create/update: allowed on unowned employees or on the principal's own."""
    if employee.manager is None:
        return True
    return employee.manager.name == principal.name


def can_delete(principal: Principal, employee: Optional[Employee]) -> bool:
    # An unowned or missing employee has no manager name to match.
    return _manager_name(employee) == principal.name


def can_delete_by_id(principal: Principal, employee_id: int, employees: _EmployeeLookup) -> bool:
    return can_delete(principal, employees.get_by_id(employee_id))


def require_manager_role(principal: Principal) -> None:
    if not principal.has_role(Role.MANAGER):
        raise AuthorizationError("Manager role required")
