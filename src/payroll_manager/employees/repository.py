from __future__ import annotations

from typing import Optional, Protocol

from .model import Employee, EmployeePage, SortOrder


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Note: services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def find_page(self, *, page: int, size: int, sort: SortOrder) -> EmployeePage:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def create(self, employee: Employee) -> Employee:
        raise NotImplementedError

    def update(self, employee: Employee, *, expected_version: int) -> Employee:
        """Write `employee` if the stored version equals `expected_version`.

        Returns the stored employee with its version incremented by one.
        Raises ConflictError when the versions differ or the row is gone.
        """
        raise NotImplementedError

    def delete_by_id(self, employee_id: int) -> bool:
        raise NotImplementedError
