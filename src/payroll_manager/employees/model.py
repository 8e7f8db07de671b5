from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.enums import SortDirection
from ..managers.model import Manager


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    `version` is bumped by the repository on every successful update and is
    compared against the caller's copy to reject stale writes.
    """

    employee_id: Optional[int]
    first_name: str
    last_name: str
    description: str = ""
    version: int = 0
    manager: Optional[Manager] = None


# API field name -> column used for ordering.
SORTABLE_FIELDS = {
    "id": "employee_id",
    "firstName": "first_name",
    "lastName": "last_name",
    "description": "description",
}


@dataclass(frozen=True)
class SortOrder:
    field: str = "id"
    direction: SortDirection = SortDirection.ASC

    @property
    def column(self) -> str:
        return SORTABLE_FIELDS[self.field]

    @property
    def descending(self) -> bool:
        return self.direction == SortDirection.DESC


@dataclass(frozen=True)
class EmployeePage:
    items: Sequence[Employee]
    page: int
    size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return (self.total_elements + self.size - 1) // self.size

    @property
    def has_next(self) -> bool:
        return self.page + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 0
