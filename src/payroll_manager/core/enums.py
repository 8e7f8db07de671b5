from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles granted to a principal."""

    MANAGER = "ROLE_MANAGER"


class EmployeeEvent(str, Enum):
    """Broadcast destinations for employee changes (relative to the topic prefix)."""

    CREATED = "newEmployee"
    UPDATED = "updateEmployee"
    DELETED = "deleteEmployee"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"
