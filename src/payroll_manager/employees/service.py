from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from ..common.validators import optional_text, require_max_length, require_non_empty
from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, MAX_ROW_OFFSET
from ..core.enums import EmployeeEvent, SortDirection
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..managers.model import Manager
from ..notifications.channel import NotificationChannel
from ..security.authorization import can_delete_by_id, can_save, require_manager_role
from ..security.principal import Principal
from .attribution import ManagerAttributionHook
from .model import SORTABLE_FIELDS, Employee, EmployeePage, SortOrder
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 255


@dataclass(frozen=True)
class EmployeeInput:
    """Fields a caller may submit for an employee.

    `None` means "not submitted" (relevant for partial updates). `manager` is
    the submitted manager name, used only by the ownership check; storage
    always receives the acting principal's manager.
    """

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    description: Optional[str] = None
    manager: Optional[str] = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "EmployeeInput":
        if not isinstance(data, Mapping):
            raise ValidationError("Request body must be a JSON object")
        manager = data.get("manager")
        if isinstance(manager, Mapping):
            manager = manager.get("name")
        if manager is not None and not isinstance(manager, str):
            raise ValidationError("manager must be a name or an object with a name")
        return cls(
            first_name=data.get("firstName"),
            last_name=data.get("lastName"),
            description=data.get("description"),
            manager=manager or None,
        )


def parse_sort(value: Optional[str]) -> SortOrder:
    """Parse `field[,asc|desc]` as used by the collection endpoint."""
    if not value:
        return SortOrder()
    parts = [p.strip() for p in value.split(",")]
    field_name = parts[0]
    if field_name not in SORTABLE_FIELDS:
        raise ValidationError(f"Cannot sort by {field_name!r}")
    direction = SortDirection.ASC
    if len(parts) > 1 and parts[1]:
        try:
            direction = SortDirection(parts[1].lower())
        except ValueError:
            raise ValidationError(f"Unknown sort direction {parts[1]!r}")
    return SortOrder(field=field_name, direction=direction)


def _validated(first_name: Any, last_name: Any, description: Any) -> tuple[str, str, str]:
    first_name = require_max_length(require_non_empty(first_name, "firstName"), "firstName", NAME_MAX_LENGTH)
    last_name = require_max_length(require_non_empty(last_name, "lastName"), "lastName", NAME_MAX_LENGTH)
    description = require_max_length(optional_text(description, "description"), "description", DESCRIPTION_MAX_LENGTH)
    return first_name, last_name, description


class EmployeeService:
    """Use case: read and write employees on behalf of a principal.

    Write path: role gate -> ownership check -> manager attribution -> storage -> broadcast.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        attribution: ManagerAttributionHook,
        channel: Optional[NotificationChannel] = None,
        *,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
    ):
        self._employees = employees
        self._attribution = attribution
        self._channel = channel
        self._default_page_size = default_page_size
        self._max_page_size = max_page_size

    @property
    def default_page_size(self) -> int:
        return self._default_page_size

    def list_page(
        self,
        principal: Principal,
        *,
        page: int = 0,
        size: Optional[int] = None,
        sort: Optional[SortOrder] = None,
    ) -> EmployeePage:
        require_manager_role(principal)
        if page < 0:
            raise ValidationError("page must not be negative")
        size = self._default_page_size if size is None else size
        if size <= 0:
            raise ValidationError("size must be positive")
        size = min(size, self._max_page_size)
        if page * size > MAX_ROW_OFFSET:
            raise ValidationError("page is out of range")
        return self._employees.find_page(page=page, size=size, sort=sort or SortOrder())

    def get(self, principal: Principal, employee_id: int) -> Employee:
        require_manager_role(principal)
        employee = self._employees.get_by_id(employee_id)
        if employee is None:
            raise NotFoundError(f"Employee {employee_id} not found")
        return employee

    def create(self, principal: Principal, data: EmployeeInput) -> Employee:
        require_manager_role(principal)
        first_name, last_name, description = _validated(data.first_name, data.last_name, data.description)

        candidate = Employee(
            employee_id=None,
            first_name=first_name,
            last_name=last_name,
            description=description,
            manager=Manager(manager_id=None, name=data.manager) if data.manager else None,
        )
        self._authorize_save(principal, candidate)

        created = self._employees.create(self._attribution.before_save(candidate, principal))
        logger.info("%s created employee %s", principal.name, created.employee_id)
        self._notify(EmployeeEvent.CREATED, created.employee_id)
        return created

    def update(
        self,
        principal: Principal,
        employee_id: int,
        data: EmployeeInput,
        *,
        expected_version: Optional[int] = None,
        partial: bool = False,
    ) -> Employee:
        require_manager_role(principal)
        stored = self._employees.get_by_id(employee_id)
        if stored is None:
            raise NotFoundError(f"Employee {employee_id} not found")

        # Denial wins over a malformed body for records owned by someone else.
        if stored.manager is not None:
            self._authorize_save(principal, stored)

        if partial:
            first_name = stored.first_name if data.first_name is None else data.first_name
            last_name = stored.last_name if data.last_name is None else data.last_name
            description = stored.description if data.description is None else data.description
        else:
            first_name, last_name, description = data.first_name, data.last_name, data.description
        first_name, last_name, description = _validated(first_name, last_name, description)

        # Ownership cannot be cleared by the caller: an owned record keeps its
        # stored manager for the check.
        manager = stored.manager
        if manager is None and data.manager:
            manager = Manager(manager_id=None, name=data.manager)

        candidate = replace(
            stored,
            first_name=first_name,
            last_name=last_name,
            description=description,
            manager=manager,
        )
        self._authorize_save(principal, candidate)

        version = stored.version if expected_version is None else expected_version
        if version != stored.version:
            raise ConflictError(f"Employee {employee_id} is at version {stored.version}, not {version}")
        updated = self._employees.update(self._attribution.before_save(candidate, principal), expected_version=version)
        logger.info("%s updated employee %s (version %s)", principal.name, employee_id, updated.version)
        self._notify(EmployeeEvent.UPDATED, employee_id)
        return updated

    def delete(self, principal: Principal, employee_id: int) -> None:
        require_manager_role(principal)
        if not can_delete_by_id(principal, employee_id, self._employees):
            logger.info("Denied delete of employee %s for %s", employee_id, principal.name)
            raise AuthorizationError("Access is denied")

        if not self._employees.delete_by_id(employee_id):
            raise NotFoundError(f"Employee {employee_id} not found")
        logger.info("%s deleted employee %s", principal.name, employee_id)
        self._notify(EmployeeEvent.DELETED, employee_id)

    def _authorize_save(self, principal: Principal, candidate: Employee) -> None:
        if not can_save(principal, candidate):
            logger.info("Denied save of employee %s for %s", candidate.employee_id, principal.name)
            raise AuthorizationError("Access is denied")

    def _notify(self, event: EmployeeEvent, employee_id: int) -> None:
        if self._channel is not None:
            self._channel.publish_employee_event(event, employee_id)
