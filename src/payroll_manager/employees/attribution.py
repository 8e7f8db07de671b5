from __future__ import annotations

import logging
from dataclasses import replace

from ..core.enums import Role
from ..core.exceptions import DuplicateManagerError
from ..managers.model import Manager
from ..managers.repository import ManagerRepository
from ..security.principal import Principal
from .model import Employee

logger = logging.getLogger(__name__)


class ManagerAttributionHook:
    """Pre-write step that makes the acting principal's Manager own the employee.

    Runs on both create and update, after authorization, and always replaces
    whatever manager the caller submitted.
    """

    def __init__(self, managers: ManagerRepository):
        self._managers = managers

    def resolve_manager(self, name: str) -> Manager:
        manager = self._managers.find_by_name(name)
        if manager is not None:
            return manager

        try:
            manager = self._managers.create(Manager(manager_id=None, name=name, roles=(Role.MANAGER.value,)))
            logger.info("Created manager record for %s", name)
            return manager
        except DuplicateManagerError:
            # A concurrent request created it first; use that row.
            manager = self._managers.find_by_name(name)
            if manager is None:
                raise
            return manager

    def before_save(self, employee: Employee, principal: Principal) -> Employee:
        return replace(employee, manager=self.resolve_manager(principal.name))
