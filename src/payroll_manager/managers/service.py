from __future__ import annotations

import logging

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, PrincipalNotFoundError
from ..security.principal import Principal
from .model import Manager
from .repository import ManagerRepository

logger = logging.getLogger(__name__)


def to_principal(manager: Manager) -> Principal:
    return Principal(
        name=manager.name,
        password_hash=manager.password_hash,
        authorities=frozenset(manager.roles),
    )


class ManagerDetailsService:
    """Use case: turn a stored Manager into a request principal (login)."""

    def __init__(self, managers: ManagerRepository):
        self._managers = managers

    def load_principal(self, name: str) -> Principal:
        manager = self._managers.find_by_name(name)
        if manager is None:
            raise PrincipalNotFoundError(f"No manager named {name!r}")
        return to_principal(manager)

    def authenticate(self, name: str, password: str) -> Principal:
        principal = self.load_principal(name)

        try:
            ok = bool(principal.password_hash) and check_password_hash(principal.password_hash, password)
        except ValueError:
            # e.g. a hash written by another tool that werkzeug cannot parse
            ok = False

        if not ok:
            logger.info("Rejected login for %s", name)
            raise AuthenticationError("Bad credentials")

        return principal


class ManagerService:
    """Use case: register managers with login credentials."""

    def __init__(self, managers: ManagerRepository):
        self._managers = managers

    def register(self, *, name: str, password: str, roles: tuple[str, ...] = (Role.MANAGER.value,)) -> Manager:
        name = require_non_empty(name, "Name")
        require_min_length(password, "Password", 6)
        return self._managers.create(
            Manager(manager_id=None, name=name, password_hash=generate_password_hash(password), roles=roles)
        )
