from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..core.enums import Role


@dataclass(frozen=True)
class Manager:
    """Domain entity: Manager.

    The name doubles as the principal identity and is unique across managers.
    Auto-created managers carry an empty password hash and cannot log in with a password.
    """

    manager_id: Optional[int]
    name: str
    password_hash: str = ""
    roles: Tuple[str, ...] = (Role.MANAGER.value,)

    def has_role(self, role: Role) -> bool:
        return role.value in self.roles
