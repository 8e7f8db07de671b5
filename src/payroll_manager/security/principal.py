from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet

from ..core.enums import Role


@dataclass(frozen=True)
class Principal:
    """The authenticated identity attached to a request.

    Passed explicitly from the controller into every service call.
    """

    name: str
    password_hash: str = field(default="", repr=False)
    authorities: FrozenSet[str] = frozenset()

    def has_role(self, role: Role) -> bool:
        return role.value in self.authorities
