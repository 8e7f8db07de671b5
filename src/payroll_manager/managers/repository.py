from __future__ import annotations

from typing import Optional, Protocol

from .model import Manager


class ManagerRepository(Protocol):
    """Repository interface for Manager.

    Only save and lookup are offered; this repository is never exposed over HTTP.
    """

    def find_by_name(self, name: str) -> Optional[Manager]:
        raise NotImplementedError

    def create(self, manager: Manager) -> Manager:
        """Insert a new manager. Raises DuplicateManagerError when the name is taken."""
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError
