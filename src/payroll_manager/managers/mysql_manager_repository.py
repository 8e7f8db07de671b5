from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Optional

import mysql.connector

from ..core.exceptions import DuplicateManagerError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from .model import Manager
from .repository import ManagerRepository


def _roles_to_column(roles) -> str:
    return ",".join(roles)


def _roles_from_column(value: Optional[str]) -> tuple[str, ...]:
    return tuple(r for r in (value or "").split(",") if r)


def row_to_manager(row: Dict[str, Any], *, prefix: str = "") -> Manager:
    return Manager(
        manager_id=int(row[f"{prefix}manager_id"]),
        name=row[f"{prefix}name"],
        password_hash=row.get(f"{prefix}password_hash") or "",
        roles=_roles_from_column(row.get(f"{prefix}roles")),
    )


class MySQLManagerRepository(ManagerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_by_name(self, name: str) -> Optional[Manager]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT manager_id, name, password_hash, roles FROM managers WHERE name=%s",
                (name,),
            )
            row = fetchone(cur)
            return row_to_manager(row) if row else None

    def create(self, manager: Manager) -> Manager:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO managers(name, password_hash, roles) VALUES(%s,%s,%s)",
                    (manager.name, manager.password_hash, _roles_to_column(manager.roles)),
                )
                return replace(manager, manager_id=int(cur.lastrowid))
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateManagerError(f"Manager {manager.name!r} already exists") from e
            raise

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM managers")
            row = fetchone(cur)
            return int(row["n"]) if row else 0
