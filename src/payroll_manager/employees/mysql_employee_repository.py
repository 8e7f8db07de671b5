from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Optional

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..managers.mysql_manager_repository import row_to_manager
from .model import Employee, EmployeePage, SortOrder
from .repository import EmployeeRepository

_SELECT = """
    SELECT e.employee_id, e.first_name, e.last_name, e.description, e.version,
           m.manager_id AS m_manager_id, m.name AS m_name,
           m.password_hash AS m_password_hash, m.roles AS m_roles
    FROM employees e
    LEFT JOIN managers m ON m.manager_id = e.manager_id
"""


def _row_to_employee(row: Dict[str, Any]) -> Employee:
    manager = row_to_manager(row, prefix="m_") if row.get("m_manager_id") is not None else None
    return Employee(
        employee_id=int(row["employee_id"]),
        first_name=row["first_name"],
        last_name=row["last_name"],
        description=row.get("description") or "",
        version=int(row["version"]),
        manager=manager,
    )


def _manager_id(employee: Employee) -> Optional[int]:
    return employee.manager.manager_id if employee.manager else None


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.employee_id=%s", (employee_id,))
            row = fetchone(cur)
            return _row_to_employee(row) if row else None

    def find_page(self, *, page: int, size: int, sort: SortOrder) -> EmployeePage:
        # sort.column comes from a fixed whitelist, never from raw input.
        order = f"e.{sort.column} {'DESC' if sort.descending else 'ASC'}, e.employee_id ASC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM employees")
            total = int(fetchone(cur)["n"])
            cur.execute(_SELECT + f" ORDER BY {order} LIMIT %s OFFSET %s", (size, page * size))
            rows = fetchall(cur)
            return EmployeePage(
                items=[_row_to_employee(r) for r in rows],
                page=page,
                size=size,
                total_elements=total,
            )

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM employees")
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def create(self, employee: Employee) -> Employee:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(first_name, last_name, description, version, manager_id)
                VALUES(%s,%s,%s,0,%s)
                """,
                (employee.first_name, employee.last_name, employee.description, _manager_id(employee)),
            )
            return replace(employee, employee_id=int(cur.lastrowid), version=0)

    def update(self, employee: Employee, *, expected_version: int) -> Employee:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET first_name=%s, last_name=%s, description=%s, manager_id=%s, version=version+1
                WHERE employee_id=%s AND version=%s
                """,
                (
                    employee.first_name,
                    employee.last_name,
                    employee.description,
                    _manager_id(employee),
                    employee.employee_id,
                    expected_version,
                ),
            )
            if cur.rowcount != 1:
                raise ConflictError(
                    f"Employee {employee.employee_id} was modified or removed (expected version {expected_version})"
                )
            return replace(employee, version=expected_version + 1)

    def delete_by_id(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (employee_id,))
            return cur.rowcount > 0
