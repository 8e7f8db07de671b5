from __future__ import annotations

import threading
from dataclasses import replace
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from payroll_manager.core.enums import Role
from payroll_manager.core.exceptions import ConflictError, DuplicateManagerError
from payroll_manager.employees.model import Employee, EmployeePage, SortOrder
from payroll_manager.managers.model import Manager
from payroll_manager.security.principal import Principal


class InMemoryManagers:
    def __init__(self):
        self._by_name: dict[str, Manager] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def find_by_name(self, name: str) -> Optional[Manager]:
        return self._by_name.get(name)

    def create(self, manager: Manager) -> Manager:
        with self._lock:
            if manager.name in self._by_name:
                raise DuplicateManagerError(manager.name)
            stored = replace(manager, manager_id=self._next_id)
            self._next_id += 1
            self._by_name[manager.name] = stored
            return stored

    def count(self) -> int:
        return len(self._by_name)


class InMemoryEmployees:
    def __init__(self):
        self._rows: dict[int, Employee] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._rows.get(employee_id)

    def find_page(self, *, page: int, size: int, sort: SortOrder) -> EmployeePage:
        attr = {"id": "employee_id", "firstName": "first_name", "lastName": "last_name"}.get(sort.field, sort.field)
        rows = sorted(self._rows.values(), key=lambda e: (getattr(e, attr), e.employee_id), reverse=sort.descending)
        return EmployeePage(
            items=rows[page * size : (page + 1) * size],
            page=page,
            size=size,
            total_elements=len(rows),
        )

    def count(self) -> int:
        return len(self._rows)

    def create(self, employee: Employee) -> Employee:
        with self._lock:
            stored = replace(employee, employee_id=self._next_id, version=0)
            self._next_id += 1
            self._rows[stored.employee_id] = stored
            return stored

    def update(self, employee: Employee, *, expected_version: int) -> Employee:
        with self._lock:
            current = self._rows.get(employee.employee_id)
            if current is None or current.version != expected_version:
                raise ConflictError(f"stale write for {employee.employee_id}")
            stored = replace(employee, version=expected_version + 1)
            self._rows[stored.employee_id] = stored
            return stored

    def delete_by_id(self, employee_id: int) -> bool:
        with self._lock:
            return self._rows.pop(employee_id, None) is not None


def _principal(name: str, *roles: str) -> Principal:
    return Principal(name=name, authorities=frozenset(roles or (Role.MANAGER.value,)))


@pytest.fixture
def managers_repo():
    return InMemoryManagers()


@pytest.fixture
def employees_repo():
    return InMemoryEmployees()


@pytest.fixture
def make_principal():
    return _principal


@pytest.fixture
def alice():
    return _principal("alice")


@pytest.fixture
def bob():
    return _principal("bob")


@pytest.fixture
def registered_managers(managers_repo):
    for name, password in (("alice", "alice-pw"), ("bob", "bob-pw")):
        managers_repo.create(
            Manager(
                manager_id=None,
                name=name,
                password_hash=generate_password_hash(password),
                roles=(Role.MANAGER.value,),
            )
        )
    return managers_repo
