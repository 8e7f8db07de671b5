from __future__ import annotations

import pytest

from payroll_manager.core.exceptions import ConflictError
from payroll_manager.employees.model import Employee
from payroll_manager.employees.mysql_employee_repository import MySQLEmployeeRepository
from payroll_manager.managers.model import Manager


class FakeCursor:
    def __init__(self, rowcount: int):
        self.rowcount = rowcount
        self.executed = []

    def execute(self, sql, params=None):
        self.executed.append((sql, params))

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor: FakeCursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnectionFactory:
    def __init__(self, rowcount: int):
        self.cursor = FakeCursor(rowcount)
        self.connection = FakeConnection(self.cursor)

    def connect(self, *, with_database: bool = True):
        return self.connection


def _employee():
    owner = Manager(manager_id=7, name="alice")
    return Employee(employee_id=3, first_name="Frodo", last_name="Baggins", description="hero", version=4, manager=owner)


def test_update_bumps_version_when_row_matches():
    factory = FakeConnectionFactory(rowcount=1)

    updated = MySQLEmployeeRepository(factory).update(_employee(), expected_version=4)

    assert updated.version == 5
    sql, params = factory.cursor.executed[0]
    assert "version=version+1" in sql
    assert params == ("Frodo", "Baggins", "hero", 7, 3, 4)
    assert factory.connection.committed


def test_update_of_stale_version_is_a_conflict():
    factory = FakeConnectionFactory(rowcount=0)

    with pytest.raises(ConflictError):
        MySQLEmployeeRepository(factory).update(_employee(), expected_version=3)
    assert factory.connection.rolled_back
    assert not factory.connection.committed
