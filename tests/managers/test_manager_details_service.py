from __future__ import annotations

import pytest

from payroll_manager.core.exceptions import AuthenticationError, PrincipalNotFoundError, ValidationError
from payroll_manager.employees.attribution import ManagerAttributionHook
from payroll_manager.managers.service import ManagerDetailsService, ManagerService


def test_load_principal_carries_name_hash_and_roles(registered_managers):
    principal = ManagerDetailsService(registered_managers).load_principal("alice")

    assert principal.name == "alice"
    assert principal.password_hash == registered_managers.find_by_name("alice").password_hash
    assert principal.authorities == frozenset({"ROLE_MANAGER"})


def test_unknown_name_is_not_found(registered_managers):
    with pytest.raises(PrincipalNotFoundError):
        ManagerDetailsService(registered_managers).load_principal("nobody")


def test_unknown_name_fails_login(registered_managers):
    with pytest.raises(PrincipalNotFoundError):
        ManagerDetailsService(registered_managers).authenticate("nobody", "x")


def test_wrong_password_raises(registered_managers):
    with pytest.raises(AuthenticationError):
        ManagerDetailsService(registered_managers).authenticate("alice", "wrong")


def test_right_password_authenticates(registered_managers):
    principal = ManagerDetailsService(registered_managers).authenticate("alice", "alice-pw")

    assert principal.name == "alice"


def test_auto_created_manager_cannot_log_in_with_password(managers_repo):
    ManagerAttributionHook(managers_repo).resolve_manager("carol")

    with pytest.raises(AuthenticationError):
        ManagerDetailsService(managers_repo).authenticate("carol", "")


def test_register_hashes_password(managers_repo):
    manager = ManagerService(managers_repo).register(name=" dave ", password="secret-pw")

    assert manager.name == "dave"
    assert manager.password_hash != "secret-pw"
    assert ManagerDetailsService(managers_repo).authenticate("dave", "secret-pw").name == "dave"


def test_register_rejects_short_password(managers_repo):
    with pytest.raises(ValidationError):
        ManagerService(managers_repo).register(name="dave", password="123")
