from __future__ import annotations

import argparse
import getpass
import importlib

from payroll_manager.config import get_settings_module
from payroll_manager.container import build_container
from payroll_manager.core.exceptions import DomainError


def main() -> None:
    parser = argparse.ArgumentParser(description="Register a manager who can log in.")
    parser.add_argument("name")
    parser.add_argument("--password", help="prompted for when omitted")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")

    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=dict(settings.DB_CONFIG))
    try:
        manager = container.manager_service.register(name=args.name, password=password)
    except DomainError as e:
        raise SystemExit(f"ERROR: {e}")

    print(f"OK: Created manager {manager.name} (id={manager.manager_id})")


if __name__ == "__main__":
    main()
