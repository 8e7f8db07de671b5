from __future__ import annotations

import importlib

from payroll_manager.config import get_settings_module
from payroll_manager.container import build_container
from payroll_manager.database.connection import DBConfig
from payroll_manager.database.seed import load_demo_data


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    container = build_container(db_config=db_config)
    inserted = load_demo_data(container.managers_repo, container.employees_repo)

    print(f"OK: Seeded database -> {DBConfig.from_dict(db_config).describe()} (employees inserted={inserted})")


if __name__ == "__main__":
    main()
