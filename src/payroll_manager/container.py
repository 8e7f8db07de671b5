from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from .database.connection import DBConfig, DatabaseConnection
from .employees.attribution import ManagerAttributionHook
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .managers.mysql_manager_repository import MySQLManagerRepository
from .managers.repository import ManagerRepository
from .managers.service import ManagerDetailsService, ManagerService
from .notifications.channel import NotificationChannel


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    managers_repo: ManagerRepository
    employees_repo: EmployeeRepository

    notifications: NotificationChannel
    attribution: ManagerAttributionHook

    manager_details: ManagerDetailsService
    manager_service: ManagerService
    employee_service: EmployeeService


def assemble_container(
    *,
    managers_repo: ManagerRepository,
    employees_repo: EmployeeRepository,
    conn: Optional[DatabaseConnection] = None,
    notifications: Optional[NotificationChannel] = None,
    default_page_size: int = DEFAULT_PAGE_SIZE,
    max_page_size: int = MAX_PAGE_SIZE,
) -> Container:
    notifications = notifications or NotificationChannel()
    attribution = ManagerAttributionHook(managers_repo)

    return Container(
        conn=conn,
        managers_repo=managers_repo,
        employees_repo=employees_repo,
        notifications=notifications,
        attribution=attribution,
        manager_details=ManagerDetailsService(managers_repo),
        manager_service=ManagerService(managers_repo),
        employee_service=EmployeeService(
            employees_repo,
            attribution,
            notifications,
            default_page_size=default_page_size,
            max_page_size=max_page_size,
        ),
    )


def build_container(
    *,
    db_config: dict,
    default_page_size: int = DEFAULT_PAGE_SIZE,
    max_page_size: int = MAX_PAGE_SIZE,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble_container(
        managers_repo=MySQLManagerRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        conn=conn,
        default_page_size=default_page_size,
        max_page_size=max_page_size,
    )
