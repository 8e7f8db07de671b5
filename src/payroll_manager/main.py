from __future__ import annotations

import importlib
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_sock import Sock

from .common.http import register_error_handlers
from .config import get_settings_module
from .container import Container, build_container
from .core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig
from .database.seed import load_demo_data
from .employees.controller import register as register_employees
from .home.controller import register as register_home
from .notifications.controller import register as register_notifications
from .security.controller import register as register_security


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    Without a container the app is wired to MySQL using the active settings
    module (see `config.get_settings_module`).
    """
    load_dotenv(override=False)
    app = Flask(__name__, static_folder="static", static_url_path="", template_folder="templates")

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        app.logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            app.logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            default_page_size=int(getattr(settings, "DEFAULT_PAGE_SIZE", DEFAULT_PAGE_SIZE)),
            max_page_size=int(getattr(settings, "MAX_PAGE_SIZE", MAX_PAGE_SIZE)),
        )

        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            inserted = load_demo_data(container.managers_repo, container.employees_repo)
            app.logger.info("demo seed ready (inserted=%d)", inserted)

    sock = Sock(app)

    register_error_handlers(app)
    register_security(app, container)
    register_home(app, container)
    register_employees(app, container)
    register_notifications(app, container, sock)

    return app
