from __future__ import annotations

from flask import Flask, render_template

from ..container import Container
from ..core.constants import EMPLOYEES_PATH, WEBSOCKET_ENDPOINT
from ..core.enums import EmployeeEvent
from ..notifications.channel import topic_for
from ..security.web import principal_required


def register(app: Flask, container: Container) -> None:
    @app.route("/", endpoint="index")
    @principal_required
    def index(principal):
        return render_template(
            "index.html",
            manager_name=principal.name,
            employees_path=EMPLOYEES_PATH,
            websocket_path=WEBSOCKET_ENDPOINT,
            topics=[topic_for(event) for event in EmployeeEvent],
            page_size=container.employee_service.default_page_size,
        )
