from __future__ import annotations

from typing import Any, Dict, Optional

from flask import Flask, jsonify, request, url_for

from ..common.validators import parse_non_negative_int
from ..container import Container
from ..core.constants import EMPLOYEES_PATH
from ..core.exceptions import ValidationError
from ..security.web import principal_required
from .model import Employee, EmployeePage
from .service import EmployeeInput, parse_sort


def employee_to_json(employee: Employee) -> Dict[str, Any]:
    # The version travels in the ETag header only.
    return {
        "id": employee.employee_id,
        "firstName": employee.first_name,
        "lastName": employee.last_name,
        "description": employee.description,
        "manager": {"name": employee.manager.name} if employee.manager else None,
        "_links": {"self": {"href": url_for("get_employee", employee_id=employee.employee_id)}},
    }


def page_to_json(page: EmployeePage, *, sort: Optional[str]) -> Dict[str, Any]:
    def link(number: int) -> Dict[str, str]:
        params = {"page": number, "size": page.size}
        if sort:
            params["sort"] = sort
        return {"href": url_for("list_employees", **params)}

    links = {"self": link(page.page)}
    if page.total_pages:
        links["first"] = link(0)
        links["last"] = link(page.total_pages - 1)
    if page.has_previous:
        links["prev"] = link(page.page - 1)
    if page.has_next:
        links["next"] = link(page.page + 1)

    return {
        "employees": [employee_to_json(e) for e in page.items],
        "page": {
            "size": page.size,
            "totalElements": page.total_elements,
            "totalPages": page.total_pages,
            "number": page.page,
        },
        "_links": links,
    }


def _json_body() -> EmployeeInput:
    data = request.get_json(silent=True)
    if data is None:
        raise ValidationError("Request body must be JSON")
    return EmployeeInput.from_json(data)


def _if_match_version() -> Optional[int]:
    if_match = request.if_match
    if not if_match or if_match.star_tag:
        return None
    tags = if_match.as_set(include_weak=True)
    if len(tags) != 1:
        raise ValidationError("If-Match must carry exactly one version")
    try:
        return int(next(iter(tags)))
    except ValueError:
        raise ValidationError("If-Match must carry a numeric version")


def _item_response(employee: Employee, status: int = 200):
    response = jsonify(employee_to_json(employee))
    response.status_code = status
    response.set_etag(str(employee.version))
    return response


def register(app: Flask, container: Container) -> None:
    service = container.employee_service

    @app.route(EMPLOYEES_PATH, methods=["GET"], endpoint="list_employees")
    @principal_required
    def list_employees(principal):
        page_number = parse_non_negative_int(request.args.get("page"), "page", 0)
        size = request.args.get("size")
        sort = request.args.get("sort")
        page = service.list_page(
            principal,
            page=page_number,
            size=parse_non_negative_int(size, "size", 0) if size else None,
            sort=parse_sort(sort),
        )
        return jsonify(page_to_json(page, sort=sort))

    @app.route(f"{EMPLOYEES_PATH}/<int:employee_id>", methods=["GET"], endpoint="get_employee")
    @principal_required
    def get_employee(principal, employee_id: int):
        return _item_response(service.get(principal, employee_id))

    @app.route(EMPLOYEES_PATH, methods=["POST"], endpoint="create_employee")
    @principal_required
    def create_employee(principal):
        created = service.create(principal, _json_body())
        response = _item_response(created, status=201)
        response.headers["Location"] = url_for("get_employee", employee_id=created.employee_id)
        return response

    @app.route(f"{EMPLOYEES_PATH}/<int:employee_id>", methods=["PUT", "PATCH"], endpoint="update_employee")
    @principal_required
    def update_employee(principal, employee_id: int):
        updated = service.update(
            principal,
            employee_id,
            _json_body(),
            expected_version=_if_match_version(),
            partial=request.method == "PATCH",
        )
        return _item_response(updated)

    @app.route(f"{EMPLOYEES_PATH}/<int:employee_id>", methods=["DELETE"], endpoint="delete_employee")
    @principal_required
    def delete_employee(principal, employee_id: int):
        service.delete(principal, employee_id)
        return "", 204
