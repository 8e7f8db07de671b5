from __future__ import annotations

import base64
import json
import threading

import pytest
import simple_websocket
from werkzeug.serving import make_server

from payroll_manager.container import assemble_container
from payroll_manager.main import create_app


def _basic(name, password):
    token = base64.b64encode(f"{name}:{password}".encode()).decode()
    return {"Authorization": f"Basic {token}"}


ALICE = _basic("alice", "alice-pw")
BOB = _basic("bob", "bob-pw")


@pytest.fixture
def container(registered_managers, employees_repo):
    return assemble_container(managers_repo=registered_managers, employees_repo=employees_repo, default_page_size=2)


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


def _create(client, headers=ALICE, **fields):
    body = {"firstName": "Frodo", "lastName": "Baggins", "description": "ring bearer"}
    body.update(fields)
    return client.post("/api/employees", json=body, headers=headers)


def test_api_requires_authentication(client):
    response = client.get("/api/employees")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"].startswith("Basic")


def test_websocket_requires_authentication(client):
    response = client.get("/payroll")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"].startswith("Basic")


def test_bad_basic_credentials_are_rejected(client):
    assert client.get("/api/employees", headers=_basic("alice", "nope")).status_code == 401
    assert client.get("/api/employees", headers=_basic("nobody", "x")).status_code == 401


def test_static_assets_are_public(client):
    assert client.get("/main.css").status_code == 200
    assert client.get("/built/app.js").status_code == 200


def test_pages_redirect_to_login(client):
    response = client.get("/")

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/login")


def test_form_login_redirects_to_root(client):
    response = client.post("/login", data={"username": "alice", "password": "alice-pw"})
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/")

    index = client.get("/")
    assert index.status_code == 200
    assert b"alice" in index.data
    assert client.get("/api/employees").status_code == 200


def test_form_login_failure(client):
    response = client.post("/login", data={"username": "alice", "password": "bad"})

    assert response.status_code == 401
    assert client.get("/api/employees").status_code == 401


def test_logout_clears_session(client):
    client.post("/login", data={"username": "alice", "password": "alice-pw"})
    client.post("/logout")

    assert client.get("/api/employees").status_code == 401


def test_create_returns_location_and_etag(client):
    response = _create(client)

    assert response.status_code == 201
    body = response.get_json()
    assert body["manager"] == {"name": "alice"}
    assert "version" not in body
    assert response.headers["Location"].endswith(f"/api/employees/{body['id']}")
    assert response.headers["ETag"] == '"0"'


def test_get_item(client):
    employee_id = _create(client).get_json()["id"]

    response = client.get(f"/api/employees/{employee_id}", headers=BOB)

    assert response.status_code == 200
    assert response.get_json()["firstName"] == "Frodo"
    assert response.headers["ETag"] == '"0"'


def test_get_missing_item(client):
    assert client.get("/api/employees/999", headers=ALICE).status_code == 404


def test_other_manager_cannot_update_or_delete(client):
    employee_id = _create(client).get_json()["id"]

    put = client.put(
        f"/api/employees/{employee_id}",
        json={"firstName": "Frodo", "lastName": "Baggins", "description": "thief"},
        headers=BOB,
    )
    delete = client.delete(f"/api/employees/{employee_id}", headers=BOB)

    assert put.status_code == 403
    assert delete.status_code == 403
    assert client.get(f"/api/employees/{employee_id}", headers=ALICE).get_json()["description"] == "ring bearer"


def test_invalid_update_by_other_manager_is_forbidden(client):
    employee_id = _create(client).get_json()["id"]

    response = client.put(f"/api/employees/{employee_id}", json={"firstName": ""}, headers=BOB)

    assert response.status_code == 403


def test_owner_update_with_if_match(client):
    employee_id = _create(client).get_json()["id"]

    response = client.patch(
        f"/api/employees/{employee_id}",
        json={"description": "hero"},
        headers={**ALICE, "If-Match": '"0"'},
    )

    assert response.status_code == 200
    assert response.get_json()["description"] == "hero"
    assert response.headers["ETag"] == '"1"'


def test_stale_if_match_is_a_conflict(client):
    employee_id = _create(client).get_json()["id"]
    client.patch(f"/api/employees/{employee_id}", json={"description": "hero"}, headers=ALICE)

    response = client.patch(
        f"/api/employees/{employee_id}",
        json={"description": "stale"},
        headers={**ALICE, "If-Match": '"0"'},
    )

    assert response.status_code == 409
    assert client.get(f"/api/employees/{employee_id}", headers=ALICE).get_json()["description"] == "hero"


def test_malformed_if_match(client):
    employee_id = _create(client).get_json()["id"]

    response = client.patch(
        f"/api/employees/{employee_id}",
        json={"description": "x"},
        headers={**ALICE, "If-Match": '"abc"'},
    )

    assert response.status_code == 400


def test_delete_by_owner(client):
    employee_id = _create(client).get_json()["id"]

    assert client.delete(f"/api/employees/{employee_id}", headers=ALICE).status_code == 204
    assert client.get(f"/api/employees/{employee_id}", headers=ALICE).status_code == 404


def test_delete_missing_employee_is_forbidden(client):
    assert client.delete("/api/employees/999", headers=ALICE).status_code == 403


def test_invalid_body(client):
    assert _create(client, firstName="").status_code == 400
    assert client.post("/api/employees", data="nope", headers=ALICE).status_code == 400


def test_collection_paging(client):
    for first in ("Bilbo", "Frodo", "Samwise"):
        _create(client, firstName=first)

    response = client.get("/api/employees?page=0&sort=firstName,asc", headers=BOB)
    body = response.get_json()

    assert response.status_code == 200
    assert [e["firstName"] for e in body["employees"]] == ["Bilbo", "Frodo"]
    assert body["page"] == {"size": 2, "totalElements": 3, "totalPages": 2, "number": 0}
    assert "next" in body["_links"] and "prev" not in body["_links"]
    assert "page=1" in body["_links"]["next"]["href"]


def test_collection_rejects_bad_sort(client):
    assert client.get("/api/employees?sort=password", headers=ALICE).status_code == 400


def test_managers_are_not_exposed(client):
    assert client.get("/api/managers", headers=ALICE).status_code == 404


def test_writes_reach_subscribers(client, container):
    sub = container.notifications.subscribe("/topic/newEmployee")

    employee_id = _create(client).get_json()["id"]

    assert [m.body for m in sub.drain()] == [f"/api/employees/{employee_id}"]


def test_page_beyond_offset_range_is_rejected(client):
    assert client.get("/api/employees?page=99999999999999999999", headers=ALICE).status_code == 400


@pytest.fixture
def live_server(app):
    server = make_server("127.0.0.1", 0, app, threaded=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"ws://127.0.0.1:{server.server_port}/payroll"
    server.shutdown()
    thread.join(timeout=5)


def test_socket_subscriber_receives_new_employee(live_server, client):
    ws = simple_websocket.Client.connect(live_server, headers=ALICE)
    try:
        ws.send(json.dumps({"command": "SUBSCRIBE", "destination": "/topic/newEmployee"}))
        receipt = json.loads(ws.receive(timeout=5))
        assert receipt == {"command": "RECEIPT", "destination": "/topic/newEmployee"}

        employee_id = _create(client).get_json()["id"]

        message = json.loads(ws.receive(timeout=5))
        assert message == {
            "command": "MESSAGE",
            "destination": "/topic/newEmployee",
            "body": f"/api/employees/{employee_id}",
        }
    finally:
        ws.close()
