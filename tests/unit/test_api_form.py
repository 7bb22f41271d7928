from __future__ import annotations

from roster.core.exceptions import ServiceError

NEW_EMPLOYEE = {
    "employeeId": "3",
    "name": "C",
    "age": "28",
    "salary": "45000",
    "departmentId": "10",
    "managerId": "1",
}


def test_form_starts_idle(client):
    response = client.get("/api/v1/form")
    assert response.status_code == 200
    data = response.json()
    assert data["mode"] == "idle"
    assert data["targetId"] is None
    assert set(data["draft"].values()) == {""}


def test_create_flow(client, gateway):
    assert client.post("/api/v1/form/new").json()["mode"] == "creating"

    patched = client.patch("/api/v1/form", json=NEW_EMPLOYEE)
    assert patched.status_code == 200
    assert patched.json()["draft"]["name"] == "C"

    response = client.post("/api/v1/form/submit")

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Employee added!"
    assert data["employee"]["employeeId"] == 3
    assert gateway.mutation_calls() == [("create", 3)]
    assert [e["employeeId"] for e in client.get("/api/v1/employees").json()] == [1, 2, 3]
    assert client.get("/api/v1/form").json()["mode"] == "idle"


def test_edit_flow(client, gateway):
    opened = client.post("/api/v1/form/edit/1").json()
    assert opened["mode"] == "editing"
    assert opened["targetId"] == 1
    assert opened["draft"]["salary"] == "50000"

    client.patch("/api/v1/form", json={"salary": "55000"})
    response = client.post("/api/v1/form/submit")

    assert response.status_code == 200
    assert response.json()["message"] == "Employee updated!"
    assert gateway.mutation_calls() == [("update", 1)]
    assert client.get("/api/v1/employees/1").json()["salary"] == 55000


def test_edit_unknown_employee_returns_404(client):
    response = client.post("/api/v1/form/edit/77")
    assert response.status_code == 404
    assert client.get("/api/v1/form").json()["mode"] == "idle"


def test_patch_is_all_or_nothing(client):
    client.post("/api/v1/form/edit/1")

    response = client.patch("/api/v1/form", json={"name": "Changed", "employeeId": "5"})

    assert response.status_code == 422
    assert "employeeId" in response.json()["detail"]["fields"]
    assert client.get("/api/v1/form").json()["draft"]["name"] == "A"


def test_invalid_submit_returns_field_errors(client, gateway):
    client.post("/api/v1/form/new")
    client.patch("/api/v1/form", json={**NEW_EMPLOYEE, "age": "twenty"})

    response = client.post("/api/v1/form/submit")

    assert response.status_code == 422
    assert set(response.json()["detail"]["fields"]) == {"age"}
    assert gateway.mutation_calls() == []
    state = client.get("/api/v1/form").json()
    assert state["mode"] == "creating"
    assert state["draft"]["age"] == "twenty"


def test_remote_failure_keeps_form_open(client, gateway):
    client.post("/api/v1/form/new")
    client.patch("/api/v1/form", json=NEW_EMPLOYEE)
    gateway.fail_next = ServiceError("Error creating employee 3: HTTP 500 - boom", status=500)

    response = client.post("/api/v1/form/submit")

    assert response.status_code == 502
    state = client.get("/api/v1/form").json()
    assert state["mode"] == "creating"
    assert state["draft"]["employeeId"] == "3"
    assert state["error"] == "Error creating employee 3: HTTP 500 - boom"


def test_conflicting_transitions_return_409(client):
    assert client.post("/api/v1/form/cancel").status_code == 409
    assert client.post("/api/v1/form/submit").status_code == 409

    client.post("/api/v1/form/new")
    assert client.post("/api/v1/form/edit/1").status_code == 409


def test_cancel_resets_form(client):
    client.post("/api/v1/form/new")
    client.patch("/api/v1/form", json={"name": "Temp"})

    data = client.post("/api/v1/form/cancel").json()

    assert data["mode"] == "idle"
    assert data["draft"]["name"] == ""
