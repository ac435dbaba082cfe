from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).resolve().parents[1]))

from timeledger.application import TaskService, get_task_service, reset_task_state
from timeledger.core.settings import Settings
from timeledger.domain import TimeEntryRecord
from timeledger.infrastructure import InMemoryTaskRepository, InMemoryTimeEntryRepository

HEADERS = {"X-Company": "it"}


@pytest.fixture(autouse=True)
def reset_state():
    reset_task_state()
    yield
    reset_task_state()


@pytest.fixture()
def entries():
    return InMemoryTimeEntryRepository()


@pytest.fixture()
def client(entries):
    from timeledger.app import create_app

    app = create_app(Settings(), service=TaskService(InMemoryTaskRepository(), entries))
    with TestClient(app) as test_client:
        yield test_client


def _create(client: TestClient, customer: str, project: str, task: str, project_type: str = "billable"):
    return client.post(
        "/api/task/task",
        json={"customer": customer, "project": project, "projectType": project_type, "task": task},
        headers=HEADERS,
    )


def test_read_tasks_without_authentication(client):
    response = client.get("/api/task/task", params={"customer": "Acme", "project": "Website"})
    assert response.status_code == 401


def test_create_rename_and_read(client):
    assert _create(client, "Acme", "Website", "design").status_code == 204

    response = client.get("/api/task/task", params={"customer": "Acme", "project": "Website"}, headers=HEADERS)
    assert response.status_code == 200
    assert response.json() == ["design"]

    response = client.put(
        "/api/task/customer-project",
        json={"customer": "Acme", "project": "Website", "newProject": "Webapp"},
        headers=HEADERS,
    )
    assert response.status_code == 204

    response = client.get("/api/task/task", params={"customer": "Acme", "project": "Website"}, headers=HEADERS)
    assert response.json() == []
    response = client.get("/api/task/task-with-type", params={"customer": "Acme", "project": "Webapp"}, headers=HEADERS)
    assert response.json() == {"tasks": ["design"], "projectType": "billable"}
    assert get_task_service().list_projects("it", "Acme") == ["Webapp"]


def test_companies_are_isolated(client):
    _create(client, "Acme", "Website", "design")

    response = client.get("/api/task/customer", headers={"X-Company": "es"})
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.parametrize(
    ("payload", "status", "kind"),
    [
        ({"customer": "Ac#me", "project": "Website", "projectType": "billable", "task": "design"}, 400, "InvalidCharacter"),
        ({"customer": "Acme", "project": "Website", "projectType": "", "task": "design"}, 400, "MissingField"),
    ],
)
def test_create_errors_are_typed(client, payload, status, kind):
    response = client.post("/api/task/task", json=payload, headers=HEADERS)
    assert response.status_code == status
    assert response.json()["detail"]["kind"] == kind


def test_rename_errors_are_typed(client, entries):
    _create(client, "Acme", "Website", "design")
    _create(client, "Acme", "Webapp", "backend")
    entries.add_entry(TimeEntryRecord(uid="u1", date="2024-03-01", company="it", tasks=["Acme2#Website#design#5.0"]))

    def rename(**body):
        return client.put("/api/task/customer-project", json={"customer": "Acme", "project": "Website", **body}, headers=HEADERS)

    response = rename()
    assert (response.status_code, response.json()["detail"]["kind"]) == (400, "InvalidArgument")

    response = rename(newProject="Webapp")
    assert (response.status_code, response.json()["detail"]["kind"]) == (409, "AlreadyExists")

    response = rename(newCustomer="Acme2")
    assert (response.status_code, response.json()["detail"]["kind"]) == (409, "AlreadyAssigned")

    response = client.put(
        "/api/task/customer-project",
        json={"customer": "Nobody", "project": "Nothing", "newProject": "Other"},
        headers=HEADERS,
    )
    assert (response.status_code, response.json()["detail"]["kind"]) == (404, "NotFound")


def test_rename_task(client):
    _create(client, "Acme", "Website", "design")
    _create(client, "Acme", "Website", "qa")

    response = client.put(
        "/api/task/task",
        json={"customer": "Acme", "project": "Website", "task": "design", "newTask": "qa"},
        headers=HEADERS,
    )
    assert response.status_code == 409
    assert response.json()["detail"]["kind"] == "AlreadyExists"

    response = client.put(
        "/api/task/task",
        json={"customer": "Acme", "project": "Website", "task": "design"},
        headers=HEADERS,
    )
    assert response.json()["detail"]["kind"] == "MissingField"

    response = client.put(
        "/api/task/task",
        json={"customer": "Acme", "project": "Website", "task": "design", "newTask": "ux"},
        headers=HEADERS,
    )
    assert response.status_code == 204
    response = client.get("/api/task/task", params={"customer": "Acme", "project": "Website"}, headers=HEADERS)
    assert response.json() == ["qa", "ux"]


def test_retire_defaults_to_inactive_and_can_reactivate(client):
    _create(client, "Acme", "Website", "design")

    response = client.put(
        "/api/task/customer-project/inactive",
        json={"customer": "Acme", "project": "Website"},
        headers=HEADERS,
    )
    assert response.status_code == 204
    assert client.get("/api/task/customer", headers=HEADERS).json() == []
    assert client.get("/api/task/project", params={"customer": "Acme"}, headers=HEADERS).json() == []

    response = client.put(
        "/api/task/customer-project/inactive",
        json={"customer": "Acme", "project": "Website", "inactive": False},
        headers=HEADERS,
    )
    assert response.status_code == 204
    assert client.get("/api/task/customer", headers=HEADERS).json() == ["Acme"]


def test_duckdb_backed_app(tmp_path):
    from timeledger.app import create_app

    settings = Settings(store="duckdb", db_path=tmp_path / "db" / "timeledger.duckdb")
    with TestClient(create_app(settings)) as duckdb_client:
        assert _create(duckdb_client, "Acme", "Website", "design").status_code == 204
        response = duckdb_client.put(
            "/api/task/customer-project",
            json={"customer": "Acme", "project": "Website", "newCustomer": "Acme Corp"},
            headers=HEADERS,
        )
        assert response.status_code == 204
        assert duckdb_client.get("/api/task/customer", headers=HEADERS).json() == ["Acme Corp"]
    assert settings.db_path.exists()
