"""Integration tests for the tasks HTTP API."""
from uuid import uuid1

from task_api.dependencies import get_task_store
from task_api.main import app
from tests.fakes import FakeTaskStore


def _first_page(client, limit=100):
    response = client.get(f"/get?limit={limit}&page=1")
    assert response.status_code == 200
    return {t["id"]: t for t in response.json()}


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == "Hello, World!"


def test_insert_returns_pending_task(client):
    response = client.post(
        "/insert/",
        json={"owner_id": 12, "title": "Buy milk", "description": "Two litres", "status": "Completed"},
    )

    assert response.status_code == 200
    task = response.json()
    assert task["owner_id"] == 12
    assert task["title"] == "Buy milk"
    assert task["description"] == "Two litres"
    assert task["status"] == "Pending"
    assert task["created_at"] == task["updated_at"]
    assert task["id"] in _first_page(client)


def test_insert_missing_fields_names_each_field(client):
    response = client.post("/insert/", json={"title": "Only a title"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == (
        "[owner_id]: '0' | Needs to implement 'required' and "
        "[description]: '' | Needs to implement 'required'"
    )


def test_insert_rejects_malformed_json(client):
    response = client.post(
        "/insert/", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.text == "Failed to parse JSON"


def test_insert_rejects_wrong_field_types(client):
    response = client.post(
        "/insert/", json={"owner_id": "twelve", "title": "t", "description": "d"}
    )
    assert response.status_code == 400
    assert response.text == "Failed to parse JSON"


def test_update_replaces_fields(client, insert_tasks):
    (task,) = insert_tasks(1)

    response = client.put(
        "/update",
        json={
            "id": task["id"],
            "owner_id": 99,
            "title": "New title",
            "description": "New description",
            "status": "Completed",
        },
    )

    assert response.status_code == 200
    assert response.text == "Updated"

    stored = _first_page(client)[task["id"]]
    assert stored["owner_id"] == 99
    assert stored["title"] == "New title"
    assert stored["status"] == "Completed"
    assert stored["created_at"] == task["created_at"]


def test_update_with_bad_status_changes_nothing(client, insert_tasks):
    (task,) = insert_tasks(1)

    response = client.put(
        "/update",
        json={
            "id": task["id"],
            "owner_id": 99,
            "title": "New title",
            "description": "New description",
            "status": "Archived",
        },
    )

    assert response.status_code == 400
    assert response.json()["message"] == "[status]: 'Archived' | Needs to implement 'oneof'"
    assert _first_page(client)[task["id"]] == task


def test_update_missing_fields(client):
    response = client.put("/update", json={"owner_id": 1})

    assert response.status_code == 400
    message = response.json()["message"]
    for field in ("id", "title", "description", "status"):
        assert f"[{field}]" in message
    assert "[owner_id]" not in message


def test_update_rejects_malformed_id(client):
    response = client.put(
        "/update",
        json={"id": "abc", "owner_id": 1, "title": "t", "description": "d", "status": "Pending"},
    )
    assert response.status_code == 400
    assert response.text == "Failed to parse JSON"


def test_update_unknown_id_reports_success(client):
    response = client.put(
        "/update",
        json={"id": str(uuid1()), "owner_id": 1, "title": "t", "description": "d", "status": "Failed"},
    )
    assert response.status_code == 200
    assert response.text == "Updated"


def test_delete_is_idempotent(client, insert_tasks):
    (task,) = insert_tasks(1)

    for _ in range(2):
        response = client.delete(f"/delete?id={task['id']}")
        assert response.status_code == 200
        assert response.text == "Deleted"

    assert task["id"] not in _first_page(client)


def test_delete_requires_valid_id(client):
    response = client.delete("/delete")
    assert response.status_code == 400
    assert response.text == "ID is required"

    response = client.delete("/delete?id=nope")
    assert response.status_code == 400
    assert response.text == "Invalid ID"


def test_get_requires_limit_and_page(client):
    response = client.get("/get?limit=10")
    assert response.status_code == 400
    assert response.text == "Limit and Page are required"

    response = client.get("/get?limit=ten&page=1")
    assert response.status_code == 400
    assert response.text == "Invalid limit"

    response = client.get("/get?limit=10&page=one")
    assert response.status_code == 400
    assert response.text == "Invalid page"


def test_get_page_zero_returns_placeholder(client, insert_tasks):
    insert_tasks(3)

    response = client.get("/get?limit=10&page=0")

    assert response.status_code == 200
    assert response.text == "Got"


def test_get_pages_over_fifteen_tasks(client, insert_tasks):
    created = insert_tasks(15)

    first = client.get("/get?limit=10&page=1").json()
    second = client.get("/get?limit=10&page=2").json()

    assert len(first) == 10
    assert len(second) == 5
    assert {t["id"] for t in first + second} == {t["id"] for t in created}


def test_get_small_limit_is_raised_to_ten(client, insert_tasks):
    insert_tasks(15)

    response = client.get("/get?limit=5&page=1")

    assert len(response.json()) == 10


def test_get_empty_store(client):
    response = client.get("/get?limit=10&page=1")
    assert response.status_code == 200
    assert response.json() == []


def test_store_failure_returns_500(client):
    app.dependency_overrides[get_task_store] = lambda: FakeTaskStore(fail=True)

    response = client.post("/insert/", json={"owner_id": 1, "title": "t", "description": "d"})
    assert response.status_code == 500
    assert response.text == "Failed to insert"

    response = client.get("/get?limit=10&page=1")
    assert response.status_code == 500
    assert response.text == "Failed to scan"


def test_health_and_metrics(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "checks": {"store": "ok"}}

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "http_requests_total" in response.text


def test_get_rejects_out_of_range_limit(client):
    response = client.get("/get?limit=99999999999999999999&page=1")
    assert response.status_code == 400
    assert response.text == "Invalid limit"


def test_delete_rejects_wrapped_ids(client):
    task_id = str(uuid1())
    for wrapped in (f"{{{task_id}}}", f"urn:uuid:{task_id}"):
        response = client.delete("/delete", params={"id": wrapped})
        assert response.status_code == 400
        assert response.text == "Invalid ID"


def test_update_rejects_wrapped_id(client, insert_tasks):
    (task,) = insert_tasks(1)

    response = client.put(
        "/update",
        json={
            "id": f"urn:uuid:{task['id']}",
            "owner_id": 99,
            "title": "t",
            "description": "d",
            "status": "Completed",
        },
    )

    assert response.status_code == 400
    assert response.text == "Failed to parse JSON"
    assert _first_page(client)[task["id"]] == task
