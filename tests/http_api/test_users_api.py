# tests/http_api/test_users_api.py
from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient


def _create(client: TestClient, payload: Dict[str, Any]) -> int:
    response = client.post("/user", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["result"]


@pytest.fixture
def seeded_ids(client, make_user):
    return [_create(client, make_user(i, status=(i % 3) + 1)) for i in range(1, 26)]


def test_create_returns_created_envelope(client: TestClient, make_user) -> None:
    response = client.post("/user", json=make_user(1))

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == {"error": False, "code": "created"}
    assert data["message"] == "Success in insert"
    assert isinstance(data["result"], int)


def test_get_round_trip(client: TestClient, make_user) -> None:
    user_id = _create(client, make_user(1, bio="mathematician"))

    response = client.get(f"/user/{user_id}")

    assert response.status_code == 200
    user = response.json()["result"]
    assert user["id"] == user_id
    assert user["email"] == "user1@example.org"
    assert user["bio"] == "mathematician"
    assert "created_at" in user and "updated_at" in user


def test_get_missing_is_404_envelope(client: TestClient) -> None:
    response = client.get("/user/999")

    assert response.status_code == 404
    assert response.json() == {
        "status": {"error": True, "code": "not_found"},
        "message": "Not found",
        "result": None,
    }


def test_update_then_read(client: TestClient, make_user) -> None:
    user_id = _create(client, make_user(1))

    response = client.put(f"/user/{user_id}", json={"status": 2})

    assert response.status_code == 200
    assert response.json()["result"] == 1
    assert client.get(f"/user/{user_id}").json()["result"]["status"] == 2


def test_update_missing_is_404(client: TestClient) -> None:
    response = client.put("/user/999", json={"name": "Nobody"})

    assert response.status_code == 404
    assert response.json()["status"]["code"] == "not_found"


@pytest.mark.parametrize("field", ["name", "email", "status"])
def test_update_null_required_field_is_400(client: TestClient, make_user, field) -> None:
    user_id = _create(client, make_user(1))

    response = client.put(f"/user/{user_id}", json={field: None})

    assert response.status_code == 400
    assert response.json()["status"]["code"] == "bad_request"
    assert field in response.json()["message"]
    assert client.get(f"/user/{user_id}").json()["result"][field] is not None


def test_update_null_bio_clears_it(client: TestClient, make_user) -> None:
    user_id = _create(client, make_user(1, bio="mathematician"))

    response = client.put(f"/user/{user_id}", json={"bio": None})

    assert response.status_code == 200
    assert client.get(f"/user/{user_id}").json()["result"]["bio"] is None


def test_update_without_fields_is_400(client: TestClient, make_user) -> None:
    user_id = _create(client, make_user(1))

    response = client.put(f"/user/{user_id}", json={})

    assert response.status_code == 400
    assert response.json()["status"]["code"] == "bad_request"


def test_delete_twice(client: TestClient, make_user) -> None:
    user_id = _create(client, make_user(1))

    first = client.delete(f"/user/{user_id}")
    second = client.delete(f"/user/{user_id}")

    assert first.status_code == 200
    assert first.json()["result"] == 1
    assert second.status_code == 404
    assert second.json()["result"] == 0


def test_list_paginates(client: TestClient, seeded_ids) -> None:
    response = client.get("/user", params={"page": 2, "count": 10})

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 25
    assert [user["id"] for user in data["result"]] == list(reversed(seeded_ids))[10:20]


def test_list_repeated_query_param_is_one_of(client: TestClient, seeded_ids) -> None:
    both = client.get("/user", params=[("status", "1"), ("status", "2"), ("count", "50")])
    one = client.get("/user", params={"status": "1"})
    two = client.get("/user", params={"status": "2"})

    assert both.status_code == 200
    statuses = {user["status"] for user in both.json()["result"]}
    assert statuses == {1, 2}
    assert both.json()["count"] == one.json()["count"] + two.json()["count"]


def test_list_sorted_by_field(client: TestClient, seeded_ids) -> None:
    response = client.get("/user", params={"order": "ASC", "field": "email", "count": 5})

    emails = [user["email"] for user in response.json()["result"]]
    assert emails == sorted(emails)


def test_list_unknown_filter_is_400(client: TestClient) -> None:
    response = client.get("/user", params={"password": "x"})

    assert response.status_code == 400
    assert response.json()["status"]["code"] == "bad_request"


def test_list_uncoercible_filter_is_400(client: TestClient) -> None:
    response = client.get("/user", params={"status": "active"})

    assert response.status_code == 400


def test_list_page_size_is_capped(client: TestClient) -> None:
    # MAX_PAGE_SIZE is 50 in the test settings.
    response = client.get("/user", params={"count": 51})

    assert response.status_code == 400
    assert response.json()["status"]["code"] == "bad_request"


def test_list_bad_order_is_400(client: TestClient) -> None:
    response = client.get("/user", params={"order": "sideways"})

    assert response.status_code == 400


def test_list_empty_is_success(client: TestClient) -> None:
    response = client.get("/user")

    assert response.status_code == 200
    assert response.json()["result"] == []
    assert response.json()["count"] == 0


def test_create_invalid_payload_is_400(client: TestClient) -> None:
    response = client.post("/user", json={"name": "", "email": "not-an-email"})

    assert response.status_code == 400
    data = response.json()
    assert data["status"] == {"error": True, "code": "bad_request"}
    assert "email" in data["message"]


def test_create_duplicate_email_is_database_error(client: TestClient, make_user) -> None:
    _create(client, make_user(1))

    response = client.post("/user", json=make_user(1))

    assert response.status_code == 500
    assert response.json()["status"]["code"] == "database_error"
    assert response.json()["result"] is None


def test_read_by_email_route(client: TestClient, make_user) -> None:
    _create(client, make_user(1, email="Ada@Example.org"))

    response = client.get("/user/by-email/ADA@example.org")

    assert response.status_code == 200
    assert response.json()["result"]["email"] == "ada@example.org"


def test_exception_route_returns_500_envelope(app) -> None:
    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/user/exception")

    assert response.status_code == 500
    assert response.json() == {
        "status": {"error": True, "code": "internal_server_error"},
        "message": "Internal Server Error",
        "result": None,
    }
