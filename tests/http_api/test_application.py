# tests/http_api/test_application.py
import pytest
from fastapi.testclient import TestClient

from crud_scaffold.config import Settings
from crud_scaffold.core.app import REQUEST_ID_HEADER, Application
from crud_scaffold.db.database import Database
from crud_scaffold.example.users import UserController


def _paths(app) -> dict:
    return app.openapi()["paths"]


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["environment"] == "testing"


def test_request_id_is_echoed(client: TestClient) -> None:
    response = client.get("/health", headers={REQUEST_ID_HEADER: "req-123"})

    assert response.headers[REQUEST_ID_HEADER] == "req-123"


def test_request_id_is_generated(client: TestClient) -> None:
    response = client.get("/health")

    assert len(response.headers[REQUEST_ID_HEADER]) == 32


def test_request_id_is_echoed_on_unhandled_error(app) -> None:
    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/user/exception", headers={REQUEST_ID_HEADER: "abc"})

    assert response.status_code == 500
    assert response.headers[REQUEST_ID_HEADER] == "abc"
    assert response.json()["status"]["code"] == "internal_server_error"


def test_unhandled_error_is_logged_once_with_access_line(settings, user_service, mock_log) -> None:
    application = Application(settings, Database("sqlite://"), log=mock_log)
    application.add_controller(UserController(user_service))
    application.load_controllers()

    with TestClient(application.app, raise_server_exceptions=False) as client:
        client.get("/user/exception")

    error_tags = [call.args[1] for call in mock_log.error.call_args_list]
    info_tags = [call.args[1] for call in mock_log.info.call_args_list]
    assert error_tags == ["http/exception"]
    assert "http/access" in info_tags


def test_unknown_route_is_404_envelope(client: TestClient) -> None:
    response = client.get("/nothing-here")

    assert response.status_code == 404
    assert response.json()["status"] == {"error": True, "code": "not_found"}


def test_user_routes_are_tagged(app) -> None:
    user_paths = {path: ops for path, ops in _paths(app).items() if path.startswith("/user")}

    assert user_paths
    for operations in user_paths.values():
        for operation in operations.values():
            assert "users" in operation["tags"]


def test_custom_routes_precede_item_route(app) -> None:
    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/user/exception")

    # Matched by "/{item_id}" this would fail int validation with a 400.
    assert response.status_code == 500
    assert response.json()["status"]["code"] == "internal_server_error"


def test_api_prefix_is_applied(user_service) -> None:
    settings = Settings(DATABASE_URL="sqlite://", API_PREFIX="/api/v1")
    application = Application(settings, Database("sqlite://"))
    application.add_controller(UserController(user_service))
    application.load_controllers()

    paths = _paths(application.app)

    assert "/api/v1/user" in paths
    assert "/api/v1/user/{item_id}" in paths
    assert "/user" not in paths


def test_controllers_cannot_be_added_after_loading(user_service) -> None:
    application = Application(Settings(DATABASE_URL="sqlite://"), Database("sqlite://"))
    application.load_controllers()

    with pytest.raises(RuntimeError):
        application.add_controller(UserController(user_service))
