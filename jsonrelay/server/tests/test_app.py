import logging
import uuid
from unittest.mock import Mock

from fastapi.testclient import TestClient

from jsonrelay.common.core.identity import CLIENT_IDENTITY, SERVER_IDENTITY
from jsonrelay.server.config import ServerConfig
from jsonrelay.server.main import create_app


def test_default_route_scenario(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"status": 200, "body": "Hello Johnny"}
    assert response.headers["content-type"] == "application/json"
    assert response.headers["server"] == SERVER_IDENTITY


def test_path_params_reach_controller(client):
    response = client.get("/hello/Ada")

    assert response.json() == {"status": 200, "body": "Hello Ada"}


def test_undefined_action_scenario(client):
    response = client.get("/missing")

    assert response.status_code == 404
    assert response.json() == {"status": 404, "body": "Not Found"}


def test_unroutable_path(client):
    response = client.delete("/nowhere/at/all")

    assert response.status_code == 404
    assert response.json() == {"status": 404, "body": "Not Found"}


def test_unexpected_fault_scenario(client, caplog):
    with caplog.at_level(logging.ERROR):
        response = client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"status": 500, "body": "Internal Server Error"}
    assert "hunter2" not in response.text
    assert any(r.exc_info and "hunter2" in r.getMessage() for r in caplog.records)


def test_form_body_params(client):
    response = client.post(
        "/echo?page=2",
        content="user[name]=Ada&user[roles][]=admin&user[roles][]=dev",
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )

    assert response.status_code == 201
    assert response.json()["body"] == {
        "page": "2",
        "user": {"name": "Ada", "roles": ["admin", "dev"]},
    }


def test_json_body_params(client):
    response = client.put("/echo", json={"name": "Ada"})

    assert response.json() == {"status": 201, "body": {"name": "Ada"}}


def test_malformed_json_body_is_bad_request(client):
    response = client.post(
        "/echo", content="{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json()["status"] == 400


def test_local_policy_rejects_test_client_address(make_client):
    # TestClient reports its address as "testclient".
    client = make_client(ALLOW_FROM="local")

    response = client.get("/")

    assert response.status_code == 403
    assert response.json() == {"status": 403, "body": "Forbidden"}


def test_known_clients_policy(make_client):
    client = make_client(ALLOW_FROM="known_clients")

    assert client.get("/", headers={"User-Agent": CLIENT_IDENTITY}).status_code == 200
    assert client.get("/").status_code == 403


def test_request_id_is_echoed(client):
    request_id = str(uuid.uuid4())

    generated = client.get("/")
    echoed = client.get("/", headers={"X-Request-Id": request_id})
    malformed = client.get("/", headers={"X-Request-Id": "not-a-uuid"})

    assert uuid.UUID(generated.headers["x-request-id"])
    assert echoed.headers["x-request-id"] == request_id
    assert malformed.headers["x-request-id"] != "not-a-uuid"


def test_lifecycle_hooks_run_once(registry, resolver):
    startup = Mock()
    shutdown = Mock()
    config = ServerConfig(ALLOW_FROM="all")
    app = create_app(registry, resolver=resolver, config=config, startup=startup, shutdown=shutdown)

    with TestClient(app) as client:
        client.get("/")
        client.get("/hello/Ada")
        startup.assert_called_once()
        shutdown.assert_not_called()

    startup.assert_called_once()
    shutdown.assert_called_once()
    hook_config, hook_logger = shutdown.call_args.args
    assert hook_config is config
    assert isinstance(hook_logger, logging.Logger)


def test_routes_loaded_from_config_file(registry, tmp_path):
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "routes.yml").write_text(
        'routes:\n  - path: "/greeting/{name}"\n    method: GET\n    action: greet\n'
    )
    config = ServerConfig(ROOT=str(tmp_path), ALLOW_FROM="all")

    client = TestClient(create_app(registry, config=config))

    assert client.get("/greeting/Ada").json() == {"status": 200, "body": "Hello Ada"}
    assert client.get("/").status_code == 404
