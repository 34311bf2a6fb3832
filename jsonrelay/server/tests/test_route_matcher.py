from unittest.mock import mock_open, patch

import pytest

from jsonrelay.server.services.route_matcher import RouteMatcher


@pytest.fixture
def mock_routes_yaml():
    return """
routes:
  - path: "/api/test/{id}"
    method: "POST"
    controller: "tests"
    action: "update"
    params:
      format: "full"
  - path: "/"
"""


def test_route_matcher_match_success(mock_routes_yaml):
    with patch("builtins.open", mock_open(read_data=mock_routes_yaml)):
        matcher = RouteMatcher(config_path="dummy/routes.yml")
        matcher.load_routing_config()

        route = matcher.resolve("POST", "/api/test/123")

        assert route.controller == "tests"
        assert route.action == "update"
        assert route.params == {"id": "123", "format": "full"}
        assert route.matched is True


def test_route_matcher_method_mismatch(mock_routes_yaml):
    with patch("builtins.open", mock_open(read_data=mock_routes_yaml)):
        matcher = RouteMatcher(config_path="dummy/routes.yml")

        assert matcher.resolve("GET", "/api/test/123") is None


def test_route_without_method_matches_any(mock_routes_yaml):
    with patch("builtins.open", mock_open(read_data=mock_routes_yaml)):
        matcher = RouteMatcher(config_path="dummy/routes.yml")

        for method in ("GET", "POST", "DELETE"):
            route = matcher.resolve(method, "/")
            assert route.controller is None
            assert route.action_name == "default"


def test_route_matcher_no_match():
    with patch("builtins.open", mock_open(read_data="routes: []")):
        matcher = RouteMatcher(config_path="dummy/routes.yml")
        matcher.load_routing_config()

        assert matcher.resolve("GET", "/unknown") is None


def test_route_matcher_missing_file(tmp_path):
    matcher = RouteMatcher(config_path=str(tmp_path / "absent.yml"))

    assert matcher.load_routing_config() == []
    assert matcher.resolve("GET", "/") is None


def test_route_matcher_invalid_yaml_keeps_previous():
    valid_yaml = """
routes:
  - path: "/hello"
    method: "GET"
    action: "greet"
"""
    invalid_yaml = "routes: [\n  - path: /broken\n"
    valid_open = mock_open(read_data=valid_yaml)
    invalid_open = mock_open(read_data=invalid_yaml)
    with patch(
        "builtins.open",
        side_effect=[valid_open.return_value, invalid_open.return_value],
    ):
        matcher = RouteMatcher(config_path="dummy/routes.yml")
        matcher.load_routing_config()
        assert matcher.resolve("GET", "/hello").action == "greet"
        matcher.load_routing_config(force=True)
        assert matcher.resolve("GET", "/hello").action == "greet"


def test_routes_given_in_code():
    matcher = RouteMatcher(
        routes=[{"path": "/users/{user_id}/posts/{post_id}", "method": "GET"}]
    )

    route = matcher.resolve("get", "/users/7/posts/9/")

    assert route.params == {"user_id": "7", "post_id": "9"}
    assert matcher.resolve("GET", "/users/7/posts") is None


def test_first_matching_route_wins():
    matcher = RouteMatcher(
        routes=[
            {"path": "/items/new", "action": "new"},
            {"path": "/items/{id}", "action": "show"},
        ]
    )

    assert matcher.resolve("GET", "/items/new").action == "new"
    assert matcher.resolve("GET", "/items/5").action == "show"
