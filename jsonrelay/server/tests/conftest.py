import pytest
from fastapi.testclient import TestClient

from jsonrelay.server.config import ServerConfig
from jsonrelay.server.main import create_app
from jsonrelay.server.models.context import RequestContext
from jsonrelay.server.services.handler_registry import HandlerRegistry
from jsonrelay.server.services.route_matcher import RouteMatcher

from .sample_controllers import ROUTES, Application, Users


@pytest.fixture
def registry():
    registry = HandlerRegistry()
    registry.register("application", Application)
    registry.register("users", Users)
    return registry


@pytest.fixture
def resolver():
    return RouteMatcher(routes=ROUTES)


@pytest.fixture
def make_client(registry, resolver):
    def factory(**config_overrides):
        config = ServerConfig(**config_overrides)
        return TestClient(create_app(registry, resolver=resolver, config=config))

    return factory


@pytest.fixture
def client(make_client):
    return make_client(ALLOW_FROM="all")


@pytest.fixture
def make_context():
    def factory(path="/", method="GET", remote_addr="127.0.0.1", **kwargs):
        return RequestContext.build(method=method, path=path, remote_addr=remote_addr, **kwargs)

    return factory
