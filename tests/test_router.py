import pytest
from fastapi import Request, Response
from fastapi.testclient import TestClient

from routed_server.api.router import build_router
from routed_server.api.routes import EchoRoute, HelloRoute, Route
from routed_server.core.exceptions import ConfigurationException, DuplicateRouteException

from .conftest import StaticRoute


class ShadowEcho(Route):
    def pattern(self) -> str:
        return "/echo"

    async def handle(self, request: Request) -> Response:
        return Response(content=b"shadow")


def test_registers_each_route_at_its_pattern(logger):
    echo, hello = EchoRoute(logger), HelloRoute(logger)
    router = build_router([echo, hello], logger)

    assert router.patterns == ["/echo", "/hello"]
    assert len(router) == 2
    assert "/echo" in router
    assert router.match("/echo") is echo
    assert router.match("/hello") is hello
    assert router.match("/missing") is None


def test_duplicate_pattern_is_rejected(logger):
    with pytest.raises(DuplicateRouteException) as excinfo:
        build_router([EchoRoute(logger), HelloRoute(logger), ShadowEcho(logger)], logger)

    error = excinfo.value
    assert isinstance(error, ConfigurationException)
    assert error.error_code == "DUPLICATE_ROUTE"
    assert error.details == {
        "pattern": "/echo",
        "existing": "EchoRoute",
        "duplicate": "ShadowEcho",
    }


def test_same_route_twice_is_rejected(logger):
    with pytest.raises(DuplicateRouteException):
        build_router([HelloRoute(logger), HelloRoute(logger)], logger)


def test_empty_router_serves_404(logger):
    router = build_router([], logger)
    assert len(router) == 0
    assert router.patterns == []

    client = TestClient(router.app)
    for path in ("/", "/echo", "/docs", "/openapi.json"):
        response = client.get(path)
        assert response.status_code == 404
        assert response.content == b""


def test_many_routes(logger):
    routes = [StaticRoute(logger, f"/r{i}", f"route {i}") for i in range(25)]
    router = build_router(routes, logger)
    client = TestClient(router.app)

    assert router.patterns == [f"/r{i}" for i in range(25)]
    for i in (0, 12, 24):
        response = client.post(f"/r{i}")
        assert response.status_code == 200
        assert response.text == f"route {i}"
