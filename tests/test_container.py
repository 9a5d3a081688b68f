import httpx
import pytest

import routed_server.__main__ as entrypoint
from routed_server.api.server import ServerState
from routed_server.core.container import build_container
from routed_server.core.exceptions import ConstructionException, DuplicateRouteException
from routed_server.api.routes import EchoRoute


def test_builds_graph_without_starting(settings):
    container = build_container(settings)

    assert container.router.patterns == ["/echo", "/hello"]
    assert [type(r).__name__ for r in container.routes] == ["EchoRoute", "HelloRoute"]
    assert container.server.router is container.router
    assert container.server.state is ServerState.UNSTARTED
    assert [hook.name for hook in container.app.lifecycle.hooks] == ["HTTPServer"]
    assert container.app.start_timeout == 5


def test_end_to_end(settings):
    container = build_container(settings)
    container.app.start()
    try:
        host, port = container.server.address
        base = f"http://{host}:{port}"

        response = httpx.post(f"{base}/echo", content=b"hi")
        assert (response.status_code, response.content) == (200, b"hi")

        response = httpx.post(f"{base}/hello", content=b"world")
        assert (response.status_code, response.text) == (200, "Hello, world\n")

        response = httpx.get(f"{base}/missing")
        assert response.status_code == 404
    finally:
        container.app.stop()

    assert container.server.state is ServerState.STOPPED


def test_duplicate_routes_abort_construction(settings):
    with pytest.raises(ConstructionException) as excinfo:
        build_container(settings, route_factories=(EchoRoute, EchoRoute))

    assert excinfo.value.details["component"] == "router"
    assert isinstance(excinfo.value.__cause__, DuplicateRouteException)


def test_failing_constructor_aborts_construction(settings):
    def broken_route(logger):
        raise RuntimeError("boom")

    with pytest.raises(ConstructionException) as excinfo:
        build_container(settings, route_factories=(EchoRoute, broken_route))

    assert excinfo.value.details == {"component": "broken_route", "reason": "boom"}


def test_no_routes_is_valid(settings):
    container = build_container(settings, route_factories=())
    assert len(container.router) == 0


def test_main_exits_nonzero_on_construction_failure(monkeypatch):
    def fail():
        raise ConstructionException("router", "duplicate")

    monkeypatch.setattr(entrypoint, "build_container", fail)
    assert entrypoint.main() == 1
