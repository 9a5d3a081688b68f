"""
routed_server/core/container.py
Composition root: builds the object graph in dependency order.

    logger -> routes -> router -> http server -> app

Every constructor receives its dependencies explicitly. The first failure
aborts the build before anything is started.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, TypeVar

from structlog.stdlib import BoundLogger

from ..api.lifespan import App, Hook, Lifecycle
from ..api.router import RouteTable, build_router
from ..api.routes import EchoRoute, HelloRoute, Route
from ..api.server import HTTPServer
from .config import Settings, get_settings
from .exceptions import ConstructionException
from .logging import setup_logging

T = TypeVar("T")

RouteFactory = Callable[[BoundLogger], Route]

DEFAULT_ROUTES: Sequence[RouteFactory] = (EchoRoute, HelloRoute)


@dataclass
class Container:
    """The fully built application graph."""
    settings: Settings
    logger: BoundLogger
    routes: List[Route]
    router: RouteTable
    server: HTTPServer
    app: App


def new_http_server(
    lifecycle: Lifecycle,
    router: RouteTable,
    logger: BoundLogger,
    settings: Settings,
) -> HTTPServer:
    """Build the HTTP server and hand its start/stop hooks to the lifecycle."""
    server = HTTPServer(router, logger, addr=settings.HTTP_ADDR)
    lifecycle.append(Hook(name="HTTPServer", on_start=server.start, on_stop=server.stop))
    return server


def _provide(logger: Optional[BoundLogger], component: str, factory: Callable[..., T], *args) -> T:
    try:
        instance = factory(*args)
    except Exception as e:
        if logger is not None:
            logger.error(
                "provide_failed",
                component=component,
                error=str(e),
                error_type=type(e).__name__,
            )
        raise ConstructionException(component, str(e)) from e

    if logger is not None:
        logger.debug("provided", component=component, type=type(instance).__name__)
    return instance


def build_container(
    settings: Optional[Settings] = None,
    route_factories: Sequence[RouteFactory] = DEFAULT_ROUTES,
) -> Container:
    """
    Build the application without starting it.

    Args:
        settings: Configuration (defaults to the process-wide settings)
        route_factories: Route constructors, each taking the shared logger

    Raises:
        ConstructionException: If any constructor fails; the original error
            is chained as ``__cause__``
    """
    if settings is None:
        settings = _provide(None, "settings", get_settings)

    logger = _provide(None, "logger", setup_logging, settings)
    lifecycle = Lifecycle(logger)

    routes = [
        _provide(logger, getattr(factory, "__name__", repr(factory)), factory, logger)
        for factory in route_factories
    ]
    router = _provide(logger, "router", build_router, routes, logger)
    server = _provide(logger, "http_server", new_http_server, lifecycle, router, logger, settings)

    app = App(
        lifecycle,
        logger,
        start_timeout=settings.START_TIMEOUT,
        stop_timeout=settings.STOP_TIMEOUT,
    )
    logger.info(
        "container_built",
        app_name=settings.APP_NAME,
        version=settings.APP_VERSION,
        routes=router.patterns,
    )

    return Container(
        settings=settings,
        logger=logger,
        routes=routes,
        router=router,
        server=server,
        app=app,
    )


__all__ = ["Container", "build_container", "new_http_server", "DEFAULT_ROUTES"]
