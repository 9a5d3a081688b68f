"""
routed_server/api/router.py
Builds the dispatch table from the set of routes provided at startup.

Responsibilities:
- Register every route at its own pattern (exact path match)
- Refuse duplicate patterns before the server ever starts
- Answer unregistered paths with an empty 404
"""

from typing import Dict, List, Optional, Sequence

from fastapi import FastAPI, Request, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from structlog.stdlib import BoundLogger

from ..core.exceptions import DuplicateRouteException
from .routes.base import Route


async def _empty_error_response(request: Request, exc: StarletteHTTPException) -> Response:
    return Response(status_code=exc.status_code, headers=exc.headers)


class RouteTable:
    """
    Exact-path dispatch table.

    Owns the ASGI application the server runs. Built once; never mutated
    after construction.
    """

    def __init__(self, routes: Dict[str, Route], app: FastAPI):
        self._routes = routes
        self.app = app

    @property
    def patterns(self) -> List[str]:
        """Registered patterns in registration order."""
        return list(self._routes)

    def match(self, path: str) -> Optional[Route]:
        return self._routes.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self._routes

    def __len__(self) -> int:
        return len(self._routes)


def build_router(routes: Sequence[Route], logger: BoundLogger) -> RouteTable:
    """
    Register each route at its declared pattern.

    Args:
        routes: Any number of routes, including none
        logger: Shared application logger

    Returns:
        The dispatch table

    Raises:
        DuplicateRouteException: If two routes declare the same pattern
    """
    app = FastAPI(
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )
    app.add_exception_handler(StarletteHTTPException, _empty_error_response)

    registered: Dict[str, Route] = {}
    for route in routes:
        pattern = route.pattern()
        if pattern in registered:
            raise DuplicateRouteException(
                pattern,
                existing=type(registered[pattern]).__name__,
                duplicate=type(route).__name__,
            )

        registered[pattern] = route
        # No method filter: every method, including extension ones, reaches the route
        app.router.add_route(
            pattern,
            route.handle,
            name=type(route).__name__,
            include_in_schema=False,
        )
        logger.debug("route_registered", pattern=pattern, route=type(route).__name__)

    logger.info("router_built", patterns=list(registered))
    return RouteTable(registered, app)


__all__ = ["RouteTable", "build_router"]
