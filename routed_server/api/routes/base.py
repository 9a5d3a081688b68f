"""Base class for routes served by the HTTP server."""
from abc import ABC, abstractmethod
from typing import Tuple

from fastapi import Request, Response
from starlette.requests import ClientDisconnect
from structlog.stdlib import BoundLogger

# Failures raised while reading a request body
BODY_READ_ERRORS: Tuple[type, ...] = (ClientDisconnect, OSError)


class Route(ABC):
    """
    A handler that knows the exact path it is registered under.

    Routes are built once at startup and invoked concurrently for every
    request to their pattern, so they keep no per-request state. The only
    thing they share is the logger they were constructed with.
    """

    def __init__(self, logger: BoundLogger):
        self._logger = logger

    @abstractmethod
    def pattern(self) -> str:
        """Path this route is registered at. Must not change."""

    @abstractmethod
    async def handle(self, request: Request) -> Response:
        """
        Answer one request.

        Implementations recover from I/O failures themselves and return a
        best-effort response; they never raise into the transport.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(pattern={self.pattern()!r})"
