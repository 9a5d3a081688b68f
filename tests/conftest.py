import asyncio
import logging
import threading

import pytest
import structlog
from fastapi import Request, Response

from routed_server.api.routes import Route
from routed_server.core.config import Settings
from routed_server.core.logging import ROOT_LOGGER_NAME


class SlowRoute(Route):
    """Holds the request open so shutdown has something in flight."""

    def __init__(self, logger, delay: float):
        super().__init__(logger)
        self.delay = delay
        self.entered = threading.Event()

    def pattern(self) -> str:
        return "/slow"

    async def handle(self, request: Request) -> Response:
        self.entered.set()
        await asyncio.sleep(self.delay)
        return Response(content=b"done")


class StaticRoute(Route):
    def __init__(self, logger, path: str, text: str):
        super().__init__(logger)
        self._path = path
        self._text = text

    def pattern(self) -> str:
        return self._path

    async def handle(self, request: Request) -> Response:
        return Response(content=self._text.encode())


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in [h for h in root.handlers if h.get_name() == ROOT_LOGGER_NAME]:
        root.removeHandler(handler)
    root.setLevel(logging.WARNING)


@pytest.fixture
def logger():
    return structlog.get_logger("test")


@pytest.fixture
def settings():
    return Settings(
        HTTP_ADDR="127.0.0.1:0",
        LOG_FORMAT="console",
        START_TIMEOUT=5,
        STOP_TIMEOUT=5,
    )
