"""
routed_server/api/server.py
HTTP server lifecycle: bind, serve in the background, drain on stop.

Responsibilities:
- Bind the listening socket synchronously so bind errors reach the caller
- Run the uvicorn accept loop on a background thread
- Stop gracefully within a deadline, then force-close

State machine: UNSTARTED -> LISTENING -> STOPPED (terminal).
"""

import socket
import threading
import time
from enum import Enum
from typing import Optional, Tuple

import uvicorn
from structlog.stdlib import BoundLogger

from ..core.config import parse_address
from ..core.exceptions import (
    BindException,
    ServerCrashedException,
    ServerStateException,
    ShutdownTimeoutException,
)
from .router import RouteTable

DEFAULT_STOP_TIMEOUT = 15.0
# Extra time given to the serving thread once in-flight work has been cancelled
FORCE_CLOSE_GRACE = 2.0


class ServerState(Enum):
    """Lifecycle states of the HTTP server."""
    UNSTARTED = "unstarted"
    LISTENING = "listening"
    STOPPED = "stopped"


class HTTPServer:
    """
    HTTP/1.1 server for a route table.

    Created once at startup and owns the dispatch table for its lifetime.
    A stopped server cannot be restarted; build a new one instead.
    """

    def __init__(self, router: RouteTable, logger: BoundLogger, addr: str = ":8080") -> None:
        # Fail on a malformed address at construction, not at start
        parse_address(addr)

        self.addr = addr
        self.router = router
        self.state = ServerState.UNSTARTED

        self._logger = logger
        self._lock = threading.Lock()
        self._bound: Optional[Tuple[str, int]] = None
        self._server: Optional[uvicorn.Server] = None
        self._thread: Optional[threading.Thread] = None
        self._stop_requested = False
        # Set by the serving thread if it ends before stop() asked it to
        self._failure: Optional[str] = None

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def start(self) -> None:
        """
        Bind and begin serving (non-blocking).

        Raises:
            BindException: If the address cannot be bound; the server stays
                UNSTARTED and nothing listens
            ServerStateException: If the server was already started
        """
        with self._lock:
            if self.state is not ServerState.UNSTARTED:
                raise ServerStateException(self.state.value, "start")

            sock = self._bind()

            config = uvicorn.Config(
                self.router.app,
                loop="asyncio",
                lifespan="off",
                log_config=None,
                access_log=False,
            )
            self._server = uvicorn.Server(config)
            self._bound = sock.getsockname()[:2]
            self._thread = threading.Thread(
                target=self._serve,
                args=(self._server, sock),
                name="http-server",
                daemon=True,
            )
            self._thread.start()
            self.state = ServerState.LISTENING

        self._logger.info("starting_http_server", addr=self.addr, bound=self.address)

    def stop(self, timeout: float = DEFAULT_STOP_TIMEOUT) -> None:
        """
        Stop accepting connections and drain in-flight requests.

        Args:
            timeout: seconds in-flight requests may take before being cancelled

        Raises:
            ShutdownTimeoutException: If requests were still running at the deadline
            ServerCrashedException: If the serving loop had already died
        """
        with self._lock:
            was_listening = self.state is ServerState.LISTENING
            self.state = ServerState.STOPPED
        if not was_listening:
            return

        self._logger.info("stopping_http_server", addr=self.addr, timeout=timeout)
        started = time.monotonic()

        # uvicorn closes the listener first, then waits for open connections
        self._stop_requested = True
        self._server.config.timeout_graceful_shutdown = max(timeout, 0.0)
        self._server.should_exit = True
        self._thread.join(timeout)

        if self._thread.is_alive():
            self._server.force_exit = True
            self._thread.join(FORCE_CLOSE_GRACE)
            self._logger.error(
                "http_server_shutdown_timeout",
                addr=self.addr,
                timeout=timeout,
                forced=not self._thread.is_alive(),
            )
            raise ShutdownTimeoutException(timeout)

        if self._failure is not None:
            raise ServerCrashedException(self.addr, self._failure)

        self._logger.info(
            "http_server_stopped",
            addr=self.addr,
            elapsed=round(time.monotonic() - started, 3),
        )

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    @property
    def address(self) -> Optional[Tuple[str, int]]:
        """Actual bound (host, port) while listening."""
        if self.state is not ServerState.LISTENING or self._failure is not None:
            return None
        return self._bound

    def _bind(self) -> socket.socket:
        host, port = parse_address(self.addr)
        try:
            if not host and socket.has_dualstack_ipv6():
                # All interfaces, IPv4 and IPv6 on one socket
                return socket.create_server(
                    ("", port), family=socket.AF_INET6, dualstack_ipv6=True
                )
            family = socket.AF_INET6 if ":" in host else socket.AF_INET
            return socket.create_server((host, port), family=family)
        except OSError as e:
            self._logger.error("failed_to_bind", addr=self.addr, error=str(e))
            raise BindException(self.addr, e.strerror or str(e)) from e

    def _serve(self, server: uvicorn.Server, sock: socket.socket) -> None:
        try:
            server.run(sockets=[sock])
            if not self._stop_requested:
                self._failure = "serving loop exited before stop was requested"
        except (Exception, SystemExit) as e:
            # uvicorn calls sys.exit() on some startup failures
            self._failure = str(e) or type(e).__name__
            self._logger.error("http_server_crashed", addr=self.addr, error=str(e), exc_info=True)
        finally:
            sock.close()

        if self._failure is not None:
            self._logger.error("http_server_not_serving", addr=self.addr, reason=self._failure)


__all__ = ["HTTPServer", "ServerState", "DEFAULT_STOP_TIMEOUT"]
