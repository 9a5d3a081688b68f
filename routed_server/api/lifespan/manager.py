"""
routed_server/api/lifespan/manager.py
Process supervisor: runs lifecycle hooks at boot and on shutdown signals.

Startup:
- Run start hooks in order (binds the HTTP server)
- Roll back on the first failure

Shutdown:
- Wait for SIGINT/SIGTERM
- Run stop hooks in reverse within the stop deadline
"""

import signal
import threading
from typing import Optional

from structlog.stdlib import BoundLogger

from ...core.exceptions import ServerStateException
from .base import Lifecycle

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class App:
    """
    Owns the lifecycle of a fully built object graph.

    Start hooks run exactly once; an App cannot be restarted.
    """

    def __init__(
        self,
        lifecycle: Lifecycle,
        logger: BoundLogger,
        start_timeout: float = 15.0,
        stop_timeout: float = 15.0,
    ):
        self.lifecycle = lifecycle
        self.start_timeout = start_timeout
        self.stop_timeout = stop_timeout

        self._logger = logger
        self._started = False
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._signal_name: Optional[str] = None

    def start(self) -> None:
        """Run start hooks. Raises whatever the failing hook raised."""
        with self._lock:
            if self._started:
                raise ServerStateException("started", "start")
            self._started = True

        self._logger.info("app_starting", hooks=len(self.lifecycle.hooks))
        self.lifecycle.start(self.start_timeout)
        self._logger.info("app_started")

    def stop(self) -> None:
        self._logger.info("app_stopping")
        self.lifecycle.stop(self.stop_timeout)
        self._logger.info("app_stopped")

    def shutdown(self, reason: str = "shutdown") -> None:
        """Release a pending ``wait()`` without a signal."""
        self._signal_name = reason
        self._done.set()

    def wait(self) -> str:
        """
        Block until SIGINT or SIGTERM arrives (or ``shutdown()`` is called).

        Must be called from the main thread.

        Returns:
            Name of the signal (or shutdown reason) that ended the wait
        """
        def _handler(signum, frame):
            self.shutdown(signal.Signals(signum).name)

        previous = {sig: signal.signal(sig, _handler) for sig in SHUTDOWN_SIGNALS}
        try:
            while not self._done.wait(0.5):
                pass
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)

        self._logger.info("received_signal", signal=self._signal_name)
        return self._signal_name

    def run(self) -> int:
        """
        Start, wait for a shutdown signal, stop.

        Returns:
            Process exit code: 0 on clean shutdown, 1 on start or stop failure
        """
        try:
            self.start()
        except Exception as e:
            self._logger.error("app_start_failed", error=str(e), error_type=type(e).__name__)
            return 1

        self.wait()

        try:
            self.stop()
        except Exception as e:
            self._logger.error("app_stop_failed", error=str(e), error_type=type(e).__name__)
            return 1
        return 0


__all__ = ["App", "SHUTDOWN_SIGNALS"]
