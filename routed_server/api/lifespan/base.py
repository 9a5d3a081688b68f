"""Start/stop hooks and the lifecycle that runs them."""
import threading
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from structlog.stdlib import BoundLogger

from ...core.exceptions import StartTimeoutException


@dataclass
class Hook:
    """
    A pair of callbacks run when the application starts and stops.

    ``on_start`` takes no arguments. ``on_stop`` receives the seconds left
    before the stop deadline.
    """
    name: str
    on_start: Optional[Callable[[], None]] = None
    on_stop: Optional[Callable[[float], None]] = None


class Lifecycle:
    """
    Ordered collection of hooks.

    Start hooks run in the order they were appended; stop hooks run in
    reverse, and only for hooks whose start succeeded.
    """

    def __init__(self, logger: BoundLogger):
        self._logger = logger
        self._hooks: List[Hook] = []
        self._started: List[Hook] = []
        self._lock = threading.Lock()

    def append(self, hook: Hook) -> None:
        with self._lock:
            self._hooks.append(hook)
        self._logger.debug("lifecycle_hook_appended", hook=hook.name)

    @property
    def hooks(self) -> List[Hook]:
        return list(self._hooks)

    def start(self, timeout: float) -> None:
        """
        Run every start hook.

        If a hook fails or the deadline passes, hooks that already started
        are stopped in reverse order before the error propagates.

        Raises:
            StartTimeoutException: If the hooks did not finish within ``timeout``
        """
        deadline = time.monotonic() + timeout
        with self._lock:
            hooks = list(self._hooks)

        for hook in hooks:
            try:
                if time.monotonic() >= deadline:
                    raise StartTimeoutException(timeout)
                if hook.on_start is not None:
                    self._run("on_start", hook, hook.on_start)
                self._started.append(hook)
                if time.monotonic() > deadline:
                    raise StartTimeoutException(timeout)
            except Exception as e:
                self._logger.error(
                    "lifecycle_start_failed",
                    hook=hook.name,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                self._rollback(timeout)
                raise

    def stop(self, timeout: float) -> None:
        """
        Run stop hooks for every started hook, newest first.

        All hooks run even when one fails; the first failure is raised once
        they have all been given the chance to clean up.
        """
        deadline = time.monotonic() + timeout
        errors: List[Exception] = []

        while self._started:
            hook = self._started.pop()
            if hook.on_stop is None:
                continue
            remaining = max(deadline - time.monotonic(), 0.0)
            try:
                self._run("on_stop", hook, hook.on_stop, remaining)
            except Exception as e:
                self._logger.error(
                    "lifecycle_stop_failed",
                    hook=hook.name,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                errors.append(e)

        if errors:
            raise errors[0]

    def _rollback(self, timeout: float) -> None:
        if not self._started:
            return
        self._logger.info("lifecycle_rolling_back", hooks=[h.name for h in self._started])
        try:
            self.stop(timeout)
        except Exception as e:
            # The start failure is what the caller needs to see
            self._logger.error("lifecycle_rollback_failed", error=str(e))

    def _run(self, phase: str, hook: Hook, callback: Callable, *args) -> None:
        self._logger.info("lifecycle_hook_executing", hook=hook.name, phase=phase)
        started = time.monotonic()
        callback(*args)
        self._logger.info(
            "lifecycle_hook_executed",
            hook=hook.name,
            phase=phase,
            runtime=round(time.monotonic() - started, 6),
        )
