"""Keep the server alive only while the browser keeps calling in."""

from __future__ import annotations

import enum
import logging
import os
import signal
import threading
import time
from collections.abc import Callable

from .locks import ReadWriteLock

logger = logging.getLogger(__name__)

HEARTBEAT_TIMEOUT = 60.0
CHECK_INTERVAL = 10.0
SHUTDOWN_GRACE = 0.1


class LifecycleState(enum.Enum):
    STARTING = "starting"
    RUNNING = "running"
    TERMINATING = "terminating"
    TERMINATED = "terminated"


def signal_self() -> None:
    """Deliver SIGTERM to this process so the server runs its graceful shutdown."""

    os.kill(os.getpid(), signal.SIGTERM)


class LifecycleSupervisor:
    """Tracks client heartbeats and ends the process when they stop.

    Three triggers lead to termination: no heartbeat for ``timeout`` seconds,
    an explicit :meth:`request_shutdown`, or an OS signal handled by the
    server, which then calls :meth:`stop`. Termination is final.
    """

    def __init__(
        self,
        *,
        timeout: float = HEARTBEAT_TIMEOUT,
        check_interval: float = CHECK_INTERVAL,
        grace_delay: float = SHUTDOWN_GRACE,
        clock: Callable[[], float] = time.monotonic,
        terminate: Callable[[], None] = signal_self,
    ) -> None:
        self.timeout = timeout
        self.check_interval = check_interval
        self.grace_delay = grace_delay
        self._clock = clock
        self._terminate = terminate

        self._heartbeat_lock = ReadWriteLock()
        self._last_seen = clock()

        self._state = LifecycleState.STARTING
        self.transitions: list[LifecycleState] = [self._state]
        self._state_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._monitor: threading.Thread | None = None
        self._timer: threading.Timer | None = None

    @property
    def state(self) -> LifecycleState:
        with self._state_lock:
            return self._state

    @property
    def last_seen(self) -> float:
        with self._heartbeat_lock.read():
            return self._last_seen

    def start(self) -> None:
        with self._state_lock:
            if self._state is not LifecycleState.STARTING:
                return
            self._set_state(LifecycleState.RUNNING)
        self.heartbeat()
        self._monitor = threading.Thread(
            target=self._run_monitor, name="heartbeat-monitor", daemon=True
        )
        self._monitor.start()

    def heartbeat(self) -> None:
        with self._heartbeat_lock.write():
            self._last_seen = self._clock()

    def check(self) -> bool:
        """Run one monitor tick. Returns ``True`` when termination was triggered."""

        idle = self._clock() - self.last_seen
        if idle <= self.timeout:
            return False
        if not self._begin_termination():
            return False
        logger.warning("No heartbeat for %.0f seconds, shutting down...", idle)
        self._stop_event.set()
        self._terminate()
        return True

    def request_shutdown(self) -> None:
        """Terminate after a short delay so the current response can be sent."""

        if not self._begin_termination():
            return
        logger.info("Shutdown requested by client")
        self._stop_event.set()
        self._timer = threading.Timer(self.grace_delay, self._terminate)
        self._timer.daemon = True
        self._timer.start()

    def stop(self, reason: str = "server stopped") -> None:
        """Final transition, called once the server has stopped serving."""

        self._begin_termination()
        with self._state_lock:
            if self._state is LifecycleState.TERMINATED:
                return
            self._set_state(LifecycleState.TERMINATED)
        logger.info("Lifecycle terminated: %s", reason)
        self._stop_event.set()
        monitor = self._monitor
        if monitor is not None and monitor is not threading.current_thread():
            monitor.join(timeout=self.check_interval)

    def _begin_termination(self) -> bool:
        with self._state_lock:
            if self._state in (LifecycleState.TERMINATING, LifecycleState.TERMINATED):
                return False
            self._set_state(LifecycleState.TERMINATING)
            return True

    def _set_state(self, state: LifecycleState) -> None:
        # caller holds _state_lock
        self._state = state
        self.transitions.append(state)

    def _run_monitor(self) -> None:
        while not self._stop_event.wait(self.check_interval):
            if self.check():
                return
