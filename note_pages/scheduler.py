"""Single-flight periodic task runner.

Building Block: PeriodicTask
    Input Data:  zero-argument callable, interval in seconds
    Output Data: none (the callable's side effects)
    Setup Data:  interval (300s = every five minutes by default)

Usage::

    task = PeriodicTask("process_notes", sweep, interval=300)
    task.start()          # background thread
    task.run_once()       # direct call, e.g. from tests
    task.stop()
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

DEFAULT_INTERVAL = 300.0

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Runs a job every `interval` seconds, never two runs at once.

    A trigger that arrives while the previous run is still in flight is
    skipped rather than queued.
    """

    def __init__(self, name: str, job: Callable[[], object],
                 interval: float = DEFAULT_INTERVAL) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.name = name
        self.interval = interval
        self._job = job
        self._running = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def busy(self) -> bool:
        return self._running.locked()

    def run_once(self) -> bool:
        """Run the job now unless a run is in flight. Returns True if it ran."""
        if not self._running.acquire(blocking=False):
            logger.warning("Task '%s' still running, skipping this trigger", self.name)
            return False
        try:
            logger.info("Starting task '%s'", self.name)
            self._job()
        except Exception:
            logger.exception("Task '%s' failed", self.name)
        finally:
            self._running.release()
        return True

    def _loop(self) -> None:
        while not self._stop.wait(self.interval):
            self.run_once()

    def start(self) -> None:
        """Start the background timer thread. The first run is one interval away."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._loop, name=f"periodic-{self.name}", daemon=True
        )
        self._thread.start()
        logger.info("Registered task '%s' - runs every %gs", self.name, self.interval)

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def wait(self) -> None:
        """Block until stop() is called from another thread or a signal."""
        while not self._stop.wait(1.0):
            pass
