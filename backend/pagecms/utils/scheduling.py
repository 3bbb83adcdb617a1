"""
Delayed callbacks with cancel-on-supersede semantics (debounced saves).

A scheduler is anything with ``call_later(delay, callback)`` returning a
handle that has ``cancel()``. The default one uses threading.Timer.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Protocol

log = logging.getLogger(__name__)


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


class TimerScheduler:
    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class DelayedTask:
    """
    Runs ``callback`` once, ``delay`` seconds after the last schedule().

    Every schedule() supersedes the pending run. A run whose timer already
    fired while being superseded is discarded by generation check, so the
    callback never runs for a stale request.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        delay: float,
        scheduler: Optional[Scheduler] = None,
    ):
        self._callback = callback
        self.delay = delay
        self._scheduler = scheduler or TimerScheduler()
        self._lock = threading.Lock()
        self._handle: Optional[Cancellable] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._handle is not None

    def schedule(self) -> None:
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
            self._generation += 1
            generation = self._generation
            self._handle = self._scheduler.call_later(self.delay, lambda: self._fire(generation))

    def cancel(self) -> bool:
        """Drops the pending run; True when there was one."""
        with self._lock:
            if self._handle is None:
                return False
            self._handle.cancel()
            self._handle = None
            self._generation += 1
            return True

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._handle = None
        log.debug("Delayed task firing")
        self._callback()
