"""Debounce / throttle wrappers.

Used by callers that recompute layout on bursts of width or item changes.
Each wrapper owns its own timer or window; nothing is shared between
instances.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Optional

log = logging.getLogger(__name__)


class Debounced:
    """Run ``fn`` once, ``wait_ms`` after the last call in a burst."""

    def __init__(self, fn: Callable[..., Any], wait_ms: float) -> None:
        if wait_ms < 0:
            raise ValueError("wait_ms must be >= 0")
        self._fn = fn
        self._wait_s = wait_ms / 1000.0
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            timer = threading.Timer(self._wait_s, self._fire, args=(args, kwargs))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _fire(self, args: tuple, kwargs: dict) -> None:
        with self._lock:
            if self._timer is not threading.current_thread():
                # Superseded between cancel() and the timer waking up.
                return
            self._timer = None
        self._fn(*args, **kwargs)

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None


class Throttled:
    """Run ``fn`` at most once per ``limit_ms`` window; extra calls are dropped."""

    def __init__(
        self,
        fn: Callable[..., Any],
        limit_ms: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if limit_ms < 0:
            raise ValueError("limit_ms must be >= 0")
        self._fn = fn
        self._limit_s = limit_ms / 1000.0
        self._clock = clock
        self._lock = threading.Lock()
        self._window_start: Optional[float] = None

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        now = self._clock()
        with self._lock:
            if self._window_start is not None and now - self._window_start < self._limit_s:
                log.debug("throttled call to %r dropped", self._fn)
                return None
            self._window_start = now
        return self._fn(*args, **kwargs)


def debounce(fn: Callable[..., Any], wait_ms: float) -> Debounced:
    return Debounced(fn, wait_ms)


def throttle(
    fn: Callable[..., Any],
    limit_ms: float,
    clock: Callable[[], float] = time.monotonic,
) -> Throttled:
    return Throttled(fn, limit_ms, clock=clock)
