"""Cancellable throttle with leading and trailing edges.

Drag-hover events arrive far faster than the tree needs refreshing.  A
:class:`Throttle` runs the first call of a burst immediately, remembers the
latest arguments of the calls that follow, and runs them once more when the
window has elapsed and the owner calls :meth:`Throttle.poll`.  Nothing runs
on another thread: a trailing call only fires from ``poll``, and
:meth:`Throttle.cancel` guarantees a queued call never fires.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any


class Throttle:
    """Wrap *func* so it runs at most once per *wait* seconds."""

    def __init__(self, func: Callable[..., Any], wait: float, *,
                 clock: Callable[[], float] = time.monotonic):
        if wait < 0:
            raise ValueError(f"wait must be >= 0, got {wait!r}")
        self._func = func
        self._wait = wait
        self._clock = clock
        self._window_end: float | None = None
        self._pending: tuple[tuple, dict] | None = None

    def __call__(self, *args, **kwargs) -> None:
        now = self._clock()
        if self._window_end is None or now >= self._window_end:
            if self._pending is not None:
                # Window elapsed with a queued call nobody polled for
                self._fire(now)
                if now < self._window_end:
                    self._pending = (args, kwargs)
                    return
            self._pending = None
            self._invoke(now, args, kwargs)
        else:
            self._pending = (args, kwargs)

    @property
    def pending(self) -> bool:
        """True if a trailing-edge call is queued."""
        return self._pending is not None

    def poll(self) -> bool:
        """Run the queued trailing call if its window has elapsed.

        Returns True if the wrapped function ran.
        """
        if self._pending is None:
            return False
        now = self._clock()
        if self._window_end is not None and now < self._window_end:
            return False
        self._fire(now)
        return True

    def cancel(self) -> None:
        """Drop any queued call and close the current window."""
        self._pending = None
        self._window_end = None

    def _fire(self, now: float) -> None:
        args, kwargs = self._pending
        self._pending = None
        self._invoke(now, args, kwargs)

    def _invoke(self, now: float, args: tuple, kwargs: dict) -> None:
        self._window_end = now + self._wait
        self._func(*args, **kwargs)
