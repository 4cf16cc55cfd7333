"""Ticker implementations.

``EventTicker`` is the production ticker: ``threading.Event.wait`` with the
loop interval as timeout, so ``cancel()`` wakes a sleeping loop at once
instead of after up to five minutes.

``ManualTicker`` fires only when a test calls ``tick()``; it lets tests
drive the loop cycle by cycle without wall-clock sleeps.
"""

from __future__ import annotations

import threading


class EventTicker:
    """Fixed-interval ticker backed by a ``threading.Event``.

    Example:
        >>> ticker = EventTicker()
        >>> while ticker.wait(300.0):
        ...     reconcile()
        >>> # another thread: ticker.cancel()
    """

    name = "event"

    def __init__(self) -> None:
        self._cancelled = threading.Event()

    def wait(self, interval_seconds: float) -> bool:
        return not self._cancelled.wait(interval_seconds)

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()


class ManualTicker:
    """Ticker that fires on demand.

    ``tick()`` queues one tick; ``wait`` consumes one queued tick and ignores
    the interval.  ``wait_for_waiters(n)`` blocks until the loop has entered
    ``wait`` ``n`` times in total, i.e. until ``n - 1`` cycles have finished.
    """

    name = "manual"

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._pending = 0
        self._waits = 0
        self._cancelled = False

    def wait(self, interval_seconds: float) -> bool:
        with self._cond:
            self._waits += 1
            self._cond.notify_all()
            while self._pending == 0 and not self._cancelled:
                self._cond.wait()
            if self._cancelled:
                return False
            self._pending -= 1
            return True

    def tick(self, count: int = 1) -> None:
        with self._cond:
            self._pending += count
            self._cond.notify_all()

    def cancel(self) -> None:
        with self._cond:
            self._cancelled = True
            self._cond.notify_all()

    @property
    def waits(self) -> int:
        with self._cond:
            return self._waits

    def wait_for_waiters(self, count: int, timeout: float = 5.0) -> bool:
        """Block until ``wait`` has been entered ``count`` times."""
        with self._cond:
            return self._cond.wait_for(lambda: self._waits >= count, timeout=timeout)


__all__ = ["EventTicker", "ManualTicker"]
