"""Tests for EventTicker and ManualTicker."""

import threading
import time

from bugsheet.reconcile import EventTicker, ManualTicker, Ticker


class TestEventTicker:
    def test_fires_after_interval(self):
        assert EventTicker().wait(0.01) is True

    def test_cancel_stops_waiting(self):
        ticker = EventTicker()
        ticker.cancel()
        assert ticker.cancelled
        assert ticker.wait(10.0) is False

    def test_cancel_wakes_sleeping_waiter(self):
        """A loop sleeping through a long interval exits promptly on cancel."""
        ticker = EventTicker()
        results: list[bool] = []
        thread = threading.Thread(target=lambda: results.append(ticker.wait(60.0)))
        thread.start()

        start = time.monotonic()
        ticker.cancel()
        thread.join(timeout=5)

        assert results == [False]
        assert time.monotonic() - start < 5

    def test_satisfies_protocol(self):
        assert isinstance(EventTicker(), Ticker)


class TestManualTicker:
    def test_queued_ticks_are_consumed(self):
        ticker = ManualTicker()
        ticker.tick(2)
        assert ticker.wait(300.0) is True
        assert ticker.wait(300.0) is True
        assert ticker.waits == 2

    def test_cancel_wins_over_pending_ticks(self):
        ticker = ManualTicker()
        ticker.tick()
        ticker.cancel()
        assert ticker.wait(300.0) is False

    def test_wait_for_waiters(self):
        ticker = ManualTicker()
        thread = threading.Thread(target=ticker.wait, args=(300.0,))
        thread.start()

        assert ticker.wait_for_waiters(1)
        ticker.tick()
        thread.join(timeout=5)
        assert not thread.is_alive()

    def test_wait_for_waiters_times_out(self):
        assert ManualTicker().wait_for_waiters(1, timeout=0.01) is False

    def test_satisfies_protocol(self):
        assert isinstance(ManualTicker(), Ticker)
