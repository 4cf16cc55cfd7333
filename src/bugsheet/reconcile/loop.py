"""Reconciliation loop.

┌──────────────────────────────────────────────────────────────────────────────┐
│  RECONCILER                                                                   │
│                                                                               │
│   bootstrap()  ── synchronous first cycle; raises → process fails to start   │
│      │                                                                        │
│      ▼                                                                        │
│   start()  ── daemon thread:                                                  │
│                                                                               │
│       IDLE ──ticker.wait()──► RECONCILING ──success──► IDLE                  │
│                                   │                                           │
│                                   └──error──► FAILED  (error put on the      │
│                                               channel once; thread exits)    │
│                                                                               │
│       ticker cancelled ──► STOPPED                                            │
│                                                                               │
│   One cycle:  source.search(query) → classify(bugs, directory)               │
│               → store.swap(Snapshot(bugs, bug_map))                           │
└──────────────────────────────────────────────────────────────────────────────┘

A failed cycle is never retried and never publishes a partial snapshot;
readers keep seeing the last good snapshot.  Retry policy, if wanted,
belongs to whoever supervises the error channel.
"""

from __future__ import annotations

import queue
import threading
from collections.abc import Callable
from datetime import datetime

from bugsheet.bugs.classify import classify
from bugsheet.bugs.models import BugQuery
from bugsheet.bugs.store import Snapshot, SnapshotStore, utcnow
from bugsheet.core.errors import BugsheetError, FetchError, ReconcileError
from bugsheet.core.logging import LogContext, get_logger
from bugsheet.reconcile.protocol import ReconcilerHealth, ReconcilerState, Ticker
from bugsheet.reconcile.ticker import EventTicker
from bugsheet.sources.protocol import BugSource
from bugsheet.teams.directory import UNKNOWN_TEAM, TeamDirectory

logger = get_logger(__name__)

DEFAULT_INTERVAL_SECONDS = 300.0


class Reconciler:
    """Keeps a :class:`SnapshotStore` in step with the issue tracker.

    Example:
        >>> reconciler = Reconciler(source, settings.bug_query(), directory)
        >>> store = reconciler.bootstrap()      # raises FetchError on failure
        >>> reconciler.start()
        >>> store.read().bug_map.count_all("Networking")
        >>> error = reconciler.errors.get()     # blocks until the loop fails
    """

    def __init__(
        self,
        source: BugSource,
        query: BugQuery,
        directory: TeamDirectory,
        *,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        ticker: Ticker | None = None,
        store: SnapshotStore | None = None,
        errors: queue.Queue[BugsheetError] | None = None,
    ) -> None:
        """Initialize the reconciler.

        Args:
            source: Issue-tracker capability
            query: Search sent on every cycle
            directory: Team directory used for classification
            interval_seconds: Fixed delay between cycles (default: 300s)
            ticker: Timing source (default: EventTicker)
            store: Existing store to refresh; omit and call bootstrap() instead
            errors: Channel receiving the terminal error (default: new queue)
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.source = source
        self.query = query
        self.directory = directory
        self.interval = interval_seconds
        self.ticker: Ticker = ticker or EventTicker()
        self.errors: queue.Queue[BugsheetError] = errors if errors is not None else queue.Queue()

        self._store = store
        self._next_generation = store.read().generation + 1 if store is not None else 0
        self._state = ReconcilerState.IDLE
        self._thread: threading.Thread | None = None
        self._cycles = 0
        self._last_success: datetime | None = None
        self._last_error: BugsheetError | None = None

    # === One cycle ===

    def build_snapshot(self) -> Snapshot:
        """Fetch and classify, without publishing.

        Raises:
            FetchError: the source failed.
            ReconcileError: classification failed.
        """
        fetched_at = utcnow()
        try:
            bugs = self.source.search(self.query)
        except FetchError:
            raise
        except Exception as e:
            raise FetchError(f"Bug search failed: {e}", cause=e).with_context(
                source_name=self.source.name
            ) from e

        try:
            bug_map = classify(bugs, self.directory)
        except Exception as e:
            raise ReconcileError(f"Classification failed: {e}", cause=e) from e

        return Snapshot.build(bugs, bug_map, fetched_at=fetched_at, generation=self._next_generation)

    def bootstrap(self) -> SnapshotStore:
        """Run the first cycle synchronously and create the store.

        Raises:
            FetchError, ReconcileError: the first cycle failed; nothing is
                published and the loop must not be started.
        """
        if self._store is not None:
            raise RuntimeError("Reconciler already has a store")
        self._run_cycle(self._install_initial)
        return self._store  # type: ignore[return-value]

    def reconcile(self) -> Snapshot:
        """Run one cycle and swap its snapshot into the store."""
        if self._store is None:
            raise RuntimeError("Reconciler has no store; call bootstrap() first")
        return self._run_cycle(self._store.swap)

    def _install_initial(self, snapshot: Snapshot) -> None:
        self._store = SnapshotStore(snapshot)

    def _run_cycle(self, publish: Callable[[Snapshot], object]) -> Snapshot:
        self._state = ReconcilerState.RECONCILING
        self._cycles += 1
        with LogContext(cycle=self._cycles, source=self.source.name):
            logger.debug("reconcile.started")
            try:
                snapshot = self.build_snapshot()
            except BugsheetError as e:
                self._state = ReconcilerState.FAILED
                self._last_error = e
                logger.error("reconcile.failed", **e.to_dict())
                raise
            publish(snapshot)
            self._next_generation += 1
            self._last_success = snapshot.fetched_at
            self._state = ReconcilerState.IDLE
            logger.info(
                "reconcile.completed",
                generation=snapshot.generation,
                teams=len(self.directory),
                bugs=len(snapshot),
                unknown=snapshot.bug_map.count_all(UNKNOWN_TEAM),
            )
        return snapshot

    # === Lifecycle ===

    @property
    def store(self) -> SnapshotStore:
        if self._store is None:
            raise RuntimeError("Reconciler has no store; call bootstrap() first")
        return self._store

    def run(self) -> None:
        """Loop until cancelled or until a cycle fails (blocking)."""
        logger.info("reconciler.started", interval_seconds=self.interval, ticker=self.ticker.name)
        while self.ticker.wait(self.interval):
            try:
                self.reconcile()
            except BugsheetError as e:
                self.errors.put(e)
                return
            except Exception as e:
                error = ReconcileError(f"Unexpected reconciliation failure: {e}", cause=e)
                self._state = ReconcilerState.FAILED
                self._last_error = error
                logger.exception("reconcile.crashed")
                self.errors.put(error)
                return
        self._state = ReconcilerState.STOPPED
        logger.info("reconciler.stopped", cycles=self._cycles)

    def start(self) -> None:
        """Start the loop in a daemon thread."""
        if self._store is None:
            raise RuntimeError("Reconciler has no store; call bootstrap() first")
        if self._thread is not None:
            logger.warning("reconciler.already_started")
            return
        self._thread = threading.Thread(target=self.run, daemon=True, name="bugsheet-reconciler")
        self._thread.start()

    def stop(self, timeout: float = 5.0) -> None:
        """Cancel the ticker and wait for the current cycle to finish."""
        self.ticker.cancel()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("reconciler.stop_timeout", timeout=timeout)

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the loop thread to exit; True if it has."""
        if self._thread is None:
            return True
        self._thread.join(timeout=timeout)
        return not self._thread.is_alive()

    # === Introspection ===

    @property
    def state(self) -> ReconcilerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def cycles(self) -> int:
        return self._cycles

    @property
    def last_error(self) -> BugsheetError | None:
        return self._last_error

    def health(self) -> ReconcilerHealth:
        snapshot = self._store.read() if self._store is not None else None
        return ReconcilerHealth(
            healthy=self._state in (ReconcilerState.IDLE, ReconcilerState.RECONCILING)
            and snapshot is not None,
            state=self._state,
            ticker=self.ticker.name,
            cycles=self._cycles,
            generation=snapshot.generation if snapshot is not None else None,
            last_success=self._last_success,
            snapshot_age_seconds=self._store.age().total_seconds() if self._store is not None else None,
            last_error=self._last_error.to_dict() if self._last_error else None,
            extra={"interval_seconds": self.interval, "running": self.is_running},
        )


__all__ = ["Reconciler", "DEFAULT_INTERVAL_SECONDS"]
