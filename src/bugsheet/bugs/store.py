"""Aggregate Store: the current classified snapshot.

┌──────────────────────────────────────────────────────────────────────────────┐
│  SNAPSHOT STORE                                                               │
│                                                                               │
│   Reconciler ──► swap(new) ──► [ _swap_lock ] ──► _current = new             │
│                                                                               │
│   reader ──► read() ──► _current   (no lock; one reference load)             │
│   reader ──► read() ──► _current                                              │
│                                                                               │
│  A Snapshot is frozen, and the raw bugs and their classification travel      │
│  together in it, so a reader holds either the old pair or the new pair.      │
│  Readers keep whatever snapshot they read for as long as they need it.       │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from bugsheet.bugs.bugmap import BugMap
from bugsheet.bugs.models import Bug


def utcnow() -> datetime:
    """Return timezone-aware UTC datetime."""
    return datetime.now(UTC)


@dataclass(frozen=True, eq=False)
class Snapshot:
    """Raw bugs of one fetch and their classification.

    ``generation`` numbers successive snapshots of one store, starting at 0
    for the bootstrap snapshot.
    """

    bugs: tuple[Bug, ...]
    bug_map: BugMap
    fetched_at: datetime = field(default_factory=utcnow)
    generation: int = 0

    @classmethod
    def build(
        cls,
        bugs: Iterable[Bug],
        bug_map: BugMap,
        *,
        fetched_at: datetime | None = None,
        generation: int = 0,
    ) -> Snapshot:
        return cls(
            bugs=tuple(bugs),
            bug_map=bug_map,
            fetched_at=fetched_at or utcnow(),
            generation=generation,
        )

    def __len__(self) -> int:
        return len(self.bugs)


class SnapshotStore:
    """Holds exactly one current :class:`Snapshot`.

    Example:
        >>> store = SnapshotStore(initial)
        >>> snapshot = store.read()
        >>> store.swap(newer)        # readers of `snapshot` are unaffected
    """

    def __init__(self, initial: Snapshot) -> None:
        self._current = initial
        self._swap_lock = threading.Lock()
        self._swaps = 0

    def read(self) -> Snapshot:
        """Return the current snapshot without waiting on an in-progress swap."""
        return self._current

    def swap(self, snapshot: Snapshot) -> Snapshot:
        """Install ``snapshot`` as current and return the one it replaced."""
        with self._swap_lock:
            previous = self._current
            self._current = snapshot
            self._swaps += 1
        return previous

    @property
    def swaps(self) -> int:
        """Number of swaps performed since construction."""
        return self._swaps

    def age(self, now: datetime | None = None) -> timedelta:
        """How long ago the current snapshot was fetched."""
        return (now or utcnow()) - self._current.fetched_at


__all__ = ["Snapshot", "SnapshotStore", "utcnow"]
