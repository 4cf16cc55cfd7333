"""Tests for Snapshot and SnapshotStore."""

import threading
from datetime import UTC, datetime, timedelta

from bugsheet.bugs.bugmap import BugMap
from bugsheet.bugs.classify import classify
from bugsheet.bugs.models import Bug
from bugsheet.bugs.store import Snapshot, SnapshotStore


def _snapshot(generation: int, bugs=()) -> Snapshot:
    bug_map = BugMap({"X": bugs})
    return Snapshot.build(bugs, bug_map, generation=generation)


class TestSnapshot:
    def test_build(self, bugs, directory):
        snapshot = Snapshot.build(iter(bugs), classify(bugs, directory), generation=2)
        assert len(snapshot) == 6
        assert isinstance(snapshot.bugs, tuple)
        assert snapshot.generation == 2
        assert snapshot.fetched_at.tzinfo is not None

    def test_explicit_fetch_time(self):
        when = datetime(2020, 6, 1, tzinfo=UTC)
        assert Snapshot.build((), BugMap(), fetched_at=when).fetched_at == when


class TestSnapshotStore:
    """Test read/swap semantics."""

    def test_read_returns_initial(self):
        initial = _snapshot(0)
        assert SnapshotStore(initial).read() is initial

    def test_swap_returns_previous(self):
        first, second = _snapshot(0), _snapshot(1)
        store = SnapshotStore(first)

        assert store.swap(second) is first
        assert store.read() is second
        assert store.swaps == 1

    def test_reader_keeps_its_snapshot_across_swap(self):
        store = SnapshotStore(_snapshot(0, (Bug(1),)))
        held = store.read()
        store.swap(_snapshot(1, (Bug(2),)))

        assert held.generation == 0
        assert [b.id for b in held.bug_map["X"]] == [1]

    def test_age(self):
        when = datetime(2020, 6, 1, tzinfo=UTC)
        store = SnapshotStore(Snapshot.build((), BugMap(), fetched_at=when))
        assert store.age(when + timedelta(seconds=30)) == timedelta(seconds=30)

    def test_concurrent_reads_see_consistent_snapshots(self):
        """Readers racing a writer only ever see whole snapshots."""
        snapshots = [_snapshot(g, tuple(Bug(g * 10 + i) for i in range(g % 5))) for g in range(200)]
        store = SnapshotStore(snapshots[0])
        done = threading.Event()
        problems: list[str] = []

        def reader() -> None:
            while not done.is_set():
                snapshot = store.read()
                if len(snapshot.bug_map["X"]) != len(snapshot.bugs):
                    problems.append(f"generation {snapshot.generation} torn")

        readers = [threading.Thread(target=reader) for _ in range(4)]
        for thread in readers:
            thread.start()
        for snapshot in snapshots[1:]:
            store.swap(snapshot)
        done.set()
        for thread in readers:
            thread.join(timeout=5)

        assert problems == []
        assert store.read() is snapshots[-1]
        assert store.swaps == 199
