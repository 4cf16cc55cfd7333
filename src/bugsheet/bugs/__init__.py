"""Bug records, classification, the snapshot store and the query engine."""

from bugsheet.bugs.bugmap import BugMap, TeamCounts
from bugsheet.bugs.classify import classify
from bugsheet.bugs.models import (
    LOW_SEVERITY,
    UPCOMING_SPRINT,
    AdvancedQuery,
    Bug,
    BugQuery,
    bugs_from_api,
)
from bugsheet.bugs.store import Snapshot, SnapshotStore

__all__ = [
    "BugMap",
    "TeamCounts",
    "classify",
    "LOW_SEVERITY",
    "UPCOMING_SPRINT",
    "AdvancedQuery",
    "Bug",
    "BugQuery",
    "bugs_from_api",
    "Snapshot",
    "SnapshotStore",
]
