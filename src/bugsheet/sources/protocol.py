"""
Bug source protocol.

The reconciliation core needs exactly one capability from the issue
tracker: run a search and return bugs, or fail with ``FetchError``.

Implementations:
    - BugzillaSource: Bugzilla REST over httpx (production)
    - FileBugSource: JSON fixture file (``test_bug_data`` setting)
    - StaticBugSource: in-memory bugs (embedding, tests)
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from bugsheet.bugs.models import Bug, BugQuery


@runtime_checkable
class BugSource(Protocol):
    """Capability interface for the issue tracker."""

    @property
    def name(self) -> str:
        """Unique source name, used in logs and error context."""
        ...

    def search(self, query: BugQuery) -> list[Bug]:
        """Run ``query`` and return matching bugs in tracker order.

        Raises:
            FetchError: network, authentication or query failure.
        """
        ...


class StaticBugSource:
    """Serves a fixed list of bugs, filtered by the query's status and exclusions."""

    name = "static"

    def __init__(self, bugs: Iterable[Bug] = ()) -> None:
        self._bugs = list(bugs)

    def search(self, query: BugQuery) -> list[Bug]:
        return [bug for bug in self._bugs if query.matches(bug)]


__all__ = ["BugSource", "StaticBugSource"]
