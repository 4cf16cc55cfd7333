"""Classification map and the query/filter engine over it.

A :class:`BugMap` maps team name → tuple of bugs.  It is immutable: every
filter returns a new map built from new tuples, so a snapshot handed to
concurrent readers can never be modified through a query.

Counting rules:
    - Only the first ``target_release`` element is compared, by exact
      string match.  A bug with no target release never matches.
    - ``count_blocker`` is severity != "low" AND first target in targets.
    - Unknown teams count as 0 and filter to nothing.

Example:
    >>> bug_map = BugMap({"X": (Bug(1, severity="low", target_release=("4.5.0",)),
    ...                         Bug(2, severity="high", target_release=("4.5.0",)))})
    >>> bug_map.count_blocker("X", ["4.5.0"])
    1
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import asdict, dataclass
from types import MappingProxyType
from typing import Any

from bugsheet.bugs.models import UPCOMING_SPRINT, Bug


@dataclass(frozen=True)
class TeamCounts:
    """Every published metric for one team."""

    team: str
    all: int
    blocker: int
    target_release: int
    low_severity: int
    not_low_severity: int
    upcoming_sprint: int
    not_upcoming_sprint: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class BugMap(Mapping[str, tuple[Bug, ...]]):
    """Immutable team → bugs mapping with counting and filtering queries."""

    __slots__ = ("_teams",)

    def __init__(self, teams: Mapping[str, Iterable[Bug]] | None = None) -> None:
        frozen = {name: tuple(bugs) for name, bugs in (teams or {}).items()}
        self._teams: Mapping[str, tuple[Bug, ...]] = MappingProxyType(frozen)

    # ── Mapping protocol ─────────────────────────────────────────

    def __getitem__(self, team: str) -> tuple[Bug, ...]:
        return self._teams[team]

    def __iter__(self) -> Iterator[str]:
        return iter(self._teams)

    def __len__(self) -> int:
        return len(self._teams)

    def __repr__(self) -> str:
        sizes = ", ".join(f"{team}={len(bugs)}" for team, bugs in self._teams.items())
        return f"BugMap({sizes})"

    # ── Queries ──────────────────────────────────────────────────

    def bugs(self, team: str) -> tuple[Bug, ...]:
        """Bugs of ``team``; empty when the team is unknown."""
        return self._teams.get(team, ())

    def teams(self) -> list[str]:
        """Team names, sorted."""
        return sorted(self._teams)

    def total(self) -> int:
        return sum(len(bugs) for bugs in self._teams.values())

    def _filter(self, keep: Callable[[Bug], bool]) -> BugMap:
        return BugMap({team: [bug for bug in bugs if keep(bug)] for team, bugs in self._teams.items()})

    def filter_by_target_release(self, releases: Iterable[str]) -> BugMap:
        """Per team, keep bugs whose first target release is in ``releases``."""
        wanted = frozenset(releases)
        return self._filter(lambda bug: bug.primary_target_release in wanted)

    def filter_by_severity(self, severities: Iterable[str]) -> BugMap:
        """Per team, keep bugs whose severity is in ``severities``."""
        wanted = frozenset(severities)
        return self._filter(lambda bug: bug.severity in wanted)

    def count_all(self, team: str) -> int:
        return len(self.bugs(team))

    def count_by_keyword(self, team: str, keyword: str) -> int:
        """Bugs of ``team`` carrying the literal ``keyword``."""
        return sum(1 for bug in self.bugs(team) if bug.has_keyword(keyword))

    def count_upcoming_sprint(self, team: str) -> int:
        return self.count_by_keyword(team, UPCOMING_SPRINT)

    def count_not_upcoming_sprint(self, team: str) -> int:
        return self.count_all(team) - self.count_upcoming_sprint(team)

    def count_low_severity(self, team: str) -> int:
        return sum(1 for bug in self.bugs(team) if bug.is_low_severity)

    def count_not_low_severity(self, team: str) -> int:
        return self.count_all(team) - self.count_low_severity(team)

    def count_target_release(self, team: str, targets: Iterable[str]) -> int:
        wanted = frozenset(targets)
        return sum(1 for bug in self.bugs(team) if bug.primary_target_release in wanted)

    def count_blocker(self, team: str, targets: Iterable[str]) -> int:
        """Non-low-severity bugs of ``team`` targeted at one of ``targets``."""
        wanted = frozenset(targets)
        return sum(
            1
            for bug in self.bugs(team)
            if not bug.is_low_severity and bug.primary_target_release in wanted
        )

    def summary(self, team: str, targets: Iterable[str]) -> TeamCounts:
        targets = list(targets)
        return TeamCounts(
            team=team,
            all=self.count_all(team),
            blocker=self.count_blocker(team, targets),
            target_release=self.count_target_release(team, targets),
            low_severity=self.count_low_severity(team),
            not_low_severity=self.count_not_low_severity(team),
            upcoming_sprint=self.count_upcoming_sprint(team),
            not_upcoming_sprint=self.count_not_upcoming_sprint(team),
        )

    def summaries(self, targets: Iterable[str]) -> list[TeamCounts]:
        """One :class:`TeamCounts` per team, sorted by team name."""
        targets = list(targets)
        return [self.summary(team, targets) for team in self.teams()]


__all__ = ["BugMap", "TeamCounts"]
