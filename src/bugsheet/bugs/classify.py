"""Classifier: partition fetched bugs by owning team.

Single pass, fetch order preserved, no retries.  The result always has one
entry per directory team plus ``"unknown"``, and every input bug lands in
exactly one of them.
"""

from __future__ import annotations

from collections.abc import Iterable

from bugsheet.bugs.bugmap import BugMap
from bugsheet.bugs.models import Bug
from bugsheet.core.errors import ClassificationInvariantViolation
from bugsheet.core.logging import get_logger
from bugsheet.teams.directory import UNKNOWN_TEAM, TeamDirectory

logger = get_logger(__name__)


def classify(bugs: Iterable[Bug], directory: TeamDirectory) -> BugMap:
    """Assign each bug to the team owning its first component.

    Bugs without any component are routed to ``"unknown"`` and logged.
    """
    out: dict[str, list[Bug]] = {name: [] for name in directory.team_names()}
    out[UNKNOWN_TEAM] = []

    for bug in bugs:
        component = bug.primary_component
        if component is None:
            violation = ClassificationInvariantViolation(bug.id)
            logger.warning("classify.ownerless_bug", **violation.to_dict())
        out[directory.resolve_team(component)].append(bug)

    return BugMap(out)


__all__ = ["classify"]
