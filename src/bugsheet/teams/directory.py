"""Team Directory: component name → owning team.

The directory is built once from the org file and never mutated; the
reconciliation loop and every reader share the same instance.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from bugsheet.core.errors import InvalidConfigError, MissingConfigError
from bugsheet.core.logging import get_logger
from bugsheet.teams.models import OrgData, ReleaseInfo, TeamInfo

logger = get_logger(__name__)

UNKNOWN_TEAM = "unknown"


class TeamDirectory:
    """Deterministic component → team lookup.

    Example:
        >>> org = OrgData(Teams=[TeamInfo(name="Networking", components=("Networking",))])
        >>> directory = TeamDirectory(org)
        >>> directory.resolve_team("Networking")
        'Networking'
        >>> directory.resolve_team("Installer")
        'unknown'
    """

    def __init__(self, org: OrgData) -> None:
        self._org = org
        self._teams: dict[str, TeamInfo] = {}
        self._owners: dict[str, str] = {}

        for team in org.teams:
            if team.name in self._teams or team.name == UNKNOWN_TEAM:
                raise InvalidConfigError("Teams.name", team.name, f"Duplicate or reserved team name: {team.name}")
            self._teams[team.name] = team
            for component in team.components:
                owner = self._owners.get(component)
                if owner is not None and owner != team.name:
                    raise InvalidConfigError(
                        "Teams.components",
                        component,
                        f"Component {component!r} is owned by both {owner!r} and {team.name!r}",
                    )
                self._owners[component] = team.name

    @property
    def org(self) -> OrgData:
        return self._org

    def resolve_team(self, component: str | None) -> str:
        """Return the team owning ``component``, or ``"unknown"``."""
        if component is None:
            return UNKNOWN_TEAM
        return self._owners.get(component, UNKNOWN_TEAM)

    def team_names(self) -> list[str]:
        """Team names in org file order (``"unknown"`` not included)."""
        return list(self._teams)

    def get_team(self, name: str) -> TeamInfo | None:
        return self._teams.get(name)

    def release(self, name: str) -> ReleaseInfo:
        for release in self._org.releases:
            if release.name == name:
                return release
        raise MissingConfigError(f"Releases.{name}", f"Release {name!r} not found in org file")

    def release_targets(self, name: str) -> list[str]:
        """Target release values of the named release."""
        return list(self.release(name).targets)

    def __len__(self) -> int:
        return len(self._teams)

    def __contains__(self, name: object) -> bool:
        return name in self._teams


def _read_document(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(text)
    return json.loads(text)


def load_org_data(path: str | Path) -> OrgData:
    """Load and validate an org file (``.json``, ``.yaml`` or ``.yml``).

    Raises:
        MissingConfigError: the file does not exist or is unreadable.
        InvalidConfigError: the file does not parse or does not validate.
    """
    org_path = Path(path)
    try:
        document = _read_document(org_path)
    except FileNotFoundError as e:
        raise MissingConfigError(str(org_path), f"Org file not found: {org_path}", cause=e) from e
    except OSError as e:
        raise MissingConfigError(str(org_path), f"Org file unreadable: {org_path}", cause=e) from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise InvalidConfigError(str(org_path), None, f"Org file does not parse: {org_path}", cause=e) from e

    if not isinstance(document, dict):
        raise InvalidConfigError(str(org_path), type(document).__name__, "Org file must contain a mapping")

    try:
        org = OrgData.model_validate(document)
    except ValidationError as e:
        raise InvalidConfigError(str(org_path), None, f"Org file is invalid: {e}", cause=e) from e

    logger.info("teams.loaded", path=str(org_path), teams=len(org.teams), releases=len(org.releases))
    return org


def load_team_directory(path: str | Path) -> TeamDirectory:
    """Load an org file and build its directory."""
    return TeamDirectory(load_org_data(path))


__all__ = [
    "UNKNOWN_TEAM",
    "TeamDirectory",
    "load_org_data",
    "load_team_directory",
]
