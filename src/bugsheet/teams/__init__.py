"""Team Directory: org file models and the component → team lookup."""

from bugsheet.teams.directory import (
    UNKNOWN_TEAM,
    TeamDirectory,
    load_org_data,
    load_team_directory,
)
from bugsheet.teams.models import Milestones, OrgData, ReleaseInfo, TeamInfo

__all__ = [
    "UNKNOWN_TEAM",
    "TeamDirectory",
    "load_org_data",
    "load_team_directory",
    "Milestones",
    "OrgData",
    "ReleaseInfo",
    "TeamInfo",
]
