"""Org file schema: teams, their components, and releases.

Top-level keys are CamelCase (``OrgTitle``, ``Teams``, ``Releases``);
snake_case keys are accepted as well.

Example (YAML)::

    OrgTitle: OpenShift Engineering
    Teams:
      - name: Networking
        lead: jdoe
        managers: [asmith]
        group: Platform
        components: [Networking, Networking/ovn-kubernetes]
    Releases:
      - name: "4.5"
        targets: ["---", "4.5.0"]
        milestones:
          code_freeze: "2020-06-15"
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TeamInfo(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(min_length=1)
    lead: str = ""
    managers: tuple[str, ...] = ()
    group: str = ""
    components: tuple[str, ...] = ()


class Milestones(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    start: str = ""
    feature_complete: str = ""
    code_freeze: str = ""
    ga: str = ""


class ReleaseInfo(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(min_length=1)
    targets: tuple[str, ...] = ()
    milestones: Milestones = Field(default_factory=Milestones)


class OrgData(BaseModel):
    """Top-level org file document."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    org_title: str = Field(default="", alias="OrgTitle")
    teams: tuple[TeamInfo, ...] = Field(default=(), alias="Teams")
    releases: tuple[ReleaseInfo, ...] = Field(default=(), alias="Releases")


__all__ = ["TeamInfo", "Milestones", "ReleaseInfo", "OrgData"]
