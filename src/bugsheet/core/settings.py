"""Centralized settings for bugsheet.

One validated settings object holds every knob of the tool.  Every field
can be set through a ``BUGSHEET_*`` environment variable
(e.g. ``BUGSHEET_SHEET_ID=6386356843767684``) or a ``.env`` file in the
working directory.  List fields take JSON values
(``BUGSHEET_BLOCKER_TARGETS='["---", "4.6.0"]'``).

Fields
──────
bugzilla_url / bugzilla_key_file  : tracker endpoint and API-key file
test_bug_data                     : JSON fixture; selects the file source
teams_file                        : org file (JSON or YAML)
smartsheet_url / smartsheet_key_file / sheet_id : report destination
reconcile_interval_seconds        : fixed loop interval (300s)
blocker_targets / release         : target set for the blocker count
bug_*                             : the canonical open-bug query
log_level / log_format            : structlog configuration
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bugsheet.bugs.models import AdvancedQuery, BugQuery

DEFAULT_INCLUDE_FIELDS = [
    "id",
    "summary",
    "status",
    "severity",
    "target_release",
    "component",
    "sub_components",
    "keywords",
]


class BugsheetSettings(BaseSettings):
    """bugsheet configuration, read from ``BUGSHEET_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="BUGSHEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Tracker ──────────────────────────────────────────────────
    bugzilla_url: str = Field(default="https://bugzilla.redhat.com")
    bugzilla_key_file: Path = Field(default=Path("bugzillaKey"))
    test_bug_data: Path | None = Field(
        default=None,
        description="Path to a JSON file of bugs; replaces the Bugzilla client when set",
    )
    http_timeout_seconds: float = Field(default=60.0, gt=0)

    # ── Canonical query ──────────────────────────────────────────
    bug_classification: list[str] = Field(default=["Red Hat"])
    bug_product: list[str] = Field(default=["OpenShift Container Platform"])
    bug_status: list[str] = Field(default=["NEW", "ASSIGNED", "POST", "ON_DEV", "MODIFIED"])
    bug_include_fields: list[str] = Field(default_factory=lambda: list(DEFAULT_INCLUDE_FIELDS))
    bug_excluded_components: list[str] = Field(default=["Documentation"])

    # ── Teams ────────────────────────────────────────────────────
    teams_file: Path = Field(default=Path("teams.yaml"))

    # ── Report ───────────────────────────────────────────────────
    smartsheet_url: str = Field(default="https://api.smartsheet.com/2.0")
    smartsheet_key_file: Path = Field(default=Path("smartsheetKey"))
    sheet_id: str = Field(default="298546583889796")
    team_name_column: str = Field(default="Team Name")
    all_bug_column: str = Field(default="Bug Count (All)")
    current_bug_column: str = Field(default="Bug Count (Current Release)")
    blocker_targets: list[str] = Field(default=["---", "4.5.0"])
    release: str | None = Field(
        default=None,
        description="Release name from the org file; its targets replace blocker_targets",
    )

    # ── Reconciliation ───────────────────────────────────────────
    reconcile_interval_seconds: float = Field(default=300.0, gt=0)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="auto")

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("auto", "json", "console"):
            raise ValueError("log_format must be one of: auto, json, console")
        return value

    @property
    def json_logs(self) -> bool | None:
        if self.log_format == "auto":
            return None
        return self.log_format == "json"

    def bug_query(self) -> BugQuery:
        """Build the open-bug query sent to the tracker."""
        return BugQuery(
            classification=tuple(self.bug_classification),
            product=tuple(self.bug_product),
            status=tuple(self.bug_status),
            include_fields=tuple(self.bug_include_fields),
            advanced=tuple(
                AdvancedQuery(field="component", op="equals", value=component, negate=True)
                for component in self.bug_excluded_components
            ),
        )


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, BugsheetSettings] = {}


def get_settings(*, _force_reload: bool = False) -> BugsheetSettings:
    """Load, validate, and cache a :class:`BugsheetSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]
    settings = BugsheetSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()


__all__ = [
    "BugsheetSettings",
    "DEFAULT_INCLUDE_FIELDS",
    "get_settings",
    "clear_settings_cache",
]
