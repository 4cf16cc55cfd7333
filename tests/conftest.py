"""
Shared pytest fixtures for bugsheet tests.

This module provides:
- Settings cache and logging context cleanup for test isolation
- A small org (three teams, one release) and its TeamDirectory
- A mixed batch of bugs covering every counting rule
- Org/bug fixture files written to tmp_path for loader and CLI tests
"""

import json
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog
import yaml

from bugsheet.bugs.models import Bug
from bugsheet.core.logging import clear_context
from bugsheet.core.settings import clear_settings_cache
from bugsheet.teams import OrgData, ReleaseInfo, TeamDirectory, TeamInfo


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)
        if test_path.parts[0] == "cli":
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """
    Run every test from an empty directory with no BUGSHEET_* variables.

    Keeps a developer's .env file or exported settings out of the tests.
    """
    import os

    for key in list(os.environ):
        if key.startswith("BUGSHEET_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    clear_context()
    yield
    clear_settings_cache()
    clear_context()
    structlog.reset_defaults()


# =============================================================================
# Org Fixtures
# =============================================================================


@pytest.fixture
def org() -> OrgData:
    return OrgData(
        org_title="Test Engineering",
        teams=(
            TeamInfo(
                name="Networking",
                lead="alice",
                managers=("mgr1",),
                group="Platform",
                components=("Networking", "DNS"),
            ),
            TeamInfo(name="Storage", lead="bob", components=("Storage",)),
            TeamInfo(name="Docs Tooling", lead="carol", components=()),
        ),
        releases=(ReleaseInfo(name="4.5", targets=("---", "4.5.0")),),
    )


@pytest.fixture
def directory(org: OrgData) -> TeamDirectory:
    return TeamDirectory(org)


# =============================================================================
# Bug Fixtures
# =============================================================================


@pytest.fixture
def bugs() -> list[Bug]:
    """
    Six bugs:

    - 1: Networking, high, 4.5.0, UpcomingSprint
    - 2: Networking, low, 4.5.0
    - 3: DNS (→ Networking), medium, 4.6.0
    - 4: Storage, urgent, ---, UpcomingSprint
    - 5: Installer (→ unknown), high, 4.5.0
    - 6: no component (→ unknown), low, no target release
    """
    return [
        Bug(1, "route flap", "NEW", "high", ("4.5.0",), ("Networking",), frozenset({"UpcomingSprint"})),
        Bug(2, "typo in log", "ASSIGNED", "low", ("4.5.0",), ("Networking",)),
        Bug(3, "dns timeout", "POST", "medium", ("4.6.0",), ("DNS",)),
        Bug(4, "pv leak", "NEW", "urgent", ("---",), ("Storage",), frozenset({"UpcomingSprint", "Regression"})),
        Bug(5, "install hangs", "MODIFIED", "high", ("4.5.0",), ("Installer",)),
        Bug(6, "orphan", "NEW", "low", (), ()),
    ]


@pytest.fixture
def org_file(tmp_path: Path) -> Path:
    """Org file with CamelCase top-level keys."""
    path = tmp_path / "teams.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "OrgTitle": "Test Engineering",
                "Teams": [
                    {"name": "Networking", "lead": "alice", "components": ["Networking", "DNS"]},
                    {"name": "Storage", "lead": "bob", "components": ["Storage"]},
                ],
                "Releases": [{"name": "4.5", "targets": ["---", "4.5.0"]}],
            }
        )
    )
    return path


@pytest.fixture
def bug_data_file(tmp_path: Path, bugs: list[Bug]) -> Path:
    """Bugzilla-style response body holding the ``bugs`` fixture."""
    path = tmp_path / "bugs.json"
    path.write_text(json.dumps({"bugs": [bug.to_dict() for bug in bugs]}))
    return path
