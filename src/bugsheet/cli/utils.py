"""
CLI utility helpers: settings, wiring and output formatting.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import AbstractContextManager, ExitStack, contextmanager
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bugsheet.bugs.bugmap import TeamCounts
from bugsheet.core.errors import BugsheetError
from bugsheet.core.logging import configure_logging
from bugsheet.core.secrets import read_api_key
from bugsheet.core.settings import BugsheetSettings, get_settings
from bugsheet.reconcile.loop import Reconciler
from bugsheet.report.publisher import ReportColumns, ReportPublisher
from bugsheet.report.smartsheet import SmartsheetClient
from bugsheet.sources import create_source
from bugsheet.teams.directory import TeamDirectory, load_team_directory

console = Console()
err_console = Console(stderr=True)


# ── Settings and wiring ──────────────────────────────────────────────────


def load_settings(
    *,
    teams_file: Path | None = None,
    test_bug_data: Path | None = None,
    release: str | None = None,
) -> BugsheetSettings:
    """Load settings, apply command-line overrides, and configure logging."""
    settings = get_settings()
    overrides: dict[str, Any] = {}
    if teams_file is not None:
        overrides["teams_file"] = teams_file
    if test_bug_data is not None:
        overrides["test_bug_data"] = test_bug_data
    if release is not None:
        overrides["release"] = release
    if overrides:
        settings = settings.model_copy(update=overrides)
    configure_logging(level=settings.log_level, json_format=settings.json_logs)
    return settings


def load_directory(settings: BugsheetSettings) -> TeamDirectory:
    return load_team_directory(settings.teams_file)


def build_reconciler(settings: BugsheetSettings, directory: TeamDirectory, stack: ExitStack) -> Reconciler:
    """Build the reconciler; a source holding a connection is closed with ``stack``."""
    source = create_source(settings)
    if isinstance(source, AbstractContextManager):
        stack.enter_context(source)
    return Reconciler(
        source,
        settings.bug_query(),
        directory,
        interval_seconds=settings.reconcile_interval_seconds,
    )


def blocker_targets(settings: BugsheetSettings, directory: TeamDirectory) -> list[str]:
    """Targets of the configured release, else ``blocker_targets``."""
    if settings.release:
        return directory.release_targets(settings.release)
    return list(settings.blocker_targets)


def build_publisher(settings: BugsheetSettings, targets: list[str], stack: ExitStack) -> ReportPublisher:
    """Build the publisher; its Smartsheet client is closed with ``stack``."""
    client = SmartsheetClient(
        read_api_key(settings.smartsheet_key_file),
        settings.smartsheet_url,
        timeout=settings.http_timeout_seconds,
    )
    stack.enter_context(client)
    columns = ReportColumns(
        team_name=settings.team_name_column,
        all_bugs=settings.all_bug_column,
        current_bugs=settings.current_bug_column,
    )
    return ReportPublisher(client, settings.sheet_id, targets, columns)


@contextmanager
def cli_errors() -> Iterator[None]:
    """Render bugsheet errors and exit with status 1."""
    try:
        yield
    except BugsheetError as e:
        err_console.print(f"[bold red]Error[/bold red] ({e.category.value}): {escape(e.message)}")
        raise typer.Exit(code=1) from e


# ── Output helpers ───────────────────────────────────────────────────────


def print_json(payload: Any) -> None:
    console.print_json(json.dumps(payload, default=str))


def counts_table(counts: list[TeamCounts], *, title: str = "") -> Table:
    table = Table(title=title or None)
    table.add_column("Team", style="bold")
    for header in ("All", "Blocker", "Target", "Low", "Not Low", "Sprint", "Not Sprint"):
        table.add_column(header, justify="right")
    for row in counts:
        table.add_row(
            row.team,
            str(row.all),
            str(row.blocker),
            str(row.target_release),
            str(row.low_severity),
            str(row.not_low_severity),
            str(row.upcoming_sprint),
            str(row.not_upcoming_sprint),
        )
    return table
