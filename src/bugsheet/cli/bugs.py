"""
CLI: ``bugsheet counts`` and ``bugsheet teams``, which inspect without publishing.
"""

from __future__ import annotations

from contextlib import ExitStack
from pathlib import Path

import typer
from rich.table import Table

from bugsheet.cli.utils import (
    blocker_targets,
    build_reconciler,
    cli_errors,
    console,
    counts_table,
    load_directory,
    load_settings,
    print_json,
)


def counts(
    teams_file: Path | None = typer.Option(None, "--teams-file", "-t", help="Org file (JSON or YAML)."),
    test_bug_data: Path | None = typer.Option(None, "--test-bug-data", help="Read bugs from a JSON file."),
    release: str | None = typer.Option(None, "--release", "-r", help="Release whose targets count as current."),
    team: list[str] | None = typer.Option(None, "--team", help="Only show these teams."),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Reconcile once and print per-team counts."""
    with cli_errors(), ExitStack() as stack:
        settings = load_settings(teams_file=teams_file, test_bug_data=test_bug_data, release=release)
        directory = load_directory(settings)
        targets = blocker_targets(settings, directory)
        snapshot = build_reconciler(settings, directory, stack).bootstrap().read()

        rows = snapshot.bug_map.summaries(targets)
        if team:
            rows = [row for row in rows if row.team in team]

        if json_out:
            print_json({"targets": targets, "bugs": len(snapshot), "teams": [row.to_dict() for row in rows]})
            return
        console.print(counts_table(rows, title=f"{len(snapshot)} bugs, targets: {', '.join(targets)}"))


def teams(
    teams_file: Path | None = typer.Option(None, "--teams-file", "-t", help="Org file (JSON or YAML)."),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List teams and the components they own."""
    with cli_errors():
        settings = load_settings(teams_file=teams_file)
        directory = load_directory(settings)
        infos = [directory.get_team(name) for name in directory.team_names()]

        if json_out:
            print_json([info.model_dump() for info in infos if info is not None])
            return

        table = Table(title=directory.org.org_title or None)
        table.add_column("Team", style="bold")
        table.add_column("Lead")
        table.add_column("Group")
        table.add_column("Components")
        for info in infos:
            if info is None:
                continue
            table.add_row(info.name, info.lead, info.group, ", ".join(info.components))
        console.print(table)
