"""
CLI: ``bugsheet publish`` and ``bugsheet watch``, which push counts to the sheet.
"""

from __future__ import annotations

import queue
from contextlib import ExitStack
from pathlib import Path

import typer

from bugsheet.bugs.store import SnapshotStore
from bugsheet.cli.utils import (
    blocker_targets,
    build_publisher,
    build_reconciler,
    cli_errors,
    console,
    load_directory,
    load_settings,
    print_json,
)
from bugsheet.report.publisher import ReportPublisher


def publish(
    teams_file: Path | None = typer.Option(None, "--teams-file", "-t", help="Org file (JSON or YAML)."),
    test_bug_data: Path | None = typer.Option(None, "--test-bug-data", help="Read bugs from a JSON file."),
    release: str | None = typer.Option(None, "--release", "-r", help="Release whose targets count as current."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Compute row updates without writing them."),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Reconcile once and update the report sheet."""
    with cli_errors(), ExitStack() as stack:
        settings = load_settings(teams_file=teams_file, test_bug_data=test_bug_data, release=release)
        directory = load_directory(settings)
        publisher = build_publisher(settings, blocker_targets(settings, directory), stack)
        store = build_reconciler(settings, directory, stack).bootstrap()
        snapshot = store.read()

        if dry_run:
            sheet = publisher.client.get_sheet(publisher.sheet_id)
            rows, unmatched = publisher.build_rows(sheet, snapshot.bug_map)
            payload = {
                "rows": [row.model_dump(by_alias=True) for row in rows],
                "unmatched": unmatched,
            }
            if json_out:
                print_json(payload)
            else:
                console.print(f"Would update {len(rows)} rows ({len(unmatched)} unmatched teams)")
            return

        result = publisher.publish(snapshot)
        if json_out:
            print_json({"updated": result.updated, "unmatched": result.unmatched, "generation": result.generation})
        else:
            console.print(f"[green]Updated {result.updated} rows[/green] ({len(result.unmatched)} unmatched teams)")


def publish_until_failure(
    store: SnapshotStore,
    publisher: ReportPublisher,
    errors: queue.Queue,
    poll_seconds: float,
) -> None:
    """Publish each new generation of ``store`` until a cycle reports an error.

    The newest generation is published before that error is raised, so a
    swap followed by a failure within one poll still reaches the sheet.
    """
    published: int | None = None

    def publish_latest() -> None:
        nonlocal published
        snapshot = store.read()
        if snapshot.generation != published:
            publisher.publish(snapshot)
            published = snapshot.generation

    while True:
        publish_latest()
        try:
            error = errors.get(timeout=poll_seconds)
        except queue.Empty:
            continue
        publish_latest()
        raise error


def watch(
    teams_file: Path | None = typer.Option(None, "--teams-file", "-t", help="Org file (JSON or YAML)."),
    test_bug_data: Path | None = typer.Option(None, "--test-bug-data", help="Read bugs from a JSON file."),
    release: str | None = typer.Option(None, "--release", "-r", help="Release whose targets count as current."),
    poll_seconds: float = typer.Option(5.0, "--poll", min=0.1, help="How often to check for a new snapshot."),
) -> None:
    """Reconcile on the configured interval and publish every new snapshot.

    Exits non-zero on the first failed cycle.
    """
    with cli_errors(), ExitStack() as stack:
        settings = load_settings(teams_file=teams_file, test_bug_data=test_bug_data, release=release)
        directory = load_directory(settings)
        publisher = build_publisher(settings, blocker_targets(settings, directory), stack)
        reconciler = build_reconciler(settings, directory, stack)
        store = reconciler.bootstrap()
        reconciler.start()
        # stopped before the clients it uses are closed
        stack.callback(reconciler.stop)
        console.print(f"Reconciling every {reconciler.interval:g}s; Ctrl-C to stop")

        try:
            publish_until_failure(store, publisher, reconciler.errors, poll_seconds)
        except KeyboardInterrupt:
            console.print("Stopping")
