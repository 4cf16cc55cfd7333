"""
Root Typer application for the bugsheet CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from bugsheet.cli.bugs import counts, teams
from bugsheet.cli.report import publish, watch

app = Typer(
    name="bugsheet",
    help="Per-team bug counts from Bugzilla, published to Smartsheet.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("bugsheet")
        except PackageNotFoundError:
            from bugsheet import __version__ as v
        typer.echo(f"bugsheet {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Reconcile bugs by team and publish the counts."""


app.command("publish")(publish)
app.command("watch")(watch)
app.command("counts")(counts)
app.command("teams")(teams)


if __name__ == "__main__":
    app()
