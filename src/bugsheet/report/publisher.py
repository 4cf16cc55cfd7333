"""Publish per-team counts into the report sheet.

Rows are matched on the team-name column; each matched row gets its
"current release" cell set to the blocker count over the configured targets
and its "all" cell set to the total bug count.  Rows whose team is not in
the snapshot are logged and left alone.  Rows are only updated, never added
or deleted.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from bugsheet.bugs.bugmap import BugMap
from bugsheet.bugs.store import Snapshot
from bugsheet.core.errors import MissingConfigError
from bugsheet.core.logging import get_logger
from bugsheet.report.smartsheet import Cell, Row, Sheet, SmartsheetClient

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReportColumns:
    """Titles of the sheet columns the publisher reads and writes."""

    team_name: str = "Team Name"
    all_bugs: str = "Bug Count (All)"
    current_bugs: str = "Bug Count (Current Release)"


@dataclass
class PublishResult:
    updated: int = 0
    unmatched: list[str] = field(default_factory=list)
    generation: int | None = None


class ReportPublisher:
    """Writes blocker and total counts from a snapshot into a sheet."""

    def __init__(
        self,
        client: SmartsheetClient,
        sheet_id: str,
        targets: list[str],
        columns: ReportColumns | None = None,
    ) -> None:
        self.client = client
        self.sheet_id = sheet_id
        self.targets = list(targets)
        self.columns = columns or ReportColumns()

    def _column(self, sheet: Sheet, title: str) -> int:
        column_id = sheet.column_id(title)
        if column_id is None:
            raise MissingConfigError(
                f"column:{title}", f"Sheet {self.sheet_id} has no column titled {title!r}"
            )
        return column_id

    def build_rows(self, sheet: Sheet, bug_map: BugMap) -> tuple[list[Row], list[str]]:
        """Compute row updates for ``sheet``.

        Returns:
            (rows to update, team names found in the sheet but not in the map)

        Raises:
            MissingConfigError: one of the three columns is missing.
        """
        team_column = self._column(sheet, self.columns.team_name)
        all_column = self._column(sheet, self.columns.all_bugs)
        current_column = self._column(sheet, self.columns.current_bugs)

        rows: list[Row] = []
        unmatched: list[str] = []
        for row in sheet.rows:
            cell = row.cell(team_column)
            if cell is None or not isinstance(cell.value, str):
                continue
            team = cell.value
            if team not in bug_map:
                logger.warning("report.team_not_found", team=team, sheet_id=self.sheet_id)
                unmatched.append(team)
                continue
            rows.append(
                Row(
                    id=row.id,
                    cells=[
                        Cell(column_id=current_column, value=bug_map.count_blocker(team, self.targets)),
                        Cell(column_id=all_column, value=bug_map.count_all(team)),
                    ],
                )
            )
        return rows, unmatched

    def publish(self, snapshot: Snapshot) -> PublishResult:
        """Read the sheet, match rows, and push the updates."""
        sheet = self.client.get_sheet(self.sheet_id)
        rows, unmatched = self.build_rows(sheet, snapshot.bug_map)
        updated = self.client.update_rows(self.sheet_id, rows)
        logger.info(
            "report.published",
            sheet_id=self.sheet_id,
            generation=snapshot.generation,
            updated=updated,
            unmatched=len(unmatched),
        )
        return PublishResult(updated=updated, unmatched=unmatched, generation=snapshot.generation)


__all__ = ["ReportColumns", "ReportPublisher", "PublishResult"]
