"""Report publishing: Smartsheet client and row matching."""

from bugsheet.report.publisher import PublishResult, ReportColumns, ReportPublisher
from bugsheet.report.smartsheet import Cell, Column, Row, Sheet, SmartsheetClient

__all__ = [
    "PublishResult",
    "ReportColumns",
    "ReportPublisher",
    "Cell",
    "Column",
    "Row",
    "Sheet",
    "SmartsheetClient",
]
