"""Smartsheet REST 2.0 client.

Only the two calls the publisher needs: read a sheet, update rows in place.
Responses are validated into small pydantic models; failures surface as
:class:`~bugsheet.core.errors.PublishError`.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from bugsheet.core.errors import ErrorCategory, PublishError
from bugsheet.core.logging import get_logger
from bugsheet.core.secrets import SecretValue

logger = get_logger(__name__)

DEFAULT_URL = "https://api.smartsheet.com/2.0"


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Column(_ApiModel):
    id: int
    title: str = ""


class Cell(_ApiModel):
    column_id: int = Field(alias="columnId")
    value: Any = None


class Row(_ApiModel):
    id: int | None = None
    cells: list[Cell] = Field(default_factory=list)

    def cell(self, column_id: int) -> Cell | None:
        for cell in self.cells:
            if cell.column_id == column_id:
                return cell
        return None


class Sheet(_ApiModel):
    id: int | None = None
    name: str = ""
    columns: list[Column] = Field(default_factory=list)
    rows: list[Row] = Field(default_factory=list)

    def column_id(self, title: str) -> int | None:
        for column in self.columns:
            if column.title == title:
                return column.id
        return None


class SmartsheetClient:
    """Minimal Smartsheet API client authenticated with a bearer token."""

    name = "smartsheet"

    def __init__(
        self,
        token: SecretValue,
        url: str = DEFAULT_URL,
        *,
        timeout: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.url = url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.url,
            headers={"Authorization": f"Bearer {token.get_secret()}", "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def get_sheet(self, sheet_id: str) -> Sheet:
        payload = self._request("GET", f"/sheets/{sheet_id}", sheet_id)
        try:
            return Sheet.model_validate(payload)
        except ValidationError as e:
            raise PublishError(
                "Smartsheet returned an unexpected sheet", category=ErrorCategory.PARSE, cause=e
            ).with_context(sheet_id=sheet_id) from e

    def update_rows(self, sheet_id: str, rows: list[Row]) -> int:
        """Update ``rows`` in place; returns the number of rows sent."""
        if not rows:
            logger.info("smartsheet.nothing_to_update", sheet_id=sheet_id)
            return 0
        body = [row.model_dump(by_alias=True, exclude_none=True) for row in rows]
        self._request("PUT", f"/sheets/{sheet_id}/rows", sheet_id, json=body)
        logger.info("smartsheet.rows_updated", sheet_id=sheet_id, rows=len(rows))
        return len(rows)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> SmartsheetClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _request(self, method: str, path: str, sheet_id: str, **kwargs: Any) -> Any:
        url = f"{self.url}{path}"
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise PublishError(
                f"Smartsheet request failed: {e}", category=ErrorCategory.NETWORK, cause=e
            ).with_context(sheet_id=sheet_id, url=url) from e

        if response.is_error:
            category = ErrorCategory.AUTH if response.status_code in (401, 403) else None
            raise PublishError(
                f"Smartsheet {method} failed (HTTP {response.status_code})", category=category
            ).with_context(sheet_id=sheet_id, url=url, http_status=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise PublishError(
                "Smartsheet returned a non-JSON body", category=ErrorCategory.PARSE, cause=e
            ).with_context(sheet_id=sheet_id, url=url) from e


__all__ = ["Cell", "Column", "Row", "Sheet", "SmartsheetClient", "DEFAULT_URL"]
