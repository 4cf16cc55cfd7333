"""Bugzilla REST source.

Runs ``GET {endpoint}/rest/bug`` with the rendered :class:`BugQuery` and the
API key in the ``X-BUGZILLA-API-KEY`` header.  Every failure surfaces as a
:class:`~bugsheet.core.errors.FetchError` carrying the URL and, when there
is one, the HTTP status:

    transport failure         → FetchError (NETWORK)
    401 / 403                 → FetchError (AUTH)
    other non-2xx             → FetchError (SOURCE)
    Bugzilla ``error: true``  → FetchError (SOURCE)
    malformed body            → FetchError (PARSE)
"""

from __future__ import annotations

from typing import Any

import httpx

from bugsheet.bugs.models import Bug, BugQuery, bugs_from_api
from bugsheet.core.errors import ErrorCategory, FetchError
from bugsheet.core.logging import get_logger
from bugsheet.core.secrets import SecretValue

logger = get_logger(__name__)

API_KEY_HEADER = "X-BUGZILLA-API-KEY"
DEFAULT_ENDPOINT = "https://bugzilla.redhat.com"


class BugzillaSource:
    """Search a Bugzilla instance.

    Example:
        >>> source = BugzillaSource(read_api_key("bugzillaKey"))
        >>> bugs = source.search(settings.bug_query())
    """

    name = "bugzilla"

    def __init__(
        self,
        api_key: SecretValue,
        endpoint: str = DEFAULT_ENDPOINT,
        *,
        timeout: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self._client = httpx.Client(
            base_url=self.endpoint,
            headers={API_KEY_HEADER: api_key.get_secret(), "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @property
    def search_url(self) -> str:
        return f"{self.endpoint}/rest/bug"

    def search(self, query: BugQuery) -> list[Bug]:
        params = query.to_params()
        try:
            response = self._client.get("/rest/bug", params=params)
        except httpx.HTTPError as e:
            raise self._error(f"Bugzilla request failed: {e}", e, category=ErrorCategory.NETWORK) from e

        if response.status_code in (401, 403):
            raise self._error(
                f"Bugzilla rejected credentials (HTTP {response.status_code})",
                category=ErrorCategory.AUTH,
                http_status=response.status_code,
            )
        if response.is_error:
            raise self._error(
                f"Bugzilla search failed (HTTP {response.status_code}): {_api_message(response)}",
                http_status=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise self._error("Bugzilla returned a non-JSON body", e, category=ErrorCategory.PARSE) from e
        if not isinstance(payload, dict):
            raise self._error("Bugzilla returned an unexpected body", category=ErrorCategory.PARSE)
        if payload.get("error"):
            raise self._error(f"Bugzilla search failed: {payload.get('message', 'unknown error')}")

        try:
            bugs = bugs_from_api(payload.get("bugs") or [])
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise self._error(f"Bugzilla returned a malformed bug: {e}", e, category=ErrorCategory.PARSE) from e

        logger.debug("bugzilla.searched", url=self.search_url, bugs=len(bugs))
        return bugs

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> BugzillaSource:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _error(
        self,
        message: str,
        cause: Exception | None = None,
        *,
        category: ErrorCategory | None = None,
        http_status: int | None = None,
    ) -> FetchError:
        error = FetchError(message, category=category, cause=cause)
        error.with_context(source_name=self.name, url=self.search_url, http_status=http_status)
        return error


def _api_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.reason_phrase
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.reason_phrase


__all__ = ["BugzillaSource", "API_KEY_HEADER", "DEFAULT_ENDPOINT"]
