"""JSON fixture source.

Reads bugs from a file instead of Bugzilla.  The file is either a list of
bug objects or a Bugzilla response body (``{"bugs": [...]}``).  The file is
re-read on every search, so editing it while the loop runs changes the next
snapshot.
"""

from __future__ import annotations

import json
from pathlib import Path

from bugsheet.bugs.models import Bug, BugQuery, bugs_from_api
from bugsheet.core.errors import ErrorCategory, FetchError
from bugsheet.core.logging import get_logger

logger = get_logger(__name__)


class FileBugSource:
    name = "file"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def search(self, query: BugQuery) -> list[Bug]:
        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as e:
            raise self._error(f"Bug data file unreadable: {self.path}", e) from e
        except ValueError as e:
            raise self._error(f"Bug data file is not JSON: {self.path}", e, ErrorCategory.PARSE) from e

        entries = document.get("bugs", []) if isinstance(document, dict) else document
        if not isinstance(entries, list):
            raise self._error(f"Bug data file has no bug list: {self.path}", category=ErrorCategory.PARSE)

        try:
            bugs = bugs_from_api(entries)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise self._error(f"Bug data file has a malformed bug: {e}", e, ErrorCategory.PARSE) from e

        matched = [bug for bug in bugs if query.matches(bug)]
        logger.debug("file_source.searched", path=str(self.path), bugs=len(bugs), matched=len(matched))
        return matched

    def _error(
        self,
        message: str,
        cause: Exception | None = None,
        category: ErrorCategory | None = None,
    ) -> FetchError:
        error = FetchError(message, category=category, cause=cause)
        error.with_context(source_name=self.name, path=str(self.path))
        return error


__all__ = ["FileBugSource"]
