"""Issue-tracker sources and configuration-driven selection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from bugsheet.core.secrets import read_api_key
from bugsheet.sources.bugzilla import BugzillaSource
from bugsheet.sources.file import FileBugSource
from bugsheet.sources.protocol import BugSource, StaticBugSource

if TYPE_CHECKING:
    from bugsheet.core.settings import BugsheetSettings


def create_source(settings: BugsheetSettings) -> BugSource:
    """Pick the bug source the settings ask for.

    ``test_bug_data`` selects the fixture file; otherwise the Bugzilla API
    key is read from ``bugzilla_key_file`` (``ConfigError`` when missing).
    """
    if settings.test_bug_data is not None:
        return FileBugSource(settings.test_bug_data)

    return BugzillaSource(
        read_api_key(settings.bugzilla_key_file),
        settings.bugzilla_url,
        timeout=settings.http_timeout_seconds,
    )


__all__ = [
    "BugSource",
    "BugzillaSource",
    "FileBugSource",
    "StaticBugSource",
    "create_source",
]
