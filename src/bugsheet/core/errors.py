"""
Structured error types for bugsheet.

Every failure the reconciliation core can surface is a ``BugsheetError``
carrying a category, structured context and an optional chained cause, so
that the supervisor, the CLI and the logs all see the same metadata.

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                       BugsheetError                              │
        │  (category, context, cause)                                      │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  FetchError          ConfigError          ReconcileError         │
        │  (SOURCE)            (CONFIG)             (RECONCILE)            │
        │                          │                                       │
        │                      MissingConfigError                          │
        │                      InvalidConfigError                          │
        │                                                                  │
        │  PublishError        ClassificationInvariantViolation            │
        │  (PUBLISH)           (CLASSIFICATION, logged, never raised)      │
        └─────────────────────────────────────────────────────────────────┘

Propagation:
    - ``FetchError`` is terminal for the reconciliation loop.
    - ``ConfigError`` fails startup before any reconciliation happens.
    - ``ClassificationInvariantViolation`` describes a bug without a usable
      component; the classifier logs it and routes the bug to ``"unknown"``.

Usage:
    from bugsheet.core.errors import FetchError

    try:
        response = client.get(url)
    except httpx.TransportError as e:
        raise FetchError("Bugzilla unreachable", cause=e).with_context(url=url)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    NETWORK = "NETWORK"
    SOURCE = "SOURCE"
    AUTH = "AUTH"
    PARSE = "PARSE"
    CONFIG = "CONFIG"
    CLASSIFICATION = "CLASSIFICATION"
    RECONCILE = "RECONCILE"
    PUBLISH = "PUBLISH"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured context attached to an error.

    Attributes:
        source_name: Name of the bug source (e.g. "bugzilla", "file")
        team: Team the failing operation was working on
        bug_id: Bug identifier, when a single bug is involved
        sheet_id: Spreadsheet identifier for publish errors
        url: URL that was being accessed
        http_status: HTTP status code if applicable
        metadata: Additional key-value pairs
    """

    source_name: str | None = None
    team: str | None = None
    bug_id: int | None = None
    sheet_id: str | None = None
    url: str | None = None
    http_status: int | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["source_name", "team", "bug_id", "sheet_id", "url", "http_status"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class BugsheetError(Exception):
    """
    Base exception for all bugsheet errors.

    Subclasses set ``default_category``; callers may override it per
    instance (a ``FetchError`` caused by a 401 is categorised as AUTH).

    Examples:
        >>> error = BugsheetError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>

        >>> error = FetchError("Search failed").with_context(source_name="bugzilla")
        >>> error.context.source_name
        'bugzilla'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> BugsheetError:
        """
        Add context to this error (fluent API).

        Usage:
            raise FetchError("Failed").with_context(
                source_name="bugzilla",
                url="https://bugzilla.redhat.com/rest/bug"
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# SOURCE ERRORS
# =============================================================================


class FetchError(BugsheetError):
    """
    The issue tracker could not be searched.

    Covers network, authentication and query failures. Terminal for the
    reconciliation loop: no snapshot is published for the failed cycle.
    """

    default_category = ErrorCategory.SOURCE


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(BugsheetError):
    """
    Configuration error.

    Raised at startup; the process does not begin reconciling.
    """

    default_category = ErrorCategory.CONFIG


class MissingConfigError(ConfigError):
    """Required configuration (file, credential, column) is missing."""

    def __init__(self, key: str, message: str | None = None, *, cause: Exception | None = None):
        self.key = key
        super().__init__(message or f"Missing required configuration: {key}", cause=cause)


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None, *, cause: Exception | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}", cause=cause)


# =============================================================================
# RECONCILIATION ERRORS
# =============================================================================


class ClassificationInvariantViolation(BugsheetError):
    """A bug has no usable component key.

    Built by the classifier for logging only; the bug is routed to the
    ``"unknown"`` team instead of being raised.
    """

    default_category = ErrorCategory.CLASSIFICATION

    def __init__(self, bug_id: int, message: str | None = None):
        super().__init__(message or f"Bug {bug_id} has no component")
        self.context.bug_id = bug_id


class ReconcileError(BugsheetError):
    """A reconciliation cycle failed for a reason other than fetching."""

    default_category = ErrorCategory.RECONCILE


class PublishError(BugsheetError):
    """The external report could not be read or updated."""

    default_category = ErrorCategory.PUBLISH


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "BugsheetError",
    "FetchError",
    "ConfigError",
    "MissingConfigError",
    "InvalidConfigError",
    "ClassificationInvariantViolation",
    "ReconcileError",
    "PublishError",
]
