"""
bugsheet core primitives: errors, logging, settings and credentials.

Settings are imported from :mod:`bugsheet.core.settings` directly; they
depend on the bug query model and are kept out of this namespace.
"""

from bugsheet.core.errors import (
    BugsheetError,
    ClassificationInvariantViolation,
    ConfigError,
    ErrorCategory,
    ErrorContext,
    FetchError,
    InvalidConfigError,
    MissingConfigError,
    PublishError,
    ReconcileError,
)
from bugsheet.core.logging import LogContext, configure_logging, get_logger
from bugsheet.core.secrets import SecretValue, read_api_key

__all__ = [
    "BugsheetError",
    "ClassificationInvariantViolation",
    "ConfigError",
    "ErrorCategory",
    "ErrorContext",
    "FetchError",
    "InvalidConfigError",
    "MissingConfigError",
    "PublishError",
    "ReconcileError",
    "LogContext",
    "configure_logging",
    "get_logger",
    "SecretValue",
    "read_api_key",
]
