"""File-based API key loading.

Both the tracker and the spreadsheet service authenticate with an API key
kept in a local file (one key per file, trailing newline allowed).  Keys are
wrapped in :class:`SecretValue` so they never end up in logs or reprs.

Example::

    key = read_api_key(settings.bugzilla_key_file)
    headers = {"X-BUGZILLA-API-KEY": key.get_secret()}
"""

from __future__ import annotations

from pathlib import Path

from bugsheet.core.errors import InvalidConfigError, MissingConfigError


class SecretValue:
    """Wrapper for secret values that prevents accidental logging.

    Example:
        >>> secret = SecretValue("my_password")
        >>> str(secret)
        '[REDACTED]'
        >>> secret.get_secret()
        'my_password'
    """

    __slots__ = ("_value",)

    def __init__(self, value: str):
        self._value = value

    def get_secret(self) -> str:
        """Get the actual secret value."""
        return self._value

    def __str__(self) -> str:
        return "[REDACTED]"

    def __repr__(self) -> str:
        return "SecretValue('[REDACTED]')"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SecretValue):
            return self._value == other._value
        return False

    def __hash__(self) -> int:
        return hash(self._value)

    def __bool__(self) -> bool:
        return bool(self._value)


def read_api_key(path: str | Path) -> SecretValue:
    """Read an API key from ``path``.

    Trailing ``\\r`` and ``\\n`` characters are stripped; nothing else is.

    Raises:
        MissingConfigError: the file does not exist or cannot be read.
        InvalidConfigError: the file is empty.
    """
    key_path = Path(path)
    try:
        content = key_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise MissingConfigError(str(key_path), f"API key file not found: {key_path}", cause=e) from e
    except OSError as e:
        raise MissingConfigError(str(key_path), f"API key file unreadable: {key_path}", cause=e) from e

    key = content.rstrip("\r\n")
    if not key:
        raise InvalidConfigError(str(key_path), "", f"API key file is empty: {key_path}")
    return SecretValue(key)


__all__ = ["SecretValue", "read_api_key"]
