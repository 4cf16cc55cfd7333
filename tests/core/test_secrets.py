"""Tests for API key loading."""

import pytest

from bugsheet.core.errors import InvalidConfigError, MissingConfigError
from bugsheet.core.secrets import SecretValue, read_api_key


class TestSecretValue:
    def test_redacted_representations(self):
        secret = SecretValue("hunter2")
        assert str(secret) == "[REDACTED]"
        assert "hunter2" not in repr(secret)
        assert secret.get_secret() == "hunter2"

    def test_equality(self):
        assert SecretValue("a") == SecretValue("a")
        assert SecretValue("a") != SecretValue("b")
        assert SecretValue("a") != "a"


class TestReadApiKey:
    def test_strips_trailing_newlines_only(self, tmp_path):
        path = tmp_path / "key"
        path.write_text("  abc123 \r\n\n")
        assert read_api_key(path).get_secret() == "  abc123 "

    def test_missing_file(self, tmp_path):
        with pytest.raises(MissingConfigError) as exc_info:
            read_api_key(tmp_path / "nope")
        assert isinstance(exc_info.value.cause, FileNotFoundError)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "key"
        path.write_text("\n")
        with pytest.raises(InvalidConfigError):
            read_api_key(path)
