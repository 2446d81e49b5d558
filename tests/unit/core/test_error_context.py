"""Unit tests for sensitive data sanitization."""

import pytest

from restcore.core.constants import REDACTED
from restcore.core.error_context import (
    MAX_DEPTH,
    is_sensitive_field,
    is_sensitive_header,
    sanitize_dict,
    sanitize_error_context,
    sanitize_headers,
    sanitize_value,
)
from restcore.core.exceptions import MethodNotAllowedError


@pytest.mark.unit
class TestSensitiveDetection:
    """Test field and header classification."""

    @pytest.mark.parametrize(
        "field",
        ["password", "user_password", "API_KEY", "api-key", "auth_token", "secret"],
    )
    def test_sensitive_fields(self, field: str) -> None:
        """Credential-like names are sensitive."""
        assert is_sensitive_field(field) is True

    @pytest.mark.parametrize("field", ["username", "email", "id", "controller"])
    def test_plain_fields(self, field: str) -> None:
        """Ordinary names are not sensitive."""
        assert is_sensitive_field(field) is False

    def test_configured_fields(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Names from ``log_config.sensitive_fields`` are honored."""
        monkeypatch.setenv("LOG_CONFIG__SENSITIVE_FIELDS", '["pin_code"]')

        assert is_sensitive_field("account_pin_code") is True

    @pytest.mark.parametrize(
        ("header", "expected"),
        [("Authorization", True), ("COOKIE", True), ("Content-Type", False)],
    )
    def test_headers(self, header: str, expected: bool) -> None:
        """Header checks ignore case."""
        assert is_sensitive_header(header) is expected


@pytest.mark.unit
class TestSanitization:
    """Test redaction of nested data."""

    def test_nested_structures(self) -> None:
        """Sensitive keys are redacted at any nesting level."""
        data = {
            "username": "alice",
            "profile": {"password": "hunter2", "tags": ["a", {"token": "t"}]},
            "pair": ("x", {"secret": "s"}),
        }

        assert sanitize_dict(data) == {
            "username": "alice",
            "profile": {"password": REDACTED, "tags": ["a", {"token": REDACTED}]},
            "pair": ("x", {"secret": REDACTED}),
        }

    def test_original_is_untouched(self) -> None:
        """Sanitizing returns a copy."""
        data = {"password": "hunter2"}

        sanitize_dict(data)

        assert data == {"password": "hunter2"}

    def test_too_deep_is_redacted(self) -> None:
        """Values nested beyond the depth limit are redacted wholesale."""
        assert sanitize_value("plain", depth=MAX_DEPTH + 1) == REDACTED

    def test_headers(self) -> None:
        """Credential headers are redacted, others kept."""
        headers = {"Authorization": "Basic abc", "Accept": "application/json"}

        assert sanitize_headers(headers) == {
            "Authorization": REDACTED,
            "Accept": "application/json",
        }

    def test_error_context(self) -> None:
        """Error context carries the type, message and public attributes."""
        error = MethodNotAllowedError("DELETE", ["GET"])

        context = sanitize_error_context(error, {"password": "x", "path": "user"})

        assert context["error_type"] == "MethodNotAllowedError"
        assert context["error_message"] == "[METHOD_NOT_ALLOWED] Method Not Allowed"
        assert context["password"] == REDACTED
        assert context["path"] == "user"
        assert context["error_attributes"]["method"] == "DELETE"
        assert "cause" not in context["error_attributes"]
