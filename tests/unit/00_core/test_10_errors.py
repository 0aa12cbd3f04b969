# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for the exception hierarchy."""

import pytest

from mailgun_client.errors import (
    ConfigurationError,
    MailgunError,
    MailgunValidationError,
    ProviderError,
    TransportError,
)


class TestHierarchy:
    """Every client error derives from MailgunError."""

    @pytest.mark.parametrize(
        "exc",
        [
            ConfigurationError("bad"),
            TransportError("down"),
            ProviderError(400, "bad request"),
            MailgunValidationError("invalid"),
        ],
    )
    def test_subclasses(self, exc):
        assert isinstance(exc, MailgunError)

    def test_validation_error_is_value_error(self):
        """Test local validation errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            raise MailgunValidationError("invalid")


class TestProviderError:
    """Tests for ProviderError."""

    def test_str_includes_status(self):
        exc = ProviderError(404, "Domain not found", {"message": "Domain not found"})
        assert str(exc) == "404: Domain not found"
        assert exc.status == 404
        assert exc.body == {"message": "Domain not found"}

    def test_is_client_error(self):
        assert ProviderError(401, "Forbidden").is_client_error is True
        assert ProviderError(500, "Internal").is_client_error is False


class TestTransportError:
    """Tests for TransportError."""

    def test_attributes(self):
        cause = OSError("connection refused")
        exc = TransportError("failed", cause=cause, attempts=3)
        assert exc.cause is cause
        assert exc.attempts == 3

    def test_defaults(self):
        exc = TransportError("failed")
        assert exc.cause is None
        assert exc.attempts == 1


class TestValidationError:
    """Tests for MailgunValidationError."""

    def test_errors_default_empty(self):
        assert MailgunValidationError("x").errors == []

    def test_errors_kept(self):
        errors = [{"loc": ("to",), "msg": "Field required", "type": "missing"}]
        assert MailgunValidationError("x", errors=errors).errors == errors
