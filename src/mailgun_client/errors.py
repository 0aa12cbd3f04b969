# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Exception hierarchy for the Mailgun client.

Every failure an API call can produce derives from :class:`MailgunError`,
so callers can catch one type and still tell the categories apart:

- :class:`ConfigurationError`: invalid client configuration, raised at
  construction time.
- :class:`TransportError`: the request never produced an HTTP response
  (connection refused, DNS failure, timeout).
- :class:`ProviderError`: Mailgun answered with a non-2xx status.
- :class:`MailgunValidationError`: a payload was rejected locally before
  anything was sent.
"""

from __future__ import annotations

from typing import Any


class MailgunError(Exception):
    """Base class for all Mailgun client errors."""


class ConfigurationError(MailgunError):
    """Raised when the client configuration is missing or invalid."""


class TransportError(MailgunError):
    """Raised when a request fails before a response is received.

    Attributes:
        cause: The underlying network or timeout exception.
        attempts: Number of attempts performed before giving up.
    """

    def __init__(self, message: str, cause: BaseException | None = None, attempts: int = 1):
        super().__init__(message)
        self.cause = cause
        self.attempts = attempts


class ProviderError(MailgunError):
    """Raised when Mailgun returns a non-success HTTP status.

    Attributes:
        status: HTTP status code.
        message: Error message extracted from the response body.
        body: Parsed JSON body, or raw text when the body is not JSON.
    """

    def __init__(self, status: int, message: str, body: Any = None):
        super().__init__(f"{status}: {message}")
        self.status = status
        self.message = message
        self.body = body

    @property
    def is_client_error(self) -> bool:
        """True for 4xx responses (rejected requests)."""
        return 400 <= self.status < 500


class MailgunValidationError(MailgunError, ValueError):
    """Raised when a request payload fails local validation.

    Attributes:
        errors: Structured error list (pydantic format) when available.
    """

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []


__all__ = [
    "ConfigurationError",
    "MailgunError",
    "MailgunValidationError",
    "ProviderError",
    "TransportError",
]
