# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""HTTP transport for Mailgun API calls.

Each call opens its own ``aiohttp.ClientSession``, issues one request
(repeated only under the configured :class:`RetryStrategy`) and returns the
decoded body. Query parameters are used for GET/DELETE, form fields for
POST/PUT, and multipart bodies whenever files are attached.

Example:
    ::

        transport = HttpTransport(MailgunConfig(api_key="key-x", domain="example.com"))
        body = await transport.request("GET", "/domains", {"limit": 10})
"""

from __future__ import annotations

import asyncio
import base64
import json
from collections.abc import Mapping
from typing import Any

import aiohttp

from .attachments import Attachment
from .config_loader import MailgunConfig
from .errors import MailgunValidationError, ProviderError, TransportError
from .logger import get_logger
from .models import encode_fields
from .retry import RetryStrategy

API_USER = "api"
QUERY_METHODS = frozenset({"GET", "DELETE"})
BODY_METHODS = frozenset({"POST", "PUT"})

logger = get_logger("transport")


def _basic_auth_header(api_key: str) -> dict[str, str]:
    credentials = base64.b64encode(f"{API_USER}:{api_key}".encode()).decode()
    return {"Authorization": f"Basic {credentials}"}


def _decode_body(content_type: str, text: str) -> Any:
    """Parse JSON bodies, returning anything else as text."""
    stripped = text.strip()
    if "json" in content_type or stripped[:1] in ("{", "["):
        try:
            return json.loads(stripped)
        except ValueError:
            return text
    return text


class HttpTransport:
    """Executes authenticated requests against the configured API root.

    Attributes:
        config: Connection settings (host, auth, proxy, timeout, retry).
        retry_strategy: Policy deciding which failures are repeated.
    """

    def __init__(self, config: MailgunConfig, retry_strategy: RetryStrategy | None = None):
        self.config = config
        self.retry_strategy = retry_strategy or RetryStrategy(
            max_attempts=config.retry,
            delays=config.retry_delays,
        )

    def build_url(self, resource: str) -> str:
        """Join a resource path onto the API root."""
        if not resource:
            raise MailgunValidationError("Resource path must not be empty")
        if not resource.startswith("/"):
            resource = "/" + resource
        return f"{self.config.base_url}{resource}"

    async def request(
        self,
        method: str,
        resource: str,
        data: Mapping[str, Any] | list[tuple[str, str]] | str | None = None,
        *,
        files: list[tuple[str, Attachment]] | None = None,
        headers: dict[str, str] | None = None,
        auth_key: str | None = None,
    ) -> Any:
        """Send one API request.

        Args:
            method: HTTP verb.
            resource: Path below the API root, e.g. ``/domains``.
            data: Payload; mappings and pair lists are form/query encoded,
                strings are sent verbatim as a pre-encoded body or query.
            files: ``(field, Attachment)`` pairs, forcing a multipart body.
            headers: Extra request headers.
            auth_key: Key to authenticate with instead of the private API key.

        Returns:
            Parsed JSON body, or text for non-JSON responses.

        Raises:
            ProviderError: Mailgun answered with a non-2xx status.
            TransportError: The request could not be completed.
            MailgunValidationError: The payload cannot be encoded.
        """
        method = method.upper()
        if method not in QUERY_METHODS | BODY_METHODS:
            raise MailgunValidationError(f"Unsupported HTTP method: {method}")
        url = self.build_url(resource)
        request_headers = dict(headers or {})

        if isinstance(data, str):
            fields: list[tuple[str, str]] | str = data
        else:
            fields = encode_fields(data)

        if files and method not in BODY_METHODS:
            raise MailgunValidationError(f"Files cannot be sent with {method}")
        if files and isinstance(fields, str):
            raise MailgunValidationError("Files cannot be combined with a pre-encoded string body")

        parts: list[tuple[str, str, bytes, str]] = []
        for field_name, attachment in files or []:
            filename, content, content_type = await attachment.read()
            parts.append((field_name, filename, content, content_type))

        if self.config.test_mode:
            preview: dict[str, Any] = {"method": method, "url": url}
            preview["params" if method in QUERY_METHODS else "data"] = fields
            if parts:
                preview["files"] = [(name, filename) for name, filename, _, _ in parts]
            logger.info(f"Test mode, not sending {method} {url}")
            return preview

        if method in BODY_METHODS and isinstance(fields, str):
            request_headers.setdefault("Content-Type", "application/x-www-form-urlencoded")

        attempt = 0
        while True:
            attempt += 1
            try:
                return await self._send(
                    method, url, fields, parts, request_headers, auth_key or self.config.api_key
                )
            except (aiohttp.ClientError, asyncio.TimeoutError, OSError, ProviderError) as exc:
                if not self.retry_strategy.should_retry(attempt, exc):
                    if isinstance(exc, ProviderError):
                        raise
                    raise TransportError(
                        f"{method} {url} failed: {exc!r}", cause=exc, attempts=attempt
                    ) from exc
                delay = self.retry_strategy.calculate_delay(attempt - 1)
                logger.warning(
                    "Temporary error on %s %s (attempt %d/%d): %s - retrying in %.1fs",
                    method,
                    url,
                    attempt,
                    self.retry_strategy.max_attempts,
                    exc,
                    delay,
                )
                await asyncio.sleep(delay)

    async def _send(
        self,
        method: str,
        url: str,
        fields: list[tuple[str, str]] | str,
        parts: list[tuple[str, str, bytes, str]],
        headers: dict[str, str],
        api_key: str,
    ) -> Any:
        session_kwargs: dict[str, Any] = {"headers": _basic_auth_header(api_key)}
        if self.config.timeout_seconds is not None:
            session_kwargs["timeout"] = aiohttp.ClientTimeout(total=self.config.timeout_seconds)

        request_kwargs: dict[str, Any] = {"headers": headers or None}
        if self.config.proxy:
            request_kwargs["proxy"] = self.config.proxy
        if method in QUERY_METHODS:
            if fields:
                request_kwargs["params"] = fields
        elif parts:
            request_kwargs["data"] = self._multipart(fields, parts)
        elif fields:
            request_kwargs["data"] = fields

        logger.debug(f"{method} {url}")
        async with aiohttp.ClientSession(**session_kwargs) as session:
            async with session.request(method, url, **request_kwargs) as response:
                # undecodable bytes must not escape as UnicodeDecodeError
                text = await response.text(errors="replace")
                content_type = response.headers.get("Content-Type", "")
                return self._handle_response(response.status, content_type, text, url)

    @staticmethod
    def _multipart(
        fields: list[tuple[str, str]] | str,
        parts: list[tuple[str, str, bytes, str]],
    ) -> aiohttp.FormData:
        # Rebuilt per attempt; a sent FormData cannot be reused
        form = aiohttp.FormData()
        for name, value in fields:
            form.add_field(name, value)
        for field_name, filename, content, content_type in parts:
            form.add_field(field_name, content, filename=filename, content_type=content_type)
        return form

    @staticmethod
    def _handle_response(status: int, content_type: str, text: str, url: str) -> Any:
        body = _decode_body(content_type, text)
        if 200 <= status < 300:
            return body

        if isinstance(body, dict) and body.get("message"):
            message = str(body["message"])
        else:
            message = text.strip() or "Request failed"
        logger.debug(f"Mailgun returned {status} for {url}: {message}")
        raise ProviderError(status, message, body)

    def __repr__(self) -> str:
        return f"<HttpTransport {self.config.base_url}>"
