# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Asynchronous client for the Mailgun API.

This module provides the :class:`Mailgun` facade: resource accessors for
messages, domains, mailing lists, routes, suppressions and reporting,
generic verb methods for anything not covered, and webhook signature
validation.

Usage:
    >>> from mailgun_client import Mailgun
    >>> mg = Mailgun("key-3ax6xnjp29jd6fds4gc373sgvjxteol0", "mg.example.com")
    >>> await mg.messages().send({
    ...     "from": "Excited User <me@mg.example.com>",
    ...     "to": "bob@example.com",
    ...     "subject": "Hello",
    ...     "text": "Testing some Mailgun awesomeness!",
    ... })
    {'id': '<20240101...@mg.example.com>', 'message': 'Queued. Thank you.'}
    >>> await mg.lists("devs@mg.example.com").members().list(limit=10)
    {'items': [...], 'total_count': 3}

Accessors called without an identifier return a collection handle
(list/create); called with one they return an item handle
(info/update/delete)::

    mg.domains()                      # DomainsAPI
    mg.domains("mg.example.com")      # DomainAPI
    mg.domains("mg.example.com").credentials("alice")  # CredentialAPI

Every coroutine also accepts ``callback=fn``; ``fn(error, body)`` is
called once when the request completes.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any, overload

from .attachments import Attachment
from .callbacks import supports_callback
from .config_loader import MailgunConfig, load_config
from .errors import ConfigurationError, MailgunValidationError
from .logger import get_logger
from .resources import (
    DomainAPI,
    DomainsAPI,
    EventsAPI,
    ListAPI,
    ListsAPI,
    MessageAPI,
    MessagesAPI,
    RouteAPI,
    RoutesAPI,
    StatsAPI,
    SuppressionAPI,
    SuppressionsAPI,
    TagAPI,
    TagsAPI,
)
from .transport import HttpTransport
from .webhook import WebhookValidator

logger = get_logger("client")


class Mailgun:
    """Client bound to one API key and sending domain.

    The instance holds only immutable configuration, so concurrent calls
    on the same client do not interfere.

    Attributes:
        config: Connection settings.
        transport: HTTP layer used by every sub-API.
        Attachment: Shortcut to :class:`~mailgun_client.attachments.Attachment`.
    """

    Attachment = Attachment

    def __init__(
        self,
        api_key: str | None = None,
        domain: str | None = None,
        *,
        config: MailgunConfig | None = None,
        **options: Any,
    ):
        """Initialize the client.

        Args:
            api_key: Private API key.
            domain: Sending domain.
            config: Complete configuration; ``api_key``, ``domain`` and
                ``options`` override its fields when given.
            **options: Any other :class:`MailgunConfig` field (``timeout``,
                ``retry``, ``proxy``, ``host`` ...).

        Raises:
            ConfigurationError: If the API key or domain is missing, or an
                option is unknown or invalid.
        """
        overrides = {key: value for key, value in options.items() if value is not None}
        if api_key is not None:
            overrides["api_key"] = api_key
        if domain is not None:
            overrides["domain"] = domain
        try:
            if config is None:
                config = MailgunConfig(**overrides)
            elif overrides:
                config = dataclasses.replace(config, **overrides)
        except TypeError as exc:
            # missing required fields or unknown keyword
            raise ConfigurationError(str(exc)) from exc

        self.config = config
        self.transport = HttpTransport(config)
        self._webhook = WebhookValidator(
            config.api_key,
            max_age=config.webhook_max_age,
            mute=config.mute,
        )

    @classmethod
    def from_config(cls, config_path: str | None = None, **overrides: Any) -> Mailgun:
        """Build a client from a config file and ``MAILGUN_*`` environment variables."""
        return cls(config=load_config(config_path, **overrides))

    @property
    def domain(self) -> str:
        return self.config.domain

    # ------------------------------------------------------------------
    # Resource accessors
    # ------------------------------------------------------------------

    @overload
    def messages(self) -> MessagesAPI: ...

    @overload
    def messages(self, key: str) -> MessageAPI: ...

    def messages(self, key: str | None = None) -> MessagesAPI | MessageAPI:
        """Send messages, or access a stored message by storage key."""
        if key is None:
            return MessagesAPI(self)
        return MessageAPI(self, key)

    @overload
    def domains(self) -> DomainsAPI: ...

    @overload
    def domains(self, name: str) -> DomainAPI: ...

    def domains(self, name: str | None = None) -> DomainsAPI | DomainAPI:
        """List and create domains, or manage one domain by name."""
        if name is None:
            return DomainsAPI(self)
        return DomainAPI(self, name)

    @overload
    def lists(self) -> ListsAPI: ...

    @overload
    def lists(self, address: str) -> ListAPI: ...

    def lists(self, address: str | None = None) -> ListsAPI | ListAPI:
        """List and create mailing lists, or manage one list by address."""
        if address is None:
            return ListsAPI(self)
        return ListAPI(self, address)

    @overload
    def routes(self) -> RoutesAPI: ...

    @overload
    def routes(self, route_id: str) -> RouteAPI: ...

    def routes(self, route_id: str | None = None) -> RoutesAPI | RouteAPI:
        if route_id is None:
            return RoutesAPI(self)
        return RouteAPI(self, route_id)

    @overload
    def bounces(self) -> SuppressionsAPI: ...

    @overload
    def bounces(self, address: str) -> SuppressionAPI: ...

    def bounces(self, address: str | None = None) -> SuppressionsAPI | SuppressionAPI:
        return self._suppressions("bounces", address)

    @overload
    def unsubscribes(self) -> SuppressionsAPI: ...

    @overload
    def unsubscribes(self, address: str) -> SuppressionAPI: ...

    def unsubscribes(self, address: str | None = None) -> SuppressionsAPI | SuppressionAPI:
        return self._suppressions("unsubscribes", address)

    @overload
    def complaints(self) -> SuppressionsAPI: ...

    @overload
    def complaints(self, address: str) -> SuppressionAPI: ...

    def complaints(self, address: str | None = None) -> SuppressionsAPI | SuppressionAPI:
        return self._suppressions("complaints", address)

    def _suppressions(self, kind: str, address: str | None) -> SuppressionsAPI | SuppressionAPI:
        if address is None:
            return SuppressionsAPI(self, kind)
        return SuppressionAPI(self, kind, address)

    @overload
    def tags(self) -> TagsAPI: ...

    @overload
    def tags(self, tag: str) -> TagAPI: ...

    def tags(self, tag: str | None = None) -> TagsAPI | TagAPI:
        if tag is None:
            return TagsAPI(self)
        return TagAPI(self, tag)

    def events(self) -> EventsAPI:
        return EventsAPI(self)

    def stats(self) -> StatsAPI:
        return StatsAPI(self)

    # ------------------------------------------------------------------
    # Generic verbs
    # ------------------------------------------------------------------

    @supports_callback
    async def get(self, resource: str, data: Mapping[str, Any] | str | None = None) -> Any:
        """Send a GET request to ``resource`` (e.g. ``"/domains"``)."""
        return await self.transport.request("GET", resource, data)

    @supports_callback
    async def post(self, resource: str, data: Mapping[str, Any] | str | None = None) -> Any:
        """Send a POST request to ``resource``."""
        return await self.transport.request("POST", resource, data)

    @supports_callback
    async def put(self, resource: str, data: Mapping[str, Any] | str | None = None) -> Any:
        """Send a PUT request to ``resource``."""
        return await self.transport.request("PUT", resource, data)

    @supports_callback
    async def delete(self, resource: str, data: Mapping[str, Any] | str | None = None) -> Any:
        """Send a DELETE request to ``resource``."""
        return await self.transport.request("DELETE", resource, data)

    # ------------------------------------------------------------------
    # Address validation
    # ------------------------------------------------------------------

    def _public_key(self) -> str:
        if not self.config.public_api_key:
            raise ConfigurationError("public_api_key is required for address validation")
        return self.config.public_api_key

    @supports_callback
    async def validate_address(self, address: str) -> Any:
        """Check an email address with the validation API."""
        if not address:
            raise MailgunValidationError("address is required")
        return await self.transport.request(
            "GET", "/address/validate", {"address": address}, auth_key=self._public_key()
        )

    @supports_callback
    async def parse_addresses(self, addresses: str | list[str], syntax_only: bool = True) -> Any:
        """Split a list of addresses into parsed and unparseable ones."""
        if isinstance(addresses, (list, tuple)):
            addresses = ",".join(addresses)
        if not addresses:
            raise MailgunValidationError("addresses are required")
        return await self.transport.request(
            "GET",
            "/address/parse",
            {"addresses": addresses, "syntax_only": syntax_only},
            auth_key=self._public_key(),
        )

    # ------------------------------------------------------------------
    # Webhooks
    # ------------------------------------------------------------------

    def validate_webhook(self, timestamp: Any, token: Any, signature: Any) -> bool:
        """Return True if the webhook was signed with this account's API key.

        Stale timestamps (older or newer than ``webhook_max_age`` seconds),
        malformed values and mismatched signatures return False.
        """
        return self._webhook.validate(timestamp, token, signature)

    def sign_webhook(self, timestamp: int | str, token: str) -> str:
        """Compute the signature Mailgun attaches to a webhook."""
        return self._webhook.sign(timestamp, token)

    def __repr__(self) -> str:
        return f"<Mailgun domain='{self.domain}' base_url='{self.config.base_url}'>"
