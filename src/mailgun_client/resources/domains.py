# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Domains and SMTP credentials APIs."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, overload

from ..callbacks import supports_callback
from ..models import CredentialCreate, CredentialUpdate, DomainCreate, PageQuery, build
from .base import ResourceAPI, quote_id

if TYPE_CHECKING:
    from ..client import Mailgun


class DomainsAPI(ResourceAPI):
    """Sub-API for the domains of the account.

    Access via ``client.domains()``.
    """

    def __init__(self, client: Mailgun):
        super().__init__(client, "/domains")

    @supports_callback
    async def list(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        limit: int | None = None,
        skip: int | None = None,
    ) -> Any:
        """List domains, paginated with ``limit``/``skip``."""
        query = build(PageQuery, data, limit=limit, skip=skip)
        return await self._request("GET", data=query.to_fields())

    @supports_callback
    async def create(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        name: str | None = None,
        smtp_password: str | None = None,
        wildcard: bool | None = None,
        spam_action: str | None = None,
    ) -> Any:
        """Create a new domain."""
        payload = build(
            DomainCreate, data,
            name=name, smtp_password=smtp_password, wildcard=wildcard, spam_action=spam_action,
        )
        return await self._request("POST", data=payload.to_fields())


class DomainAPI(ResourceAPI):
    """Sub-API for one domain.

    Access via ``client.domains("example.com")``.
    """

    def __init__(self, client: Mailgun, name: str):
        super().__init__(client, f"/domains/{quote_id(name, 'domain name')}")
        self.name = name

    @supports_callback
    async def info(self) -> Any:
        """Return the domain, including credentials and DNS records."""
        return await self._request("GET")

    @supports_callback
    async def delete(self) -> Any:
        """Delete the domain from the account."""
        return await self._request("DELETE")

    @supports_callback
    async def verify(self) -> Any:
        """Ask Mailgun to re-check the domain's DNS records."""
        return await self._request("PUT", "/verify")

    @overload
    def credentials(self) -> CredentialsAPI: ...

    @overload
    def credentials(self, login: str) -> CredentialAPI: ...

    def credentials(self, login: str | None = None) -> CredentialsAPI | CredentialAPI:
        """SMTP credentials of this domain: all of them, or one by login."""
        if login is None:
            return CredentialsAPI(self._client, self._path)
        return CredentialAPI(self._client, self._path, login)


class CredentialsAPI(ResourceAPI):
    """SMTP credentials collection for a domain."""

    def __init__(self, client: Mailgun, domain_path: str):
        super().__init__(client, f"{domain_path}/credentials")

    @supports_callback
    async def list(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        limit: int | None = None,
        skip: int | None = None,
    ) -> Any:
        query = build(PageQuery, data, limit=limit, skip=skip)
        return await self._request("GET", data=query.to_fields())

    @supports_callback
    async def create(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        login: str | None = None,
        password: str | None = None,
    ) -> Any:
        """Create a new set of SMTP credentials."""
        payload = build(CredentialCreate, data, login=login, password=password)
        return await self._request("POST", data=payload.to_fields())


class CredentialAPI(ResourceAPI):
    """One SMTP credential, identified by login."""

    def __init__(self, client: Mailgun, domain_path: str, login: str):
        super().__init__(client, f"{domain_path}/credentials/{quote_id(login, 'login')}")
        self.login = login

    @supports_callback
    async def update(self, data: Mapping[str, Any] | None = None, *, password: str | None = None) -> Any:
        """Change the password; it is the only mutable attribute."""
        payload = build(CredentialUpdate, data, password=password)
        return await self._request("PUT", data=payload.to_fields())

    @supports_callback
    async def delete(self) -> Any:
        return await self._request("DELETE")
