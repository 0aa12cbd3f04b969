# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Read-only reporting APIs: events, stats and tags."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..callbacks import supports_callback
from ..errors import MailgunValidationError
from ..models import PageQuery, TagUpdate, build
from .base import ResourceAPI, merge_params, quote_id

if TYPE_CHECKING:
    from ..client import Mailgun


class EventsAPI(ResourceAPI):
    """Event log of the domain. Access via ``client.events()``."""

    def __init__(self, client: Mailgun):
        super().__init__(client, f"/{quote_id(client.domain, 'domain')}/events")

    @supports_callback
    async def list(self, data: Mapping[str, Any] | None = None, **filters: Any) -> Any:
        """Query events.

        Filters are passed through unchanged, e.g. ``event="failed"``,
        ``begin=...``, ``ascending="yes"``, ``limit=50``, ``recipient=...``.
        """
        return await self._request("GET", data=merge_params(data, **filters))


class StatsAPI(ResourceAPI):
    """Aggregate delivery statistics. Access via ``client.stats()``."""

    def __init__(self, client: Mailgun):
        super().__init__(client, f"/{quote_id(client.domain, 'domain')}/stats/total")

    @supports_callback
    async def list(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        event: str | list[str] | None = None,
        **params: Any,
    ) -> Any:
        """Return totals for one or more event types (``event`` is required)."""
        query = merge_params(data, event=event, **params)
        if not query.get("event"):
            raise MailgunValidationError("stats requires at least one event type")
        return await self._request("GET", data=query)


class TagsAPI(ResourceAPI):
    """Tags used on the domain. Access via ``client.tags()``."""

    def __init__(self, client: Mailgun):
        super().__init__(client, f"/{quote_id(client.domain, 'domain')}/tags")

    @supports_callback
    async def list(self, data: Mapping[str, Any] | None = None, *, limit: int | None = None) -> Any:
        query = build(PageQuery, data, limit=limit)
        return await self._request("GET", data=query.to_fields())


class TagAPI(ResourceAPI):
    """One tag. Access via ``client.tags("newsletter")``."""

    def __init__(self, client: Mailgun, tag: str):
        super().__init__(client, f"/{quote_id(client.domain, 'domain')}/tags/{quote_id(tag, 'tag')}")
        self.tag = tag

    @supports_callback
    async def info(self) -> Any:
        return await self._request("GET")

    @supports_callback
    async def update(self, data: Mapping[str, Any] | None = None, *, description: str | None = None) -> Any:
        payload = build(TagUpdate, data, description=description)
        return await self._request("PUT", data=payload.to_fields())

    @supports_callback
    async def delete(self) -> Any:
        return await self._request("DELETE")

    @supports_callback
    async def stats(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        event: str | list[str] | None = None,
        **params: Any,
    ) -> Any:
        """Statistics for messages carrying this tag."""
        query = merge_params(data, event=event, **params)
        if not query.get("event"):
            raise MailgunValidationError("tag stats requires at least one event type")
        return await self._request("GET", "/stats", query)
