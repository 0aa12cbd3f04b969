# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Routes API: inbound message filtering and forwarding rules."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..callbacks import supports_callback
from ..models import PageQuery, RouteCreate, RouteUpdate, build
from .base import ResourceAPI, quote_id

if TYPE_CHECKING:
    from ..client import Mailgun


class RoutesAPI(ResourceAPI):
    """Sub-API for account routes. Access via ``client.routes()``."""

    def __init__(self, client: Mailgun):
        super().__init__(client, "/routes")

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
        expression: str | None = None,
        action: str | list[str] | None = None,
        priority: int | None = None,
        description: str | None = None,
    ) -> Any:
        """Create a route; ``action`` may hold several actions."""
        payload = build(
            RouteCreate, data,
            expression=expression, action=action, priority=priority, description=description,
        )
        return await self._request("POST", data=payload.to_fields())


class RouteAPI(ResourceAPI):
    """One route, identified by id. Access via ``client.routes(route_id)``."""

    def __init__(self, client: Mailgun, route_id: str):
        super().__init__(client, f"/routes/{quote_id(route_id, 'route id')}")
        self.route_id = route_id

    @supports_callback
    async def info(self) -> Any:
        return await self._request("GET")

    @supports_callback
    async def update(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        expression: str | None = None,
        action: str | list[str] | None = None,
        priority: int | None = None,
        description: str | None = None,
    ) -> Any:
        payload = build(
            RouteUpdate, data,
            expression=expression, action=action, priority=priority, description=description,
        )
        return await self._request("PUT", data=payload.to_fields())

    @supports_callback
    async def delete(self) -> Any:
        return await self._request("DELETE")
