# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Suppression lists: bounces, unsubscribes and complaints.

All three share one shape under ``/{domain}/{kind}``, so one pair of
classes serves them; the client picks the ``kind``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..callbacks import supports_callback
from ..models import PageQuery, SuppressionCreate, build
from .base import ResourceAPI, quote_id

if TYPE_CHECKING:
    from ..client import Mailgun

SUPPRESSION_KINDS = ("bounces", "unsubscribes", "complaints")


def _kind_path(client: Mailgun, kind: str) -> str:
    if kind not in SUPPRESSION_KINDS:
        raise ValueError(f"Unknown suppression list {kind!r}, expected one of {SUPPRESSION_KINDS}")
    return f"/{quote_id(client.domain, 'domain')}/{kind}"


class SuppressionsAPI(ResourceAPI):
    """Collection of suppressed addresses of one kind."""

    def __init__(self, client: Mailgun, kind: str):
        super().__init__(client, _kind_path(client, kind))
        self.kind = kind

    @supports_callback
    async def list(self, data: Mapping[str, Any] | None = None, *, limit: int | None = None) -> Any:
        query = build(PageQuery, data, limit=limit)
        return await self._request("GET", data=query.to_fields())

    @supports_callback
    async def create(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        address: str | None = None,
        code: int | None = None,
        error: str | None = None,
        tag: str | None = None,
    ) -> Any:
        """Add an address to the list."""
        payload = build(SuppressionCreate, data, address=address, code=code, error=error, tag=tag)
        return await self._request("POST", data=payload.to_fields())


class SuppressionAPI(ResourceAPI):
    """One suppressed address."""

    def __init__(self, client: Mailgun, kind: str, address: str):
        super().__init__(client, f"{_kind_path(client, kind)}/{quote_id(address, 'address')}")
        self.kind = kind
        self.address = address

    @supports_callback
    async def info(self) -> Any:
        return await self._request("GET")

    @supports_callback
    async def delete(self) -> Any:
        """Remove the address from the list so it receives mail again."""
        return await self._request("DELETE")
