# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Mailing lists and list members APIs."""

from __future__ import annotations

import builtins
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, overload

from ..callbacks import supports_callback
from ..models import (
    ListCreate,
    ListQuery,
    ListUpdate,
    MemberCreate,
    MemberQuery,
    MembersAdd,
    MemberUpdate,
    build,
)
from .base import ResourceAPI, quote_id

if TYPE_CHECKING:
    from ..client import Mailgun


class ListsAPI(ResourceAPI):
    """Sub-API for the mailing lists of the account.

    Access via ``client.lists()``.
    """

    def __init__(self, client: Mailgun):
        super().__init__(client, "/lists")

    @supports_callback
    async def list(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        address: str | None = None,
        limit: int | None = None,
        skip: int | None = None,
    ) -> Any:
        """List mailing lists, optionally filtered by ``address``."""
        query = build(ListQuery, data, address=address, limit=limit, skip=skip)
        return await self._request("GET", data=query.to_fields())

    @supports_callback
    async def create(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        address: str | None = None,
        name: str | None = None,
        description: str | None = None,
        access_level: str | None = None,
    ) -> Any:
        """Create a mailing list."""
        payload = build(
            ListCreate, data,
            address=address, name=name, description=description, access_level=access_level,
        )
        return await self._request("POST", data=payload.to_fields())


class ListAPI(ResourceAPI):
    """Sub-API for one mailing list, identified by its address.

    Access via ``client.lists("devs@mg.example.com")``.
    """

    def __init__(self, client: Mailgun, address: str):
        super().__init__(client, f"/lists/{quote_id(address, 'list address')}")
        self.address = address

    @supports_callback
    async def info(self) -> Any:
        return await self._request("GET")

    @supports_callback
    async def update(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        address: str | None = None,
        name: str | None = None,
        description: str | None = None,
        access_level: str | None = None,
    ) -> Any:
        """Update list properties such as address, name or description."""
        payload = build(
            ListUpdate, data,
            address=address, name=name, description=description, access_level=access_level,
        )
        return await self._request("PUT", data=payload.to_fields())

    @supports_callback
    async def delete(self) -> Any:
        return await self._request("DELETE")

    @overload
    def members(self) -> MembersAPI: ...

    @overload
    def members(self, address: str) -> MemberAPI: ...

    def members(self, address: str | None = None) -> MembersAPI | MemberAPI:
        """Members of this list: all of them, or one by address."""
        if address is None:
            return MembersAPI(self._client, self._path)
        return MemberAPI(self._client, self._path, address)


class MembersAPI(ResourceAPI):
    """Members collection of a mailing list."""

    def __init__(self, client: Mailgun, list_path: str):
        super().__init__(client, f"{list_path}/members")

    @supports_callback
    async def list(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        subscribed: bool | None = None,
        limit: int | None = None,
        skip: int | None = None,
    ) -> Any:
        query = build(MemberQuery, data, subscribed=subscribed, limit=limit, skip=skip)
        return await self._request("GET", data=query.to_fields())

    @supports_callback
    async def create(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        address: str | None = None,
        name: str | None = None,
        vars: dict[str, Any] | None = None,
        subscribed: bool | None = None,
        upsert: bool | None = None,
    ) -> Any:
        """Add one member to the list."""
        payload = build(
            MemberCreate, data,
            address=address, name=name, vars=vars, subscribed=subscribed, upsert=upsert,
        )
        return await self._request("POST", data=payload.to_fields())

    @supports_callback
    async def add(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        members: builtins.list[Any] | None = None,
        subscribed: bool | None = None,
        upsert: bool | None = None,
    ) -> Any:
        """Add up to 1,000 members in one call.

        ``subscribed`` applies to every member that does not set it.
        """
        payload = build(MembersAdd, data, members=members, subscribed=subscribed, upsert=upsert)
        return await self._request("POST", ".json", payload.to_fields())


class MemberAPI(ResourceAPI):
    """One list member, identified by address."""

    def __init__(self, client: Mailgun, list_path: str, address: str):
        super().__init__(client, f"{list_path}/members/{quote_id(address, 'member address')}")
        self.address = address

    @supports_callback
    async def info(self) -> Any:
        return await self._request("GET")

    @supports_callback
    async def update(
        self,
        data: Mapping[str, Any] | None = None,
        *,
        address: str | None = None,
        name: str | None = None,
        vars: dict[str, Any] | None = None,
        subscribed: bool | None = None,
    ) -> Any:
        payload = build(MemberUpdate, data, address=address, name=name, vars=vars, subscribed=subscribed)
        return await self._request("PUT", data=payload.to_fields())

    @supports_callback
    async def delete(self) -> Any:
        return await self._request("DELETE")
