# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Common plumbing for resource-scoped sub-APIs."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from ..attachments import Attachment

if TYPE_CHECKING:
    from ..client import Mailgun


def quote_id(identifier: Any, what: str = "identifier") -> str:
    """Validate and percent-encode a path identifier.

    Raises:
        ValueError: If the identifier is empty.
    """
    if identifier is None or not str(identifier).strip():
        raise ValueError(f"{what} must be a non-empty string")
    return quote(str(identifier).strip(), safe="@")


def merge_params(data: Mapping[str, Any] | None, **params: Any) -> dict[str, Any]:
    """Merge an optional mapping with keyword parameters (keywords win)."""
    merged = dict(data or {})
    merged.update({key: value for key, value in params.items() if value is not None})
    return merged


class ResourceAPI:
    """A handle bound to one resource path.

    Collection handles (list/create) and item handles (info/update/delete)
    are separate subclasses, so an item-level call can never be made
    without an identifier.
    """

    def __init__(self, client: Mailgun, path: str):
        self._client = client
        self._path = path

    @property
    def path(self) -> str:
        """Resource path below the API root."""
        return self._path

    async def _request(
        self,
        method: str,
        suffix: str = "",
        data: Any = None,
        *,
        files: list[tuple[str, Attachment]] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        return await self._client.transport.request(
            method, self._path + suffix, data, files=files, headers=headers
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._path}>"
