# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Messages API: send, fetch and delete messages.

Access via ``client.messages()`` (sending) or ``client.messages(key)``
(a stored message).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from ..callbacks import supports_callback
from ..models import MessageData, MimeMessageData, build
from .base import ResourceAPI, quote_id

if TYPE_CHECKING:
    from ..client import Mailgun

MIME_ACCEPT = "message/rfc2822"


class MessagesAPI(ResourceAPI):
    """Sub-API for sending messages on the client's domain."""

    def __init__(self, client: Mailgun):
        super().__init__(client, f"/{quote_id(client.domain, 'domain')}")

    @supports_callback
    async def send(self, data: Mapping[str, Any] | MessageData | None = None, **fields: Any) -> Any:
        """Send a message assembled from its components.

        Args:
            data: Message fields (``from``, ``to``, ``subject``, ``text``,
                ``o:tag`` ...) as a mapping or :class:`MessageData`.
            **fields: Field values by attribute name (``from_addr``,
                ``tracking_clicks`` ...), merged over ``data``.

        Returns:
            Mailgun's response, e.g. ``{"id": "<...>", "message": "Queued. Thank you."}``.
        """
        message = build(MessageData, data, **fields)
        files = message.files()
        return await self._request("POST", "/messages", message.to_fields(), files=files or None)

    @supports_callback
    async def send_mime(self, data: Mapping[str, Any] | MimeMessageData | None = None, **fields: Any) -> Any:
        """Send a pre-built MIME document to ``to``."""
        message = build(MimeMessageData, data, **fields)
        return await self._request(
            "POST",
            "/messages.mime",
            message.to_fields(),
            files=[("message", message.to_attachment())],
        )


class MessageAPI(ResourceAPI):
    """Sub-API for one stored message, identified by its storage key."""

    def __init__(self, client: Mailgun, key: str):
        super().__init__(
            client,
            f"/domains/{quote_id(client.domain, 'domain')}/messages/{quote_id(key, 'message key')}",
        )
        self.key = key

    @supports_callback
    async def info(self, mime: bool = False) -> Any:
        """Return the stored message as JSON, or as raw MIME text when ``mime`` is set."""
        headers = {"Accept": MIME_ACCEPT} if mime else None
        return await self._request("GET", headers=headers)

    @supports_callback
    async def delete(self) -> Any:
        """Delete a message stored by a ``store()`` route action."""
        return await self._request("DELETE")
