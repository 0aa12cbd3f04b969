# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Attachment values for outbound messages.

An attachment source can be:

- a filesystem path (``str`` or ``os.PathLike``)
- in-memory content (``bytes`` / ``bytearray``)
- a readable stream (any object with a ``read()`` method)
- an :class:`Attachment` wrapping one of the above with explicit metadata

Stream size and type cannot be inferred, so a wrapped stream must declare
``content_type`` and ``known_length``.

Example:
    ::

        Attachment("/tmp/report.pdf")
        Attachment(b"col1,col2\\n", filename="data.csv")
        Attachment(open("logo.png", "rb"), filename="logo.png",
                   content_type="image/png", known_length=2048)
"""

from __future__ import annotations

import asyncio
import mimetypes
import os
from pathlib import Path
from typing import Any

from .errors import MailgunValidationError

DEFAULT_FILENAME = "file"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def _is_stream(value: Any) -> bool:
    return callable(getattr(value, "read", None))


class Attachment:
    """A file to upload as ``attachment`` or ``inline`` message part.

    Attributes:
        data: Path, bytes or readable stream.
        filename: Name presented to recipients.
        content_type: MIME type of the content.
        known_length: Declared size in bytes (required for streams).
    """

    def __init__(
        self,
        data: str | os.PathLike | bytes | bytearray | Any,
        filename: str | None = None,
        content_type: str | None = None,
        known_length: int | None = None,
    ):
        if isinstance(data, (str, os.PathLike)):
            if not str(data):
                raise MailgunValidationError("Attachment path must not be empty")
            self.kind = "path"
            filename = filename or Path(data).name
        elif isinstance(data, (bytes, bytearray)):
            self.kind = "bytes"
            data = bytes(data)
            filename = filename or DEFAULT_FILENAME
        elif _is_stream(data):
            self.kind = "stream"
            if not content_type or known_length is None:
                raise MailgunValidationError(
                    "Stream attachments require content_type and known_length"
                )
            filename = filename or DEFAULT_FILENAME
        else:
            raise MailgunValidationError(
                f"Unsupported attachment data type: {type(data).__name__}"
            )

        if known_length is not None and known_length < 0:
            raise MailgunValidationError("known_length must not be negative")

        self.data = data
        self.filename = filename
        self.content_type = content_type or mimetypes.guess_type(filename)[0] or DEFAULT_CONTENT_TYPE
        self.known_length = known_length

    @classmethod
    def coerce(cls, value: Any) -> Attachment:
        """Wrap a raw attachment source into an Attachment.

        Raw streams take their filename from ``.name`` when it exists
        (open file objects do); the content is then measured on upload.
        """
        if isinstance(value, Attachment):
            return value
        if _is_stream(value) and not isinstance(value, (str, bytes, bytearray)):
            name = getattr(value, "name", None)
            filename = Path(name).name if isinstance(name, str) and name else DEFAULT_FILENAME
            attachment = cls.__new__(cls)
            attachment.kind = "stream"
            attachment.data = value
            attachment.filename = filename
            attachment.content_type = mimetypes.guess_type(filename)[0] or DEFAULT_CONTENT_TYPE
            attachment.known_length = None
            return attachment
        return cls(value)

    async def read(self) -> tuple[str, bytes, str]:
        """Load the attachment content.

        Returns:
            Tuple of (filename, content, content_type).

        Raises:
            MailgunValidationError: If the file is missing or a stream does
                not match its declared length.
        """
        if self.kind == "bytes":
            content = self.data
        elif self.kind == "path":
            path = Path(self.data)
            if not path.is_file():
                raise MailgunValidationError(f"Attachment file not found: {path}")
            content = await asyncio.to_thread(path.read_bytes)
        else:
            content = await asyncio.to_thread(self.data.read)
            if isinstance(content, str):
                content = content.encode("utf-8")

        if self.known_length is not None and len(content) != self.known_length:
            raise MailgunValidationError(
                f"Attachment {self.filename!r} is {len(content)} bytes, "
                f"expected {self.known_length}"
            )
        return self.filename, content, self.content_type

    def __repr__(self) -> str:
        return f"Attachment(filename='{self.filename}', kind='{self.kind}', content_type='{self.content_type}')"
