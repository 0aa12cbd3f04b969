# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Pydantic models for request payloads and their wire encoding.

Mailgun takes form-encoded fields. Models validate what the caller passed,
then ``to_fields()`` flattens them into ``(name, value)`` pairs:

- lists become repeated fields (``o:tag``, ``action``)
- booleans become ``"true"``/``"false"``, or ``"yes"``/``"no"`` where the
  API expects those
- nested dicts (``recipient-variables``, ``vars``, ``v:*``) are JSON-encoded
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from email.utils import format_datetime, formatdate
from typing import Annotated, Any, Literal, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_serializer,
    field_validator,
    model_validator,
)

from .attachments import Attachment
from .errors import MailgunValidationError

EXTRA_FIELD_PREFIXES = ("h:", "v:", "o:", "t:")
MIME_FILENAME = "message.mime"
MIME_CONTENT_TYPE = "message/rfc822"

YesNo = Literal["yes", "no"]


def encode_value(value: Any) -> str:
    """Encode a scalar for a form field or query string."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value)
    if isinstance(value, datetime):
        return _rfc2822(value)
    return str(value)


def encode_fields(data: Mapping[str, Any] | Iterable[tuple[str, Any]] | None) -> list[tuple[str, str]]:
    """Flatten a payload into form/query pairs.

    List values under a plain key are repeated; ``None`` values are dropped.

    Args:
        data: Mapping or iterable of ``(key, value)`` pairs.

    Returns:
        List of ``(key, str_value)`` tuples in input order.
    """
    if data is None:
        return []
    items = data.items() if isinstance(data, Mapping) else data
    fields: list[tuple[str, str]] = []
    for key, value in items:
        if value is None:
            continue
        if isinstance(value, (list, tuple)) and not key.startswith("v:"):
            fields.extend((key, encode_value(item)) for item in value if item is not None)
        else:
            fields.append((key, encode_value(value)))
    return fields


def _rfc2822(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc), usegmt=True)


def _yes_no(value: Any) -> Any:
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1"):
            return "yes"
        if lowered in ("false", "0"):
            return "no"
        return lowered
    return value


def _join_addresses(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(addr).strip() for addr in value if str(addr).strip())
    if isinstance(value, str):
        return value.strip()
    return value


def _coerce_attachments(value: Any) -> list[Attachment] | None:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return [Attachment.coerce(item) for item in value]
    return [Attachment.coerce(value)]


class RequestModel(BaseModel):
    """Base class for request payloads."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    def to_fields(self) -> list[tuple[str, str]]:
        """Encode the payload as form/query pairs."""
        return encode_fields(self.model_dump(by_alias=True, exclude_none=True))


class PrefixedExtrasModel(RequestModel):
    """Payload accepting extra ``h:``/``v:``/``o:``/``t:`` fields."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, arbitrary_types_allowed=True)

    @model_validator(mode="after")
    def check_extra_prefixes(self) -> PrefixedExtrasModel:
        for key in self.model_extra or {}:
            if not key.startswith(EXTRA_FIELD_PREFIXES):
                raise ValueError(
                    f"Unknown field {key!r}: custom fields must start with one of {', '.join(EXTRA_FIELD_PREFIXES)}"
                )
        return self

    def extra_fields(self) -> list[tuple[str, str]]:
        return encode_fields(self.model_extra or {})


class MessageData(PrefixedExtrasModel):
    """Message assembled from components (``POST /{domain}/messages``).

    Attributes:
        from_addr: Sender, sent as ``from``.
        to: Recipient(s); lists are comma-joined.
        cc: Same as ``to`` for Cc.
        bcc: Same as ``to`` for Bcc.
        subject: Message subject.
        text: Plain-text body.
        html: HTML body.
        template: Name of a stored template to render.
        attachment: Attachment source(s).
        inline: Inline attachment source(s), e.g. images referenced by cid.
        recipient_variables: Per-recipient values for ``%recipient.key%``.
        tag, campaign, dkim, deliverytime, testmode, tracking,
        tracking_clicks, tracking_opens, require_tls, skip_verification:
            ``o:`` delivery options.
    """

    from_addr: Annotated[str, Field(alias="from", min_length=1)]
    to: Annotated[str, Field(min_length=1)]
    cc: str | None = None
    bcc: str | None = None
    subject: str
    text: str | None = None
    html: str | None = None
    template: str | None = None
    attachment: list[Attachment] | None = None
    inline: list[Attachment] | None = None
    recipient_variables: Annotated[
        dict[str, dict[str, str | int | float]] | None,
        Field(default=None, alias="recipient-variables"),
    ]
    tag: Annotated[str | list[str] | None, Field(default=None, alias="o:tag")]
    campaign: Annotated[str | None, Field(default=None, alias="o:campaign")]
    dkim: Annotated[YesNo | None, Field(default=None, alias="o:dkim")]
    deliverytime: Annotated[str | None, Field(default=None, alias="o:deliverytime")]
    testmode: Annotated[YesNo | None, Field(default=None, alias="o:testmode")]
    tracking: Annotated[YesNo | None, Field(default=None, alias="o:tracking")]
    tracking_clicks: Annotated[
        Literal["yes", "no", "htmlonly"] | None,
        Field(default=None, alias="o:tracking-clicks"),
    ]
    tracking_opens: Annotated[YesNo | None, Field(default=None, alias="o:tracking-opens")]
    require_tls: Annotated[YesNo | None, Field(default=None, alias="o:require-tls")]
    skip_verification: Annotated[YesNo | None, Field(default=None, alias="o:skip-verification")]

    @field_validator("to", "cc", "bcc", mode="before")
    @classmethod
    def join_recipients(cls, v: Any) -> Any:
        """Accept a list of addresses and emit a comma-separated string."""
        return _join_addresses(v)

    @field_validator("attachment", "inline", mode="before")
    @classmethod
    def wrap_attachments(cls, v: Any) -> list[Attachment] | None:
        return _coerce_attachments(v)

    @field_validator(
        "dkim", "testmode", "tracking", "tracking_clicks", "tracking_opens",
        "require_tls", "skip_verification",
        mode="before",
    )
    @classmethod
    def normalise_flags(cls, v: Any) -> Any:
        return _yes_no(v)

    @field_validator("deliverytime", mode="before")
    @classmethod
    def format_deliverytime(cls, v: Any) -> Any:
        """Epoch seconds and datetimes are converted to RFC 2822."""
        if isinstance(v, bool):
            raise ValueError("deliverytime must be a timestamp, datetime or RFC 2822 string")
        if isinstance(v, (int, float)):
            return formatdate(v, usegmt=True)
        if isinstance(v, datetime):
            return _rfc2822(v)
        return v

    @model_validator(mode="after")
    def require_body(self) -> MessageData:
        if self.text is None and self.html is None and self.template is None:
            raise ValueError("One of text, html or template is required")
        return self

    def to_fields(self) -> list[tuple[str, str]]:
        data = self.model_dump(
            by_alias=True,
            exclude_none=True,
            exclude={"attachment", "inline"},
        )
        extras = {key: data.pop(key) for key in list(self.model_extra or {}) if key in data}
        return encode_fields(data) + encode_fields(extras)

    def files(self) -> list[tuple[str, Attachment]]:
        """Attachments as ``(field_name, Attachment)`` pairs."""
        files: list[tuple[str, Attachment]] = []
        for field_name in ("attachment", "inline"):
            for item in getattr(self, field_name) or []:
                files.append((field_name, item))
        return files


class MimeMessageData(PrefixedExtrasModel):
    """Pre-built MIME document (``POST /{domain}/messages.mime``).

    Attributes:
        to: Recipient(s); lists are comma-joined.
        message: MIME source: document text, bytes, path to a ``.mime``/``.eml``
            file, or a readable stream.
    """

    to: Annotated[str, Field(min_length=1)]
    message: Any

    @field_validator("to", mode="before")
    @classmethod
    def join_recipients(cls, v: Any) -> Any:
        return _join_addresses(v)

    @field_validator("message")
    @classmethod
    def check_message(cls, v: Any) -> Any:
        if isinstance(v, (str, bytes, bytearray)):
            if not v:
                raise ValueError("message must not be empty")
            return v
        if isinstance(v, os.PathLike) or callable(getattr(v, "read", None)):
            return v
        raise ValueError("message must be MIME text, bytes, a file path or a readable stream")

    def to_fields(self) -> list[tuple[str, str]]:
        return encode_fields([("to", self.to)]) + self.extra_fields()

    def to_attachment(self) -> Attachment:
        """Wrap the MIME source as the ``message`` file part."""
        source = self.message
        if isinstance(source, str) and "\n" not in source and os.path.isfile(source):
            source = os.fspath(source)
            return Attachment(source, filename=MIME_FILENAME, content_type=MIME_CONTENT_TYPE)
        if isinstance(source, os.PathLike):
            return Attachment(source, filename=MIME_FILENAME, content_type=MIME_CONTENT_TYPE)
        if isinstance(source, str):
            source = source.encode("utf-8")
        if isinstance(source, (bytes, bytearray)):
            return Attachment(bytes(source), filename=MIME_FILENAME, content_type=MIME_CONTENT_TYPE)
        attachment = Attachment.coerce(source)
        attachment.filename = MIME_FILENAME
        attachment.content_type = MIME_CONTENT_TYPE
        return attachment


class PageQuery(RequestModel):
    """Pagination parameters shared by list operations."""

    limit: Annotated[int | None, Field(default=None, ge=1, le=1000)]
    skip: Annotated[int | None, Field(default=None, ge=0)]


class DomainCreate(RequestModel):
    name: Annotated[str, Field(min_length=1)]
    smtp_password: str | None = None
    wildcard: bool | None = None
    spam_action: Literal["disabled", "tag", "block"] | None = None


class CredentialCreate(RequestModel):
    login: Annotated[str, Field(min_length=1)]
    password: Annotated[str, Field(min_length=5, max_length=32)]


class CredentialUpdate(RequestModel):
    password: Annotated[str, Field(min_length=5, max_length=32)]


AccessLevel = Literal["readonly", "members", "everyone"]


class ListCreate(RequestModel):
    address: Annotated[str, Field(min_length=3)]
    name: str | None = None
    description: str | None = None
    access_level: AccessLevel | None = None


class ListUpdate(RequestModel):
    address: str | None = None
    name: str | None = None
    description: str | None = None
    access_level: AccessLevel | None = None


class ListQuery(PageQuery):
    address: str | None = None


class MemberCreate(RequestModel):
    """Mailing list member.

    ``vars`` is sent JSON-encoded; ``subscribed`` and ``upsert`` as yes/no.
    """

    address: Annotated[str, Field(min_length=3)]
    name: str | None = None
    vars: dict[str, str | int | float] | None = None
    subscribed: bool | None = None
    upsert: bool | None = None

    @field_serializer("subscribed", "upsert")
    def serialise_flag(self, value: bool | None) -> str | None:
        return None if value is None else _yes_no(value)


class MemberUpdate(RequestModel):
    address: str | None = None
    name: str | None = None
    vars: dict[str, str | int | float] | None = None
    subscribed: bool | None = None

    @field_serializer("subscribed")
    def serialise_flag(self, value: bool | None) -> str | None:
        return None if value is None else _yes_no(value)


class MemberQuery(PageQuery):
    subscribed: bool | None = None

    @field_serializer("subscribed")
    def serialise_flag(self, value: bool | None) -> str | None:
        return None if value is None else _yes_no(value)


class MembersAdd(RequestModel):
    """Bulk member upload, up to 1,000 members per call."""

    members: Annotated[list[MemberCreate | str], Field(min_length=1, max_length=1000)]
    subscribed: bool | None = None
    upsert: bool | None = None

    def to_fields(self) -> list[tuple[str, str]]:
        members: list[Any] = []
        for member in self.members:
            if isinstance(member, str):
                members.append(member)
                continue
            # JSON members take real booleans, not yes/no
            entry = {
                key: getattr(member, key)
                for key in ("address", "name", "vars", "subscribed")
                if getattr(member, key) is not None
            }
            if self.subscribed is not None and member.subscribed is None:
                entry["subscribed"] = self.subscribed
            members.append(entry)
        fields = [("members", json.dumps(members))]
        if self.upsert is not None:
            fields.append(("upsert", _yes_no(self.upsert)))
        return fields


class RouteCreate(RequestModel):
    priority: Annotated[int, Field(default=0, ge=0)]
    description: str | None = None
    expression: Annotated[str, Field(min_length=1)]
    action: Annotated[list[str], Field(min_length=1)]

    @field_validator("action", mode="before")
    @classmethod
    def listify(cls, v: Any) -> Any:
        return [v] if isinstance(v, str) else v


class RouteUpdate(RequestModel):
    priority: Annotated[int | None, Field(default=None, ge=0)]
    description: str | None = None
    expression: str | None = None
    action: list[str] | None = None

    @field_validator("action", mode="before")
    @classmethod
    def listify(cls, v: Any) -> Any:
        return [v] if isinstance(v, str) else v


class TagUpdate(RequestModel):
    description: str


class SuppressionCreate(RequestModel):
    """Bounce, unsubscribe or complaint record.

    ``code`` and ``error`` apply to bounces, ``tag`` to unsubscribes.
    """

    address: Annotated[str, Field(min_length=3)]
    code: int | None = None
    error: str | None = None
    tag: str | None = None
    created_at: datetime | str | None = None


Model = TypeVar("Model", bound=BaseModel)


def build(model_cls: type[Model], data: Any = None, **kwargs: Any) -> Model:
    """Validate caller input into ``model_cls``.

    Accepts an existing instance, a mapping, keyword arguments, or a mapping
    merged with keyword arguments.

    Raises:
        MailgunValidationError: If the payload does not validate.
    """
    if isinstance(data, model_cls) and not kwargs:
        return data
    if data is None:
        payload: dict[str, Any] = {}
    elif isinstance(data, Mapping):
        payload = dict(data)
    elif isinstance(data, BaseModel):
        payload = data.model_dump(by_alias=True, exclude_none=True)
    else:
        raise MailgunValidationError(
            f"{model_cls.__name__} expects a mapping, got {type(data).__name__}"
        )
    payload.update({key: value for key, value in kwargs.items() if value is not None})
    try:
        return model_cls.model_validate(payload)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or model_cls.__name__}: {err['msg']}"
            for err in exc.errors()
        )
        raise MailgunValidationError(
            f"Invalid {model_cls.__name__}: {problems}",
            errors=[{"loc": err["loc"], "msg": err["msg"], "type": err["type"]} for err in exc.errors()],
        ) from exc


__all__ = [
    "CredentialCreate",
    "CredentialUpdate",
    "DomainCreate",
    "ListCreate",
    "ListQuery",
    "ListUpdate",
    "MemberCreate",
    "MemberQuery",
    "MemberUpdate",
    "MembersAdd",
    "MessageData",
    "MimeMessageData",
    "PageQuery",
    "RouteCreate",
    "RouteUpdate",
    "SuppressionCreate",
    "TagUpdate",
    "build",
    "encode_fields",
    "encode_value",
]
