# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Asynchronous client for the Mailgun transactional email API.

Features:
    - Message sending from components or as a pre-built MIME document
    - Domains, SMTP credentials, mailing lists and list members
    - Routes, suppression lists, events, stats and tags
    - Generic get/post/put/delete for any other endpoint
    - Webhook signature validation (HMAC-SHA256 with freshness window)
    - Bounded retry of transient network failures
    - Optional ``callback(error, body)`` completion on every coroutine

Example::

    from mailgun_client import Mailgun

    mg = Mailgun(api_key="key-3ax6xnjp29jd6fds4gc373sgvjxteol0", domain="mg.example.com")
    await mg.messages().send({
        "from": "me@mg.example.com",
        "to": "bob@example.com",
        "subject": "Hello",
        "text": "Hi Bob",
    })
"""

from .attachments import Attachment
from .client import Mailgun
from .config_loader import MailgunConfig, load_config
from .errors import (
    ConfigurationError,
    MailgunError,
    MailgunValidationError,
    ProviderError,
    TransportError,
)
from .models import MessageData, MimeMessageData
from .retry import RetryStrategy
from .webhook import WebhookValidator

__version__ = "0.1.0"

__all__ = [
    "Attachment",
    "ConfigurationError",
    "Mailgun",
    "MailgunConfig",
    "MailgunError",
    "MailgunValidationError",
    "MessageData",
    "MimeMessageData",
    "ProviderError",
    "RetryStrategy",
    "TransportError",
    "WebhookValidator",
    "__version__",
    "load_config",
]
