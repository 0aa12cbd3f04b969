# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Webhook signature validation.

Mailgun signs each webhook with ``HMAC-SHA256(api_key, timestamp + token)``
and sends the lowercase hex digest as ``signature``. A webhook is accepted
when the digest matches and the timestamp lies within ``max_age`` seconds
of the local clock.

Example:
    ::

        validator = WebhookValidator("key-3ax6xnjp29jd6fds4gc373sgvjxteol0")
        payload = request_json["signature"]
        if not validator.validate(payload["timestamp"], payload["token"], payload["signature"]):
            return Response(status=406)
"""

from __future__ import annotations

import hashlib
import hmac
import time
from collections.abc import Callable
from typing import Any

from .logger import get_logger

DEFAULT_MAX_AGE = 900

logger = get_logger("webhook")


class WebhookValidator:
    """Checks webhook signatures against the account signing key.

    Attributes:
        max_age: Accepted clock skew between the webhook timestamp and now.
        mute: Suppress warning logs for rejected webhooks.
    """

    def __init__(
        self,
        signing_key: str,
        max_age: int = DEFAULT_MAX_AGE,
        mute: bool = False,
        clock: Callable[[], float] = time.time,
    ):
        self._key = signing_key.encode("utf-8")
        self.max_age = max_age
        self.mute = mute
        self._clock = clock

    def sign(self, timestamp: int | str, token: str) -> str:
        """Compute the signature Mailgun would send for ``timestamp``/``token``."""
        message = f"{timestamp}{token}".encode("utf-8")
        return hmac.new(self._key, message, hashlib.sha256).hexdigest()

    def validate(self, timestamp: Any, token: Any, signature: Any) -> bool:
        """Return True only for a fresh, correctly signed webhook.

        Malformed input is rejected, never raised.
        """
        if not isinstance(token, str) or not token:
            return self._reject("missing token")
        if not isinstance(signature, str) or not signature:
            return self._reject("missing signature")

        if isinstance(timestamp, bool):
            return self._reject("malformed timestamp")
        try:
            ts = int(timestamp)
            # float clocks cannot absorb arbitrarily large ints
            age = abs(self._clock() - ts)
        except (TypeError, ValueError, OverflowError):
            return self._reject("malformed timestamp")

        if age > self.max_age:
            return self._reject("stale timestamp, this may be a replay attack")

        expected = self.sign(str(timestamp).strip(), token)
        try:
            valid = hmac.compare_digest(expected, signature.lower())
        except TypeError:
            # non-ASCII signatures cannot be compared as str
            valid = False
        if not valid:
            return self._reject("signature mismatch")
        return True

    def _reject(self, reason: str) -> bool:
        if not self.mute:
            logger.warning(f"Webhook rejected: {reason}")
        return False
