# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Retry policy for outbound API requests.

A request is attempted at most ``max_attempts`` times. Only temporary
failures are retried: network errors, timeouts and gateway errors
(502/503/504). Anything Mailgun actively rejected (4xx, other 5xx) is
returned to the caller on the first attempt.

Example:
    ::

        strategy = RetryStrategy(max_attempts=3, delays=(1.0, 2.0))
        strategy.calculate_delay(0)   # 1.0
        strategy.calculate_delay(5)   # 2.0 (last value repeats)
"""

from __future__ import annotations

import asyncio

import aiohttp

from .errors import ProviderError

DEFAULT_MAX_ATTEMPTS = 1
DEFAULT_RETRY_DELAYS: tuple[float, ...] = (1.0, 2.0, 4.0)

TEMPORARY_STATUS_CODES = frozenset({502, 503, 504})


class RetryStrategy:
    """Bounded attempt policy with a fixed backoff schedule.

    Attributes:
        max_attempts: Total attempts allowed, including the first one.
        delays: Seconds to wait before retry N (0-indexed); the last value
            is reused once the schedule is exhausted.
    """

    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        delays: tuple[float, ...] = DEFAULT_RETRY_DELAYS,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.delays = tuple(delays) or DEFAULT_RETRY_DELAYS

    def classify_error(self, exc: BaseException) -> tuple[bool, int | None]:
        """Classify a failure as temporary or permanent.

        Returns:
            tuple: (is_temporary, status)
                - is_temporary: True if the request may succeed when repeated
                - status: HTTP status when the failure carries one, else None
        """
        if isinstance(exc, ProviderError):
            return exc.status in TEMPORARY_STATUS_CODES, exc.status

        if isinstance(exc, aiohttp.ClientResponseError):
            return exc.status in TEMPORARY_STATUS_CODES, exc.status

        # ServerTimeoutError is both a ClientConnectionError and a TimeoutError
        if isinstance(exc, (asyncio.TimeoutError, TimeoutError, aiohttp.ClientConnectionError, OSError)):
            return True, None

        return False, None

    def should_retry(self, attempt: int, exc: BaseException) -> bool:
        """Decide whether another attempt is allowed.

        Args:
            attempt: Number of attempts already performed (1 after the first).
            exc: The failure of the last attempt.
        """
        if attempt >= self.max_attempts:
            return False
        is_temporary, _ = self.classify_error(exc)
        return is_temporary

    def calculate_delay(self, retry_index: int) -> float:
        """Seconds to wait before retry ``retry_index`` (0-indexed)."""
        if retry_index >= len(self.delays):
            return self.delays[-1]
        return self.delays[retry_index]

    def __repr__(self) -> str:
        return f"RetryStrategy(max_attempts={self.max_attempts}, delays={self.delays})"
