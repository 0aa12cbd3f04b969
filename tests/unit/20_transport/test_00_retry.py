# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for RetryStrategy class."""

import asyncio

import aiohttp
import pytest

from mailgun_client.errors import ProviderError
from mailgun_client.retry import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_RETRY_DELAYS,
    TEMPORARY_STATUS_CODES,
    RetryStrategy,
)


class TestRetryStrategyDefaults:
    """Tests for default configuration."""

    def test_default_max_attempts(self):
        """Test default is a single attempt."""
        strategy = RetryStrategy()
        assert strategy.max_attempts == DEFAULT_MAX_ATTEMPTS == 1

    def test_default_delays(self):
        strategy = RetryStrategy()
        assert strategy.delays == DEFAULT_RETRY_DELAYS

    def test_invalid_max_attempts(self):
        with pytest.raises(ValueError):
            RetryStrategy(max_attempts=0)

    def test_empty_delays_fall_back(self):
        assert RetryStrategy(delays=()).delays == DEFAULT_RETRY_DELAYS


class TestCalculateDelay:
    """Tests for calculate_delay method."""

    def test_first_retry_uses_first_delay(self):
        strategy = RetryStrategy(delays=(1, 5, 30))
        assert strategy.calculate_delay(0) == 1

    def test_second_retry_uses_second_delay(self):
        strategy = RetryStrategy(delays=(1, 5, 30))
        assert strategy.calculate_delay(1) == 5

    def test_beyond_list_uses_last_delay(self):
        """Test retries beyond list length use last delay."""
        strategy = RetryStrategy(delays=(1, 5, 30))
        assert strategy.calculate_delay(5) == 30
        assert strategy.calculate_delay(100) == 30


class TestClassifyError:
    """Tests for classify_error method."""

    @pytest.mark.parametrize(
        "exc",
        [
            asyncio.TimeoutError(),
            TimeoutError(),
            aiohttp.ClientConnectionError("reset"),
            aiohttp.ServerDisconnectedError(),
            ConnectionRefusedError(),
            OSError("network unreachable"),
        ],
    )
    def test_network_errors_are_temporary(self, exc):
        is_temporary, status = RetryStrategy().classify_error(exc)
        assert is_temporary is True
        assert status is None

    @pytest.mark.parametrize("status", sorted(TEMPORARY_STATUS_CODES))
    def test_gateway_statuses_are_temporary(self, status):
        is_temporary, code = RetryStrategy().classify_error(ProviderError(status, "unavailable"))
        assert is_temporary is True
        assert code == status

    @pytest.mark.parametrize("status", [400, 401, 404, 429, 500])
    def test_rejections_are_permanent(self, status):
        is_temporary, code = RetryStrategy().classify_error(ProviderError(status, "no"))
        assert is_temporary is False
        assert code == status

    def test_unknown_errors_are_permanent(self):
        is_temporary, status = RetryStrategy().classify_error(ValueError("bug"))
        assert is_temporary is False
        assert status is None


class TestShouldRetry:
    """Tests for should_retry method."""

    def test_retry_allowed_for_temporary_error(self):
        strategy = RetryStrategy(max_attempts=3)
        exc = asyncio.TimeoutError()
        assert strategy.should_retry(1, exc) is True
        assert strategy.should_retry(2, exc) is True

    def test_no_retry_when_attempts_exhausted(self):
        strategy = RetryStrategy(max_attempts=3)
        assert strategy.should_retry(3, asyncio.TimeoutError()) is False

    def test_no_retry_with_single_attempt(self):
        """Test the default policy never repeats a request."""
        assert RetryStrategy().should_retry(1, asyncio.TimeoutError()) is False

    def test_no_retry_for_permanent_error(self):
        strategy = RetryStrategy(max_attempts=5)
        assert strategy.should_retry(1, ProviderError(400, "bad")) is False
