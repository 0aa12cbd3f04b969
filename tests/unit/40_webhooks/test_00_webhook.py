# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for webhook signature validation."""

import hashlib
import hmac
import logging
import time

import pytest

from mailgun_client import Mailgun
from mailgun_client.webhook import DEFAULT_MAX_AGE, WebhookValidator

SIGNING_KEY = "key-3ax6xnjp29jd6fds4gc373sgvjxteol0"
NOW = 1_700_000_000
TOKEN = "5d1c2a7b4e0f9a8c6b3d2e1f0a9b8c7d6e5f4a3b2c1d0e9f8a"


def expected_signature(timestamp, token, key=SIGNING_KEY):
    return hmac.new(key.encode(), f"{timestamp}{token}".encode(), hashlib.sha256).hexdigest()


@pytest.fixture
def validator():
    return WebhookValidator(SIGNING_KEY, clock=lambda: NOW)


class TestSign:
    """Tests for signature computation."""

    def test_matches_hmac_sha256(self, validator):
        assert validator.sign(NOW, TOKEN) == expected_signature(NOW, TOKEN)

    def test_string_and_int_timestamps_agree(self, validator):
        assert validator.sign(str(NOW), TOKEN) == validator.sign(NOW, TOKEN)

    def test_deterministic(self, validator):
        assert validator.sign(NOW, TOKEN) == validator.sign(NOW, TOKEN)


class TestValidate:
    """Tests for validate."""

    def test_valid(self, validator):
        assert validator.validate(NOW, TOKEN, expected_signature(NOW, TOKEN)) is True

    def test_valid_string_timestamp(self, validator):
        assert validator.validate(str(NOW), TOKEN, expected_signature(NOW, TOKEN)) is True

    def test_uppercase_signature(self, validator):
        assert validator.validate(NOW, TOKEN, expected_signature(NOW, TOKEN).upper()) is True

    def test_wrong_key(self, validator):
        signature = expected_signature(NOW, TOKEN, key="key-other")
        assert validator.validate(NOW, TOKEN, signature) is False

    def test_tampered_token(self, validator):
        assert validator.validate(NOW, TOKEN + "x", expected_signature(NOW, TOKEN)) is False

    def test_within_window(self, validator):
        ts = NOW - DEFAULT_MAX_AGE
        assert validator.validate(ts, TOKEN, expected_signature(ts, TOKEN)) is True

    def test_stale(self, validator):
        """Test an old but correctly signed webhook is rejected as a replay."""
        ts = NOW - DEFAULT_MAX_AGE - 1
        assert validator.validate(ts, TOKEN, expected_signature(ts, TOKEN)) is False

    def test_future(self, validator):
        ts = NOW + DEFAULT_MAX_AGE + 1
        assert validator.validate(ts, TOKEN, expected_signature(ts, TOKEN)) is False

    def test_custom_max_age(self):
        validator = WebhookValidator(SIGNING_KEY, max_age=10, clock=lambda: NOW)
        ts = NOW - 11
        assert validator.validate(ts, TOKEN, expected_signature(ts, TOKEN)) is False

    @pytest.mark.parametrize(
        "timestamp, token, signature",
        [
            (NOW, "", "abc"),
            (NOW, None, "abc"),
            (NOW, TOKEN, ""),
            (NOW, TOKEN, None),
            (NOW, TOKEN, 123),
            ("soon", TOKEN, "abc"),
            (None, TOKEN, "abc"),
            (True, TOKEN, "abc"),
            (float("inf"), TOKEN, "abc"),
            (float("nan"), TOKEN, "abc"),
            ("1" + "0" * 400, TOKEN, "abc"),
            (NOW, TOKEN, "zzzz"),
            (NOW, TOKEN, "sïgnature"),
        ],
    )
    def test_malformed_input_rejected(self, validator, timestamp, token, signature):
        assert validator.validate(timestamp, token, signature) is False

    def test_rejection_logged(self, validator, caplog):
        with caplog.at_level(logging.WARNING, logger="mailgun_client"):
            validator.validate(NOW, TOKEN, "0" * 64)
        assert "signature mismatch" in caplog.text

    def test_mute(self, caplog):
        validator = WebhookValidator(SIGNING_KEY, mute=True, clock=lambda: NOW)
        with caplog.at_level(logging.WARNING, logger="mailgun_client"):
            assert validator.validate(NOW, TOKEN, "0" * 64) is False
        assert caplog.records == []


class TestClientWebhook:
    """Tests for the client-level helpers."""

    def test_validate_webhook_with_real_clock(self):
        client = Mailgun(SIGNING_KEY, "mg.example.com")
        ts = int(time.time())
        signature = client.sign_webhook(ts, TOKEN)

        assert signature == expected_signature(ts, TOKEN)
        assert client.validate_webhook(ts, TOKEN, signature) is True
        tampered = ("1" if signature[0] == "0" else "0") + signature[1:]
        assert client.validate_webhook(ts, TOKEN, tampered) is False

    def test_client_config_applied(self):
        client = Mailgun(SIGNING_KEY, "mg.example.com", webhook_max_age=60, mute=True)
        assert client._webhook.max_age == 60
        assert client._webhook.mute is True

    @pytest.mark.parametrize("timestamp", [float("inf"), float("-inf"), "1" + "0" * 400, "-" + "9" * 400])
    def test_out_of_range_timestamp_rejected(self, timestamp):
        """Test timestamps too large for the float wall clock are rejected."""
        client = Mailgun(SIGNING_KEY, "mg.example.com", mute=True)
        assert client.validate_webhook(timestamp, TOKEN, "abc") is False
