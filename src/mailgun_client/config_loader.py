# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Client configuration and its loader.

Configuration can be built directly, or loaded from an INI-style file and
environment variables.

Example:
    Configuration file format (mailgun.ini)::

        [mailgun]
        api_key = key-3ax6xnjp29jd6fds4gc373sgvjxteol0
        domain = mg.example.com
        timeout = 10000
        retry = 3

    Loading configuration::

        config = load_config("/etc/mailgun/mailgun.ini")
        # Returns MailgunConfig dataclass
"""

from __future__ import annotations

import configparser
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import ConfigurationError
from .logger import get_logger

DEFAULT_HOST = "api.mailgun.net"
DEFAULT_PROTOCOL = "https:"
DEFAULT_ENDPOINT = "/v3"
DEFAULT_RETRY = 1
DEFAULT_RETRY_DELAYS = (1.0, 2.0, 4.0)
DEFAULT_WEBHOOK_MAX_AGE = 900

_DEFAULT_PORTS = {"https:": 443, "http:": 80}


def _coerce(name: str, value: Any, kind: type) -> Any:
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid {name}: {value!r}")
    try:
        return kind(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise ConfigurationError(f"Invalid {name}: {value!r}") from exc


@dataclass(frozen=True)
class MailgunConfig:
    """Connection settings for a Mailgun client.

    Attributes:
        api_key: Private API key, used as the basic-auth password and as the
            webhook signing secret.
        domain: Sending domain the message/event/suppression APIs act on.
        mute: Silence diagnostics emitted when webhook validation fails.
        proxy: Proxy URI in the form ``http[s]://[auth@]host:port``.
        timeout: Request timeout in milliseconds (None keeps aiohttp's default).
        host: API host.
        protocol: ``"https:"`` or ``"http:"``.
        port: API port; defaults to 443 for https and 80 for http.
        endpoint: Path prefix prepended to every resource.
        retry: Total number of attempts per request (1 means no retry).
        retry_delays: Seconds to wait before each retry; the last value repeats.
        webhook_max_age: Maximum accepted webhook timestamp skew in seconds.
        public_api_key: Public key used by the address validation API.
        test_mode: When set, requests are logged instead of sent.
    """

    api_key: str
    domain: str
    mute: bool = False
    proxy: str | None = None
    timeout: float | None = None
    host: str = DEFAULT_HOST
    protocol: str = DEFAULT_PROTOCOL
    port: int | None = None
    endpoint: str = DEFAULT_ENDPOINT
    retry: int = DEFAULT_RETRY
    retry_delays: tuple[float, ...] = DEFAULT_RETRY_DELAYS
    webhook_max_age: int = DEFAULT_WEBHOOK_MAX_AGE
    public_api_key: str | None = None
    test_mode: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.api_key, str) or not self.api_key.strip():
            raise ConfigurationError("api_key is required")
        if not isinstance(self.domain, str) or not self.domain.strip():
            raise ConfigurationError("domain is required")

        protocol = (self.protocol or DEFAULT_PROTOCOL).lower()
        if not protocol.endswith(":"):
            protocol += ":"
        if protocol not in _DEFAULT_PORTS:
            raise ConfigurationError(
                f"Invalid protocol {self.protocol!r}: expected 'https:' or 'http:'"
            )
        object.__setattr__(self, "protocol", protocol)

        if self.port is None:
            object.__setattr__(self, "port", _DEFAULT_PORTS[protocol])
        else:
            object.__setattr__(self, "port", _coerce("port", self.port, int))
            if not 0 < self.port < 65536:
                raise ConfigurationError(f"Invalid port: {self.port}")

        endpoint = (self.endpoint or "").rstrip("/")
        if endpoint and not endpoint.startswith("/"):
            endpoint = "/" + endpoint
        object.__setattr__(self, "endpoint", endpoint)

        object.__setattr__(self, "retry", _coerce("retry", self.retry, int))
        if self.retry < 1:
            raise ConfigurationError("retry must be at least 1 (total attempts)")
        if self.timeout is not None:
            object.__setattr__(self, "timeout", _coerce("timeout", self.timeout, float))
            if not self.timeout > 0:
                raise ConfigurationError("timeout must be a positive number of milliseconds")
        object.__setattr__(self, "webhook_max_age", _coerce("webhook_max_age", self.webhook_max_age, int))
        if self.webhook_max_age <= 0:
            raise ConfigurationError("webhook_max_age must be positive")
        try:
            delays = tuple(float(d) for d in self.retry_delays)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Invalid retry_delays: {self.retry_delays!r}") from exc
        if not delays or any(d < 0 for d in delays):
            raise ConfigurationError("retry_delays must be a non-empty list of non-negative numbers")
        object.__setattr__(self, "retry_delays", delays)

    @property
    def base_url(self) -> str:
        """Root URL every resource path is appended to."""
        scheme = self.protocol.rstrip(":")
        return f"{scheme}://{self.host}:{self.port}{self.endpoint}"

    @property
    def timeout_seconds(self) -> float | None:
        """Timeout converted to seconds, as aiohttp expects."""
        if self.timeout is None:
            return None
        return self.timeout / 1000.0

    def __repr__(self) -> str:
        return f"MailgunConfig(domain='{self.domain}', base_url='{self.base_url}')"


logger = get_logger("config_loader")


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_delays(value: str) -> tuple[float, ...]:
    return tuple(float(item) for item in value.split(",") if item.strip())


# key -> (environment variable, parser)
_FIELDS: dict[str, tuple[str, Any]] = {
    "api_key": ("MAILGUN_API_KEY", str),
    "domain": ("MAILGUN_DOMAIN", str),
    "mute": ("MAILGUN_MUTE", _parse_bool),
    "proxy": ("MAILGUN_PROXY", str),
    "timeout": ("MAILGUN_TIMEOUT", float),
    "host": ("MAILGUN_HOST", str),
    "protocol": ("MAILGUN_PROTOCOL", str),
    "port": ("MAILGUN_PORT", int),
    "endpoint": ("MAILGUN_ENDPOINT", str),
    "retry": ("MAILGUN_RETRY", int),
    "retry_delays": ("MAILGUN_RETRY_DELAYS", _parse_delays),
    "webhook_max_age": ("MAILGUN_WEBHOOK_MAX_AGE", int),
    "public_api_key": ("MAILGUN_PUBLIC_API_KEY", str),
    "test_mode": ("MAILGUN_TEST_MODE", _parse_bool),
}


def load_config(config_path: str | None = None, **overrides: Any) -> MailgunConfig:
    """Load client configuration from a config file and the environment.

    Priority: explicit overrides > config file > environment variables > defaults.

    Environment variables:
        MAILGUN_API_KEY, MAILGUN_DOMAIN, MAILGUN_MUTE, MAILGUN_PROXY,
        MAILGUN_TIMEOUT, MAILGUN_HOST, MAILGUN_PROTOCOL, MAILGUN_PORT,
        MAILGUN_ENDPOINT, MAILGUN_RETRY, MAILGUN_RETRY_DELAYS (comma separated),
        MAILGUN_WEBHOOK_MAX_AGE, MAILGUN_PUBLIC_API_KEY, MAILGUN_TEST_MODE

    Args:
        config_path: Optional path to an INI file with a ``[mailgun]`` section.
        **overrides: Field values that take precedence over every source.
            ``None`` values are ignored.

    Returns:
        MailgunConfig built from the merged settings.

    Raises:
        ConfigurationError: If the merged settings are invalid or incomplete.
    """
    config_values: dict[str, Any] = {}

    for key, (env_var, parse) in _FIELDS.items():
        env_value = os.environ.get(env_var)
        if env_value is None or env_value == "":
            continue
        try:
            config_values[key] = parse(env_value)
        except (ValueError, TypeError):
            logger.warning(f"Invalid value for {env_var}, using default")

    if config_path and Path(config_path).exists():
        parser = configparser.ConfigParser()
        parser.read(config_path)

        if parser.has_section("mailgun"):
            for key, (_, parse) in _FIELDS.items():
                raw = parser.get("mailgun", key, fallback=None)
                if raw is None or not raw.strip():
                    continue
                try:
                    config_values[key] = parse(raw.strip())
                except (ValueError, TypeError):
                    logger.warning(f"Invalid value for [mailgun] {key} in {config_path}, ignoring")
    elif config_path:
        logger.warning(f"Config file {config_path} not found, using environment only")

    for key, value in overrides.items():
        if key not in _FIELDS:
            raise ConfigurationError(f"Unknown configuration option: {key}")
        if value is not None:
            config_values[key] = value

    try:
        return MailgunConfig(**config_values)
    except TypeError as exc:
        raise ConfigurationError(str(exc)) from exc
