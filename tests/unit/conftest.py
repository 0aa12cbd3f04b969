# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Shared fixtures: a recording stand-in for aiohttp.ClientSession."""

import json
import os
from dataclasses import dataclass, field
from typing import Any
from unittest.mock import patch

import pytest

from mailgun_client import Mailgun

API_KEY = "key-3ax6xnjp29jd6fds4gc373sgvjxteol0"
DOMAIN = "mg.example.com"
BASE_URL = "https://api.mailgun.net:443/v3"


class FakeResponse:
    """Minimal aiohttp response: status, headers and an async text()."""

    def __init__(self, status: int = 200, body: Any = None, content_type: str = "application/json"):
        self.status = status
        self.headers = {"Content-Type": content_type}
        if isinstance(body, bytes):
            self._raw = body
        elif isinstance(body, str):
            self._raw = body.encode()
        else:
            self._raw = json.dumps(body if body is not None else {"message": "ok"}).encode()

    async def text(self, encoding=None, errors="strict"):
        return self._raw.decode(encoding or "utf-8", errors)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None


@dataclass
class RecordedCall:
    method: str
    url: str
    kwargs: dict
    session_kwargs: dict

    @property
    def params(self):
        return self.kwargs.get("params")

    @property
    def data(self):
        return self.kwargs.get("data")

    @property
    def headers(self):
        return self.kwargs.get("headers")


@dataclass
class FakeHttp:
    """Queue of scripted outcomes plus a log of every request issued."""

    calls: list = field(default_factory=list)
    outcomes: list = field(default_factory=list)

    def respond(self, status=200, body=None, content_type="application/json"):
        self.outcomes.append(FakeResponse(status, body, content_type))
        return self

    def fail(self, exc):
        self.outcomes.append(exc)
        return self

    def next_outcome(self):
        if self.outcomes:
            return self.outcomes.pop(0)
        return FakeResponse()

    @property
    def last(self) -> RecordedCall:
        return self.calls[-1]


class FakeSession:
    def __init__(self, http: FakeHttp, session_kwargs: dict):
        self._http = http
        self._session_kwargs = session_kwargs

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None

    def request(self, method, url, **kwargs):
        self._http.calls.append(RecordedCall(method, url, kwargs, self._session_kwargs))
        outcome = self._http.next_outcome()
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep MAILGUN_* variables of the host out of the tests."""
    for name in list(os.environ):
        if name.startswith("MAILGUN_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_http():
    http = FakeHttp()
    with patch("aiohttp.ClientSession", side_effect=lambda **kw: FakeSession(http, kw)):
        yield http


@pytest.fixture
def client():
    return Mailgun(API_KEY, DOMAIN)
