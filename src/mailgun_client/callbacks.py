# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Optional completion-callback support for API coroutines.

Every operation is a coroutine. Callers written against the node-style
``callback(error, body)`` convention pass ``callback=`` and get notified
exactly once; the coroutine still returns the body on success and ``None``
after reporting a failure. Callbacks may be plain functions or coroutine
functions.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from .errors import MailgunError

Callback = Callable[[MailgunError | None, Any], Any]

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


async def _notify(callback: Callback, error: MailgunError | None, body: Any) -> None:
    result = callback(error, body)
    if inspect.isawaitable(result):
        await result


def supports_callback(func: F) -> F:
    """Let an API coroutine accept an optional trailing ``callback`` keyword."""

    @functools.wraps(func)
    async def wrapper(*args: Any, callback: Callback | None = None, **kwargs: Any) -> Any:
        if callback is None:
            return await func(*args, **kwargs)
        try:
            body = await func(*args, **kwargs)
        except MailgunError as exc:
            await _notify(callback, exc, None)
            return None
        await _notify(callback, None, body)
        return body

    return wrapper  # type: ignore[return-value]
