# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Logging helper for the Mailgun client.

The library only hands out named loggers under the ``mailgun_client``
namespace. Handlers, levels and formats belong to the application (the
``mailgun`` CLI configures them with ``logging.basicConfig()``).

Example:
    Typical usage in a module::

        from mailgun_client.logger import get_logger

        logger = get_logger("transport")
        logger.debug("POST /example.com/messages")
"""

import logging

ROOT_LOGGER_NAME = "mailgun_client"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger in the ``mailgun_client`` namespace.

    Args:
        name: Child logger name. ``None`` returns the package root logger.

    Returns:
        A ``logging.Logger``; repeated calls with the same name return
        the same instance.
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
