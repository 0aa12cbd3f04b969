# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Resource-scoped sub-APIs.

Each resource has a collection handle (list/create) and an item handle
(info/update/delete) bound to one identifier.
"""

from .analytics import EventsAPI, StatsAPI, TagAPI, TagsAPI
from .base import ResourceAPI
from .domains import CredentialAPI, CredentialsAPI, DomainAPI, DomainsAPI
from .lists import ListAPI, ListsAPI, MemberAPI, MembersAPI
from .messages import MessageAPI, MessagesAPI
from .routes import RouteAPI, RoutesAPI
from .suppressions import SUPPRESSION_KINDS, SuppressionAPI, SuppressionsAPI

__all__ = [
    "SUPPRESSION_KINDS",
    "CredentialAPI",
    "CredentialsAPI",
    "DomainAPI",
    "DomainsAPI",
    "EventsAPI",
    "ListAPI",
    "ListsAPI",
    "MemberAPI",
    "MembersAPI",
    "MessageAPI",
    "MessagesAPI",
    "ResourceAPI",
    "RouteAPI",
    "RoutesAPI",
    "StatsAPI",
    "SuppressionAPI",
    "SuppressionsAPI",
    "TagAPI",
    "TagsAPI",
]
