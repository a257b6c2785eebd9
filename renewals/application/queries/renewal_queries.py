"""
Renewal request queries.
"""
import uuid
from dataclasses import dataclass

from core.domain.value_objects import Actor


@dataclass
class ListRenewalRequestsQuery:
    """Query for the requests an approver or reseller can act on."""

    actor: Actor


@dataclass
class GetQuoteQuery:
    """Query for the quote attached to a request."""

    actor: Actor
    request_id: uuid.UUID
