"""
Renewal request domain events.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from core.domain.events import DomainEvent


class RenewalRequested(DomainEvent):
    """Event raised when an organization asks for a renewal."""

    payload_fields = ("request_id", "requester_org_id", "device_ids")

    def __init__(
        self,
        request_id: uuid.UUID,
        requester_org_id: uuid.UUID,
        device_ids: List[uuid.UUID],
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(aggregate_id=str(request_id), actor=actor, occurred_at=occurred_at)
        self.request_id = request_id
        self.requester_org_id = requester_org_id
        self.device_ids = device_ids


class RenewalQuoted(DomainEvent):
    """Event raised when a reseller answers a request with a quote."""

    payload_fields = ("request_id", "response_message")

    def __init__(
        self,
        request_id: uuid.UUID,
        response_message: str,
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(aggregate_id=str(request_id), actor=actor, occurred_at=occurred_at)
        self.request_id = request_id
        self.response_message = response_message


class RenewalApproved(DomainEvent):
    """Event raised when a request is approved and its devices renewed."""

    payload_fields = ("request_id", "renewed_device_ids")

    def __init__(
        self,
        request_id: uuid.UUID,
        renewed_device_ids: List[uuid.UUID],
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(aggregate_id=str(request_id), actor=actor, occurred_at=occurred_at)
        self.request_id = request_id
        self.renewed_device_ids = renewed_device_ids


class RenewalRejected(DomainEvent):
    """Event raised when a request is rejected."""

    payload_fields = ("request_id",)

    def __init__(
        self,
        request_id: uuid.UUID,
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(aggregate_id=str(request_id), actor=actor, occurred_at=occurred_at)
        self.request_id = request_id
