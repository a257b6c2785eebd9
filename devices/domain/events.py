"""
Device domain events.

Domain events represent something that happened in the device domain.
"""

import uuid
from datetime import datetime
from typing import Dict, Optional

from core.domain.events import DomainEvent


class DeviceRenewed(DomainEvent):
    """Event raised when a device license is renewed or co-termed."""

    payload_fields = ("device_id", "operation", "previous_expiry", "new_expiry")

    def __init__(
        self,
        device_id: uuid.UUID,
        operation: str,
        previous_expiry: datetime,
        new_expiry: datetime,
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize DeviceRenewed event.

        Args:
            device_id: Device UUID
            operation: bulk_renew, co_term or request_approval
            previous_expiry: Expiry before the renewal
            new_expiry: Expiry after the renewal
            actor: Acting organization
            occurred_at: When the event occurred
        """
        super().__init__(aggregate_id=str(device_id), actor=actor, occurred_at=occurred_at)
        self.device_id = device_id
        self.operation = operation
        self.previous_expiry = previous_expiry
        self.new_expiry = new_expiry


class GraceTokenIssued(DomainEvent):
    """Event raised when an operator grants a grace token."""

    payload_fields = ("device_id", "grace_token_expiry")

    def __init__(
        self,
        device_id: uuid.UUID,
        grace_token_expiry: datetime,
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize GraceTokenIssued event.

        Args:
            device_id: Device UUID
            grace_token_expiry: When the grace token runs out
            actor: Acting organization
            occurred_at: When the event occurred
        """
        super().__init__(aggregate_id=str(device_id), actor=actor, occurred_at=occurred_at)
        self.device_id = device_id
        self.grace_token_expiry = grace_token_expiry


class LifecycleSweepCompleted(DomainEvent):
    """Event raised after a lifecycle sweep has committed."""

    payload_fields = ("counts",)

    def __init__(
        self,
        swept_at: datetime,
        counts: Dict[str, int],
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LifecycleSweepCompleted event.

        Args:
            swept_at: Reference instant of the sweep
            counts: Devices touched per rule
            occurred_at: When the event occurred
        """
        super().__init__(aggregate_id=swept_at.isoformat(), occurred_at=occurred_at)
        self.swept_at = swept_at
        self.counts = counts
