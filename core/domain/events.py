"""
Domain events base classes and infrastructure.

Domain events represent something that happened in the domain.
They are used for decoupling modules and enabling event-driven architecture.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class DomainEvent:
    """
    Base class for all domain events.

    Subclasses add their own payload attributes and list them in
    ``payload_fields`` so the event can be serialized.
    """

    payload_fields: tuple = ()

    def __init__(
        self,
        aggregate_id: str,
        actor: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize domain event.

        Args:
            aggregate_id: Identifier of the aggregate the event is about
            actor: Who caused the event (``KIND:org_id`` or ``system``)
            occurred_at: When the event occurred
        """
        self.event_id = uuid.uuid4()
        self.occurred_at = occurred_at or datetime.now(timezone.utc)
        self.aggregate_id = aggregate_id
        self.actor = actor or "system"

    @property
    def event_type(self) -> str:
        """Event type name."""
        return self.__class__.__name__

    def payload(self) -> Dict[str, Any]:
        """Return the event specific attributes as JSON-safe values."""
        data = {}
        for name in self.payload_fields:
            value = getattr(self, name)
            if isinstance(value, (uuid.UUID, datetime)):
                value = value.isoformat() if isinstance(value, datetime) else str(value)
            elif isinstance(value, (list, tuple)):
                value = [str(item) for item in value]
            data[name] = value
        return data

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        return {
            "event_id": str(self.event_id),
            "occurred_at": self.occurred_at.isoformat(),
            "aggregate_id": self.aggregate_id,
            "event_type": self.event_type,
            "actor": self.actor,
            "data": self.payload(),
        }


class EventHandler(ABC):
    """
    Base class for event handlers.

    Event handlers process domain events for side effects.
    """

    @abstractmethod
    def handle(self, event: DomainEvent) -> None:
        """
        Handle a domain event.

        Args:
            event: The domain event to handle
        """


class EventBus(ABC):
    """
    Abstract event bus for publishing and subscribing to domain events.
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """
        Publish a domain event.

        Args:
            event: The domain event to publish
        """

    @abstractmethod
    def subscribe(self, event_type: type, handler: EventHandler) -> None:
        """
        Subscribe to a domain event type.

        Args:
            event_type: The type of event to subscribe to
            handler: The handler to call when event is published
        """
