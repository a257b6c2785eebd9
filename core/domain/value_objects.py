"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
import uuid
from abc import ABC
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """


class OrgKind(Enum):
    """Organization kind value object."""

    TOP = "TOP"
    UNIT = "UNIT"
    RESELLER = "RESELLER"

    def __str__(self) -> str:
        """Return kind as string."""
        return self.value


class BillingMode(Enum):
    """Billing mode of an organization."""

    SELF_PAY = "SELF_PAY"
    RESELLER_ONLY = "RESELLER_ONLY"

    def __str__(self) -> str:
        """Return billing mode as string."""
        return self.value


class DeviceStatus(Enum):
    """Device license status value object."""

    ACTIVE = "ACTIVE"
    EXPIRING_SOON = "EXPIRING_SOON"
    EXPIRED = "EXPIRED"
    SUSPENDED = "SUSPENDED"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value

    @property
    def needs_renewal(self) -> bool:
        """Statuses picked up by an organization-wide renewal."""
        return self in (
            DeviceStatus.EXPIRING_SOON,
            DeviceStatus.EXPIRED,
            DeviceStatus.SUSPENDED,
        )

    @property
    def is_lapsed(self) -> bool:
        """Statuses whose renewal restarts from the approval instant."""
        return self in (DeviceStatus.EXPIRED, DeviceStatus.SUSPENDED)


class RequestStatus(Enum):
    """Renewal request status value object."""

    PENDING = "PENDING"
    QUOTED = "QUOTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value

    @property
    def is_terminal(self) -> bool:
        """APPROVED and REJECTED admit no further transition."""
        return self in (RequestStatus.APPROVED, RequestStatus.REJECTED)


_REQUEST_TRANSITIONS = {
    RequestStatus.PENDING: {
        RequestStatus.QUOTED,
        RequestStatus.APPROVED,
        RequestStatus.REJECTED,
    },
    RequestStatus.QUOTED: {RequestStatus.APPROVED, RequestStatus.REJECTED},
    RequestStatus.APPROVED: set(),
    RequestStatus.REJECTED: set(),
}


def can_transition(current: RequestStatus, target: RequestStatus) -> bool:
    """
    Check whether a renewal request may move from one status to another.

    Args:
        current: Current request status
        target: Desired request status

    Returns:
        True if the transition is allowed
    """
    return target in _REQUEST_TRANSITIONS[current]


@dataclass(frozen=True)
class Actor(ValueObject):
    """
    The authenticated organization performing an operation.

    Identity verification happens at the transport layer; the core
    only trusts the (org_id, kind) pair it is handed.
    """

    org_id: uuid.UUID
    kind: OrgKind

    def __post_init__(self):
        """Validate actor."""
        if not self.org_id:
            raise ValueError("Actor organization ID is required")
        if not isinstance(self.kind, OrgKind):
            raise ValueError(f"Invalid organization kind: {self.kind}")

    def __str__(self) -> str:
        """Return actor as string."""
        return f"{self.kind.value}:{self.org_id}"
