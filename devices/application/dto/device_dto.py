"""
Device DTOs for API responses.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from devices.domain.device import Device


@dataclass
class DeviceDTO:
    """DTO for device information."""

    id: uuid.UUID
    organization_id: uuid.UUID
    name: str
    serial_number: str
    location: str
    status: str
    expiry_date: datetime
    grace_token_expiry: Optional[datetime] = None
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    organization_name: Optional[str] = None
    active_renewal_request: bool = False

    @classmethod
    def from_entity(cls, device: Device, **extra) -> "DeviceDTO":
        """Build a DTO from a Device entity."""
        return cls(
            id=device.id,
            organization_id=device.organization_id,
            name=device.name,
            serial_number=device.serial_number,
            location=device.location,
            status=device.status.value,
            expiry_date=device.expiry_date,
            grace_token_expiry=device.grace_token_expiry,
            latitude=device.latitude,
            longitude=device.longitude,
            **extra,
        )


@dataclass
class BatchRenewalResultDTO:
    """DTO for bulk renew and co-term responses."""

    updated_count: int
    updated: List[DeviceDTO] = field(default_factory=list)


@dataclass
class TimelineEntryDTO:
    """Number of devices expiring in one calendar month."""

    month: str
    count: int


@dataclass
class DashboardStatsDTO:
    """DTO for dashboard statistics."""

    counts: Dict[str, int]
    active: int
    warning: int
    critical: int
    expired: int
    suspended: int
    timeline: List[TimelineEntryDTO] = field(default_factory=list)


@dataclass
class ResellerClientDTO:
    """DTO for one organization managed by a reseller."""

    id: uuid.UUID
    name: str
    total_devices: int
    at_risk: int
