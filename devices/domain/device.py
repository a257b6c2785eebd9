"""
Device domain entity.

A device carries a time-bounded license. Its status, expiry date and
grace token are only changed by the lifecycle sweep and by renewal
operations.
"""
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional

from core.domain.dates import add_years
from core.domain.exceptions import InvalidDeviceStatusError
from core.domain.value_objects import DeviceStatus

GRACE_PERIOD = timedelta(days=7)


@dataclass(frozen=True)
class Device:
    """
    Device domain entity.

    This is an immutable value object with business logic; every
    transition returns a new instance.
    """

    id: uuid.UUID
    organization_id: uuid.UUID
    name: str
    serial_number: str
    location: str
    status: DeviceStatus
    expiry_date: datetime
    grace_token_expiry: Optional[datetime] = None
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate device entity."""
        if not self.organization_id:
            raise ValueError("Organization ID is required")
        if not self.name or len(self.name.strip()) == 0:
            raise ValueError("Device name cannot be empty")
        if not self.serial_number:
            raise ValueError("Serial number is required")
        if self.expiry_date is None:
            raise ValueError("Expiry date is required")

    @classmethod
    def create(
        cls,
        organization_id: uuid.UUID,
        name: str,
        serial_number: str,
        expiry_date: datetime,
        location: str = "",
        latitude: Optional[Decimal] = None,
        longitude: Optional[Decimal] = None,
        device_id: Optional[uuid.UUID] = None,
    ) -> "Device":
        """
        Provision a new Device entity. New devices start ACTIVE.

        Args:
            organization_id: Owning organization UUID
            name: Display name
            serial_number: Hardware serial number
            expiry_date: License expiry instant
            location: Physical location description
            latitude: Optional latitude
            longitude: Optional longitude
            device_id: Optional UUID (generated if not provided)

        Returns:
            Device entity instance
        """
        return cls(
            id=device_id or uuid.uuid4(),
            organization_id=organization_id,
            name=name,
            serial_number=serial_number,
            location=location,
            status=DeviceStatus.ACTIVE,
            expiry_date=expiry_date,
            grace_token_expiry=None,
            latitude=latitude,
            longitude=longitude,
            created_at=datetime.now(timezone.utc),
        )

    def extend(self, years: int = 1) -> "Device":
        """
        Renew by stacking whole years onto the current expiry date.

        Args:
            years: Number of years to add

        Returns:
            New ACTIVE Device instance with the grace token cleared
        """
        if years < 1:
            raise ValueError("Renewal must be at least one year")
        return self.renew_until(add_years(self.expiry_date, years))

    def renew_until(self, new_expiry: datetime) -> "Device":
        """
        Set an explicit expiry date and reactivate the device.

        Args:
            new_expiry: New expiry instant

        Returns:
            New ACTIVE Device instance with the grace token cleared
        """
        return replace(
            self,
            status=DeviceStatus.ACTIVE,
            expiry_date=new_expiry,
            grace_token_expiry=None,
        )

    def renew_for_approval(self, now: datetime) -> "Device":
        """
        Renew one year as part of an approved renewal request.

        Lapsed devices (EXPIRED, SUSPENDED) restart from the approval
        instant and forfeit the overdue time; others stack onto their
        current expiry.

        Args:
            now: Approval instant

        Returns:
            Renewed Device instance
        """
        if self.status.is_lapsed:
            return self.renew_until(add_years(now, 1))
        return self.extend(1)

    def issue_grace_token(self, now: datetime) -> "Device":
        """
        Grant a seven day grace token. Only EXPIRED devices qualify.

        Args:
            now: Issue instant

        Returns:
            New Device instance with the grace token set

        Raises:
            InvalidDeviceStatusError: If the device is not EXPIRED
        """
        if self.status != DeviceStatus.EXPIRED:
            raise InvalidDeviceStatusError(
                "Grace period can only be issued to EXPIRED devices."
            )
        return replace(self, grace_token_expiry=now + GRACE_PERIOD)

    def with_status(self, status: DeviceStatus) -> "Device":
        """Return a copy with a different status."""
        return replace(self, status=status)

    def with_grace_token(self, grace_token_expiry: Optional[datetime]) -> "Device":
        """Return a copy with a different grace token expiry."""
        return replace(self, grace_token_expiry=grace_token_expiry)
