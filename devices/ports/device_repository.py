"""
Device repository port (interface).

This defines the contract for device persistence operations.
Implementations are in the infrastructure layer.
"""
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from core.domain.value_objects import DeviceStatus
from devices.domain.device import Device
from devices.domain.lifecycle import SweepRule


class DeviceRepository(ABC):
    """
    Abstract repository for Device entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    def save(self, device: Device) -> Device:
        """
        Save a device entity.

        Args:
            device: Device entity to save

        Returns:
            Saved device entity
        """

    @abstractmethod
    def find_by_id(self, device_id: uuid.UUID, for_update: bool = False) -> Optional[Device]:
        """
        Find a device by ID.

        Args:
            device_id: Device UUID
            for_update: Lock the row for the rest of the transaction

        Returns:
            Device entity or None if not found
        """

    @abstractmethod
    def find_by_org_ids(
        self,
        org_ids: Iterable[uuid.UUID],
        statuses: Optional[Iterable[DeviceStatus]] = None,
        device_ids: Optional[Iterable[uuid.UUID]] = None,
        for_update: bool = False,
    ) -> List[Device]:
        """
        List devices owned by a set of organizations, by ascending expiry.

        Args:
            org_ids: Owning organization UUIDs
            statuses: Optional status filter
            device_ids: Optional device ID filter
            for_update: Lock the rows for the rest of the transaction

        Returns:
            List of Device entities
        """

    @abstractmethod
    def find_expiring_between(
        self, org_ids: Iterable[uuid.UUID], start: datetime, end: datetime
    ) -> List[Device]:
        """
        List devices whose expiry falls in ``[start, end]``.

        Args:
            org_ids: Owning organization UUIDs
            start: Inclusive lower bound
            end: Inclusive upper bound

        Returns:
            List of Device entities
        """

    @abstractmethod
    def count_by_status(self, org_ids: Iterable[uuid.UUID]) -> Dict[DeviceStatus, int]:
        """
        Count devices per status within a set of organizations.

        Args:
            org_ids: Owning organization UUIDs

        Returns:
            Mapping with an entry for every DeviceStatus
        """

    @abstractmethod
    def apply_sweep_rule(self, rule: SweepRule, now: datetime) -> int:
        """
        Apply one lifecycle rule to every matching device.

        Args:
            rule: Sweep rule
            now: Reference instant

        Returns:
            Number of devices updated
        """
