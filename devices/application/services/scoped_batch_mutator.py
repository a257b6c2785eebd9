"""
Scoped batch mutation shared by bulk renew, co-term and request approval.
"""
import logging
import uuid
from typing import Callable, Iterable, List, Optional, Set, Tuple

from core.domain.value_objects import DeviceStatus
from devices.domain.device import Device
from devices.ports.device_repository import DeviceRepository

logger = logging.getLogger(__name__)

DeviceChange = Tuple[Device, Device]


class ScopedBatchMutator:
    """
    Apply one mutation to every device of a batch that lies in scope.

    Devices are read with row locks inside the caller's unit of work.
    IDs that do not exist or belong to an organization outside
    ``scope_org_ids`` are skipped without error.
    """

    def __init__(self, device_repository: DeviceRepository):
        self.device_repository = device_repository

    def apply(
        self,
        scope_org_ids: Set[uuid.UUID],
        mutate: Callable[[Device], Device],
        device_ids: Optional[Iterable[uuid.UUID]] = None,
        statuses: Optional[Iterable[DeviceStatus]] = None,
    ) -> List[DeviceChange]:
        """
        Mutate and save the selected devices.

        Args:
            scope_org_ids: Organizations whose devices may be touched
            mutate: Transition applied to each selected device
            device_ids: Explicit device IDs, or None for every device in scope
            statuses: Optional status filter

        Returns:
            List of (before, after) pairs for the devices actually updated
        """
        requested = None if device_ids is None else list(dict.fromkeys(device_ids))
        if not scope_org_ids or requested == []:
            return []

        devices = self.device_repository.find_by_org_ids(
            scope_org_ids,
            statuses=statuses,
            device_ids=requested,
            for_update=True,
        )
        if requested is not None and len(devices) < len(requested):
            logger.debug(
                "Skipped %d device(s) that are missing or out of scope",
                len(requested) - len(devices),
            )

        changes = []
        for device in devices:
            updated = self.device_repository.save(mutate(device))
            changes.append((device, updated))
        return changes
