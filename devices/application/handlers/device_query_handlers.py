"""
Device query handlers.

Read-only views over the devices an actor manages: dashboard counts,
the device list and the reseller client overview.
"""
import logging
import uuid
from datetime import timedelta
from typing import Dict, List, Optional, Set

from django.conf import settings
from django.utils import timezone

from core.domain.dates import Clock, add_months
from core.domain.exceptions import ActorKindNotAllowedError
from core.domain.value_objects import Actor, DeviceStatus, OrgKind
from devices.application.dto.device_dto import (
    DashboardStatsDTO,
    DeviceDTO,
    ResellerClientDTO,
    TimelineEntryDTO,
)
from devices.application.queries.dashboard import (
    GetDashboardStatsQuery,
    ListDevicesQuery,
    ListResellerClientsQuery,
)
from devices.ports.device_repository import DeviceRepository
from organizations.domain.services import OrgHierarchyResolver
from organizations.ports.organization_repository import OrganizationRepository
from renewals.ports.renewal_request_repository import RenewalRequestRepository

logger = logging.getLogger(__name__)

PENDING_REQUEST_WINDOW = timedelta(hours=6)
TIMELINE_MONTHS = 6


def _lifecycle_setting(key: str, default):
    return getattr(settings, "LICENSE_LIFECYCLE", {}).get(key, default)


class DashboardStatsHandler:
    """Handler for GetDashboardStatsQuery."""

    def __init__(
        self,
        device_repository: DeviceRepository,
        organization_repository: OrganizationRepository,
        clock: Optional[Clock] = None,
    ):
        """Initialize handler with repositories."""
        self.device_repository = device_repository
        self.resolver = OrgHierarchyResolver(organization_repository)
        self.clock = clock or timezone.now

    def handle(self, query: GetDashboardStatsQuery) -> DashboardStatsDTO:
        """
        Handle dashboard stats query.

        Args:
            query: GetDashboardStatsQuery

        Returns:
            DashboardStatsDTO with status counts and the expiry timeline
        """
        now = self.clock()
        scope = self.resolver.resolve_for(query.actor)
        counts = self.device_repository.count_by_status(scope)

        months = _lifecycle_setting("TIMELINE_MONTHS", TIMELINE_MONTHS)
        upcoming = self.device_repository.find_expiring_between(
            scope, now, add_months(now, months)
        )
        timeline: Dict[str, int] = {}
        for device in upcoming:
            label = device.expiry_date.strftime("%B %Y")
            timeline[label] = timeline.get(label, 0) + 1

        expired = counts[DeviceStatus.EXPIRED]
        suspended = counts[DeviceStatus.SUSPENDED]
        return DashboardStatsDTO(
            counts={status.value: total for status, total in counts.items()},
            active=counts[DeviceStatus.ACTIVE],
            warning=counts[DeviceStatus.EXPIRING_SOON],
            critical=expired + suspended,
            expired=expired,
            suspended=suspended,
            timeline=[TimelineEntryDTO(month=month, count=count) for month, count in timeline.items()],
        )


class ListDevicesHandler:
    """Handler for ListDevicesQuery."""

    def __init__(
        self,
        device_repository: DeviceRepository,
        organization_repository: OrganizationRepository,
        renewal_request_repository: RenewalRequestRepository,
        clock: Optional[Clock] = None,
    ):
        """Initialize handler with repositories."""
        self.device_repository = device_repository
        self.organization_repository = organization_repository
        self.renewal_request_repository = renewal_request_repository
        self.resolver = OrgHierarchyResolver(organization_repository)
        self.clock = clock or timezone.now

    def _scope(self, actor: Actor, client_id: Optional[uuid.UUID]) -> Set[uuid.UUID]:
        if actor.kind != OrgKind.RESELLER or client_id is None:
            return self.resolver.resolve_for(actor)

        client_ids = {client.id for client in self.organization_repository.find_by_reseller(actor.org_id)}
        if client_id not in client_ids:
            logger.debug("Reseller %s asked for unlinked client %s", actor.org_id, client_id)
            return set()
        return {client_id, *self.organization_repository.find_ids_by_parent([client_id])}

    def handle(self, query: ListDevicesQuery) -> List[DeviceDTO]:
        """
        Handle list devices query.

        Args:
            query: ListDevicesQuery

        Returns:
            DeviceDTOs ordered by expiry date, flagged when a recent
            PENDING renewal request names the device
        """
        scope = self._scope(query.actor, query.client_id)
        if not scope:
            return []

        devices = self.device_repository.find_by_org_ids(scope)
        names = {org.id: org.name for org in self.organization_repository.find_by_ids(scope)}

        hours = _lifecycle_setting("PENDING_REQUEST_WINDOW_HOURS", None)
        window = timedelta(hours=hours) if hours is not None else PENDING_REQUEST_WINDOW
        pending_device_ids = set()
        for request in self.renewal_request_repository.find_pending_since(scope, self.clock() - window):
            pending_device_ids.update(request.device_ids)

        return [
            DeviceDTO.from_entity(
                device,
                organization_name=names.get(device.organization_id),
                active_renewal_request=device.id in pending_device_ids,
            )
            for device in devices
        ]


class ResellerClientsHandler:
    """Handler for ListResellerClientsQuery."""

    AT_RISK = (DeviceStatus.EXPIRING_SOON, DeviceStatus.EXPIRED)

    def __init__(
        self,
        device_repository: DeviceRepository,
        organization_repository: OrganizationRepository,
    ):
        """Initialize handler with repositories."""
        self.device_repository = device_repository
        self.organization_repository = organization_repository

    def handle(self, query: ListResellerClientsQuery) -> List[ResellerClientDTO]:
        """
        Handle list reseller clients query.

        Args:
            query: ListResellerClientsQuery

        Returns:
            One ResellerClientDTO per TOP organization the reseller manages

        Raises:
            ActorKindNotAllowedError: If the actor is not a RESELLER
        """
        if query.actor.kind != OrgKind.RESELLER:
            raise ActorKindNotAllowedError("Only RESELLER organizations can list clients.")

        results = []
        for client in self.organization_repository.find_by_reseller(query.actor.org_id):
            org_ids = {client.id, *self.organization_repository.find_ids_by_parent([client.id])}
            counts = self.device_repository.count_by_status(org_ids)
            results.append(
                ResellerClientDTO(
                    id=client.id,
                    name=client.name,
                    total_devices=sum(counts.values()),
                    at_risk=sum(counts[status] for status in self.AT_RISK),
                )
            )
        return results
