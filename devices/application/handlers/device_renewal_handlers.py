"""
Device renewal handlers.

Handlers for bulk renew, co-term and grace token commands. Each runs
its scope check and every device write in one unit of work and
publishes events once that unit of work has committed. Handlers are
synchronous because a Django atomic block cannot span async code.
"""
import logging
from datetime import datetime
from typing import Iterable, List, Optional

from django.utils import timezone

from core.domain.dates import Clock, end_of_year
from core.domain.exceptions import (
    ActorKindNotAllowedError,
    DeviceNotFoundError,
    DomainValidationError,
    NotManagedError,
)
from core.domain.value_objects import Actor, OrgKind
from core.infrastructure.database import DjangoUnitOfWork
from core.infrastructure.events import event_bus
from core.ports.unit_of_work import UnitOfWork
from devices.application.commands.bulk_renew import MAX_RENEWAL_YEARS, BulkRenewCommand
from devices.application.commands.co_term import CoTermCommand
from devices.application.commands.issue_grace_token import IssueGraceTokenCommand
from devices.application.dto.device_dto import BatchRenewalResultDTO, DeviceDTO
from devices.application.services.scoped_batch_mutator import DeviceChange, ScopedBatchMutator
from devices.domain.events import DeviceRenewed, GraceTokenIssued
from devices.ports.device_repository import DeviceRepository
from organizations.domain.services import OrgHierarchyResolver
from organizations.ports.organization_repository import OrganizationRepository

logger = logging.getLogger(__name__)


def publish_device_renewals(
    changes: Iterable[DeviceChange], operation: str, actor: Actor, now: datetime
) -> None:
    """Publish one DeviceRenewed event per updated device."""
    for before, after in changes:
        event_bus.publish(
            DeviceRenewed(
                device_id=after.id,
                operation=operation,
                previous_expiry=before.expiry_date,
                new_expiry=after.expiry_date,
                actor=str(actor),
                occurred_at=now,
            )
        )


class _DeviceCommandHandler:
    """Shared wiring for the device command handlers."""

    allowed_kinds = frozenset()
    denied_message = "Permission denied."

    def __init__(
        self,
        device_repository: DeviceRepository,
        organization_repository: OrganizationRepository,
        unit_of_work: Optional[UnitOfWork] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize handler with repositories."""
        self.device_repository = device_repository
        self.resolver = OrgHierarchyResolver(organization_repository)
        self.mutator = ScopedBatchMutator(device_repository)
        self.unit_of_work = unit_of_work or DjangoUnitOfWork()
        self.clock = clock or timezone.now

    def _check_actor(self, actor: Actor) -> None:
        if actor.kind not in self.allowed_kinds:
            logger.warning("Denied %s for %s", self.__class__.__name__, actor)
            raise ActorKindNotAllowedError(self.denied_message)

    @staticmethod
    def _require_device_ids(device_ids: List) -> None:
        if not device_ids:
            raise DomainValidationError("device_ids must contain at least one device ID.")


class BulkRenewHandler(_DeviceCommandHandler):
    """Handler for BulkRenewCommand."""

    allowed_kinds = frozenset({OrgKind.TOP, OrgKind.RESELLER})

    def handle(self, command: BulkRenewCommand) -> BatchRenewalResultDTO:
        """
        Handle bulk renew command.

        Devices that do not exist or lie outside the actor's managed
        organizations are skipped and not reported.

        Args:
            command: BulkRenewCommand

        Returns:
            BatchRenewalResultDTO with the devices actually renewed

        Raises:
            ActorKindNotAllowedError: If the actor is a UNIT
            DomainValidationError: If no device IDs are given, years is out of
                range or a renewed expiry would pass the last representable year
        """
        self._check_actor(command.actor)
        self._require_device_ids(command.device_ids)
        if not 1 <= command.years <= MAX_RENEWAL_YEARS:
            raise DomainValidationError(f"years must be between 1 and {MAX_RENEWAL_YEARS}.")

        def extend(device):
            try:
                return device.extend(command.years)
            except ValueError as exc:
                raise DomainValidationError(
                    f"Device {device.id} cannot be renewed by {command.years} year(s): {exc}"
                ) from exc

        with self.unit_of_work:
            scope = self.resolver.resolve_for(command.actor)
            changes = self.mutator.apply(
                scope,
                extend,
                device_ids=command.device_ids,
            )

        logger.info(
            "Bulk renewed %d of %d requested device(s) for %s",
            len(changes),
            len(command.device_ids),
            command.actor,
        )
        publish_device_renewals(changes, "bulk_renew", command.actor, self.clock())
        return BatchRenewalResultDTO(
            updated_count=len(changes),
            updated=[DeviceDTO.from_entity(after) for _before, after in changes],
        )


class CoTermHandler(_DeviceCommandHandler):
    """Handler for CoTermCommand."""

    allowed_kinds = frozenset({OrgKind.TOP})
    denied_message = "Only TOP organizations can co-term devices."

    def handle(self, command: CoTermCommand) -> BatchRenewalResultDTO:
        """
        Handle co-term command.

        Args:
            command: CoTermCommand

        Returns:
            BatchRenewalResultDTO with the devices actually aligned

        Raises:
            ActorKindNotAllowedError: If the actor is not a TOP
            DomainValidationError: If no device IDs are given
        """
        self._check_actor(command.actor)
        self._require_device_ids(command.device_ids)

        now = self.clock()
        target = command.target_date or end_of_year(now)

        with self.unit_of_work:
            scope = self.resolver.resolve_for(command.actor)
            changes = self.mutator.apply(
                scope,
                lambda device: device.renew_until(target),
                device_ids=command.device_ids,
            )

        logger.info("Co-termed %d device(s) to %s", len(changes), target.isoformat())
        publish_device_renewals(changes, "co_term", command.actor, now)
        return BatchRenewalResultDTO(
            updated_count=len(changes),
            updated=[DeviceDTO.from_entity(after) for _before, after in changes],
        )


class IssueGraceTokenHandler(_DeviceCommandHandler):
    """Handler for IssueGraceTokenCommand."""

    allowed_kinds = frozenset({OrgKind.TOP})
    denied_message = "Only TOP organizations can issue grace tokens."

    def handle(self, command: IssueGraceTokenCommand) -> DeviceDTO:
        """
        Handle issue grace token command.

        Args:
            command: IssueGraceTokenCommand

        Returns:
            DeviceDTO with the new grace token expiry

        Raises:
            ActorKindNotAllowedError: If the actor is not a TOP
            DeviceNotFoundError: If the device does not exist
            NotManagedError: If the device is outside the actor's organizations
            InvalidDeviceStatusError: If the device is not EXPIRED
        """
        self._check_actor(command.actor)
        now = self.clock()

        with self.unit_of_work:
            device = self.device_repository.find_by_id(command.device_id, for_update=True)
            if device is None:
                raise DeviceNotFoundError(f"Device {command.device_id} not found")
            if not self.resolver.is_org_managed_by(
                device.organization_id, command.actor.org_id, command.actor.kind
            ):
                raise NotManagedError("You do not manage this device.")
            updated = self.device_repository.save(device.issue_grace_token(now))

        event_bus.publish(
            GraceTokenIssued(
                device_id=updated.id,
                grace_token_expiry=updated.grace_token_expiry,
                actor=str(command.actor),
                occurred_at=now,
            )
        )
        return DeviceDTO.from_entity(updated)
