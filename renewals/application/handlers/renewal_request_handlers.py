"""
Renewal request handlers.

Handlers for creating, quoting, approving and rejecting renewal
requests and for the approver and quote read paths. Handlers are
synchronous because a Django atomic block cannot span async code.
"""
import logging
import uuid
from typing import List, Optional

from django.utils import timezone

from core.domain.dates import Clock
from core.domain.exceptions import (
    ActorKindNotAllowedError,
    DomainValidationError,
    NotManagedError,
    OrganizationNotFoundError,
    QuoteNotFoundError,
    RenewalRequestNotFoundError,
)
from core.domain.value_objects import Actor, DeviceStatus, OrgKind, RequestStatus
from core.infrastructure.database import DjangoUnitOfWork
from core.infrastructure.events import event_bus
from core.ports.unit_of_work import UnitOfWork
from devices.application.dto.device_dto import DeviceDTO
from devices.application.handlers.device_renewal_handlers import publish_device_renewals
from devices.application.services.scoped_batch_mutator import ScopedBatchMutator
from devices.ports.device_repository import DeviceRepository
from organizations.domain.organization import Organization
from organizations.ports.organization_repository import OrganizationRepository
from renewals.application.commands.renewal_commands import (
    ApproveRenewalRequestCommand,
    CreateRenewalRequestCommand,
    RejectRenewalRequestCommand,
    RespondWithQuoteCommand,
)
from renewals.application.dto.renewal_request_dto import (
    ApprovalResultDTO,
    QuoteDTO,
    RenewalRequestDTO,
)
from renewals.application.queries.renewal_queries import GetQuoteQuery, ListRenewalRequestsQuery
from renewals.domain.events import (
    RenewalApproved,
    RenewalQuoted,
    RenewalRejected,
    RenewalRequested,
)
from renewals.domain.renewal_request import RenewalRequest
from renewals.domain.services import RenewalDecisionPolicy
from renewals.ports.renewal_request_repository import RenewalRequestRepository

logger = logging.getLogger(__name__)

NEEDS_RENEWAL = [status for status in DeviceStatus if status.needs_renewal]


class _RenewalRequestHandler:
    """Shared wiring for the renewal request handlers."""

    def __init__(
        self,
        renewal_request_repository: RenewalRequestRepository,
        organization_repository: OrganizationRepository,
        unit_of_work: Optional[UnitOfWork] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize handler with repositories."""
        self.renewal_request_repository = renewal_request_repository
        self.organization_repository = organization_repository
        self.unit_of_work = unit_of_work or DjangoUnitOfWork()
        self.clock = clock or timezone.now

    def _get_request(self, request_id: uuid.UUID, for_update: bool = False) -> RenewalRequest:
        request = self.renewal_request_repository.find_by_id(request_id, for_update=for_update)
        if request is None:
            raise RenewalRequestNotFoundError(f"Request {request_id} not found")
        return request

    def _get_org(self, org_id: uuid.UUID) -> Organization:
        organization = self.organization_repository.find_by_id(org_id)
        if organization is None:
            raise OrganizationNotFoundError(f"Organization {org_id} not found")
        return organization

    @staticmethod
    def _require_kind(actor: Actor, kind: OrgKind, message: str) -> None:
        if actor.kind != kind:
            logger.warning("Denied renewal request action for %s: %s", actor, message)
            raise ActorKindNotAllowedError(message)


class CreateRenewalRequestHandler(_RenewalRequestHandler):
    """Handler for CreateRenewalRequestCommand."""

    def handle(self, command: CreateRenewalRequestCommand) -> RenewalRequestDTO:
        """
        Handle create renewal request command.

        Args:
            command: CreateRenewalRequestCommand

        Returns:
            RenewalRequestDTO of the new PENDING request

        Raises:
            OrganizationNotFoundError: If the actor's organization is unknown
            ActorKindNotAllowedError: If the organization renews directly
        """
        now = self.clock()
        with self.unit_of_work:
            requester = self._get_org(command.actor.org_id)
            if not requester.can_request_renewal():
                raise ActorKindNotAllowedError(
                    "Only UNIT or reseller managed TOP organizations can request renewals."
                )
            request = self.renewal_request_repository.save(
                RenewalRequest.create(
                    requester_org_id=requester.id,
                    device_ids=command.device_ids,
                    notes=command.notes,
                    created_at=now,
                )
            )

        event_bus.publish(
            RenewalRequested(
                request_id=request.id,
                requester_org_id=request.requester_org_id,
                device_ids=list(request.device_ids),
                actor=str(command.actor),
                occurred_at=now,
            )
        )
        return RenewalRequestDTO.from_entity(request, requester_org_name=requester.name)


class RespondWithQuoteHandler(_RenewalRequestHandler):
    """Handler for RespondWithQuoteCommand."""

    def handle(self, command: RespondWithQuoteCommand) -> RenewalRequestDTO:
        """
        Handle respond with quote command.

        Args:
            command: RespondWithQuoteCommand

        Returns:
            RenewalRequestDTO of the QUOTED request

        Raises:
            ActorKindNotAllowedError: If the actor is not a RESELLER
            DomainValidationError: If the quote document is empty
            RenewalRequestNotFoundError: If the request does not exist
            NotManagedError: If the requester is not the reseller's client
            InvalidRequestStatusError: If the request is not PENDING
        """
        self._require_kind(command.actor, OrgKind.RESELLER, "Only RESELLER organizations can quote requests.")
        if not command.quote_pdf_data:
            raise DomainValidationError("quote_pdf_data is required.")

        now = self.clock()
        with self.unit_of_work:
            request = self._get_request(command.request_id, for_update=True)
            requester = self._get_org(request.requester_org_id)
            if requester.reseller_id != command.actor.org_id:
                raise NotManagedError("You do not manage this client.")
            quoted = self.renewal_request_repository.save(
                request.quote(command.quote_pdf_data, command.response_message, now)
            )

        event_bus.publish(
            RenewalQuoted(
                request_id=quoted.id,
                response_message=quoted.response_message,
                actor=str(command.actor),
                occurred_at=now,
            )
        )
        return RenewalRequestDTO.from_entity(quoted, requester_org_name=requester.name)


class ApproveRenewalRequestHandler(_RenewalRequestHandler):
    """Handler for ApproveRenewalRequestCommand."""

    def __init__(
        self,
        renewal_request_repository: RenewalRequestRepository,
        organization_repository: OrganizationRepository,
        device_repository: DeviceRepository,
        unit_of_work: Optional[UnitOfWork] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize handler with repositories."""
        super().__init__(renewal_request_repository, organization_repository, unit_of_work, clock)
        self.mutator = ScopedBatchMutator(device_repository)

    def handle(self, command: ApproveRenewalRequestCommand) -> ApprovalResultDTO:
        """
        Handle approve renewal request command.

        The status flip and every device renewal commit together. An
        organization-wide request renews the requester's devices that
        need renewal; an explicit request renews exactly the listed
        devices the requester owns, whatever their status.

        Args:
            command: ApproveRenewalRequestCommand

        Returns:
            ApprovalResultDTO with the renewed devices

        Raises:
            ActorKindNotAllowedError: If the actor is not a TOP
            RenewalRequestNotFoundError: If the request does not exist
            NotManagedError: If the TOP has no say over the request
            InvalidRequestStatusError: If the request cannot be approved
        """
        self._require_kind(command.actor, OrgKind.TOP, "Only TOP organizations can approve requests.")

        now = self.clock()
        with self.unit_of_work:
            request = self._get_request(command.request_id, for_update=True)
            requester = self._get_org(request.requester_org_id)
            RenewalDecisionPolicy.check(command.actor.org_id, requester, request)

            approved = self.renewal_request_repository.save(request.approve())
            if request.is_org_wide:
                changes = self.mutator.apply(
                    {requester.id},
                    lambda device: device.renew_for_approval(now),
                    statuses=NEEDS_RENEWAL,
                )
            else:
                changes = self.mutator.apply(
                    {requester.id},
                    lambda device: device.renew_for_approval(now),
                    device_ids=request.device_ids,
                )

        logger.info("Approved request %s, renewed %d device(s)", approved.id, len(changes))
        publish_device_renewals(changes, "request_approval", command.actor, now)
        event_bus.publish(
            RenewalApproved(
                request_id=approved.id,
                renewed_device_ids=[after.id for _before, after in changes],
                actor=str(command.actor),
                occurred_at=now,
            )
        )
        return ApprovalResultDTO(
            request=RenewalRequestDTO.from_entity(approved, requester_org_name=requester.name),
            renewed_count=len(changes),
            renewed=[DeviceDTO.from_entity(after) for _before, after in changes],
        )


class RejectRenewalRequestHandler(_RenewalRequestHandler):
    """Handler for RejectRenewalRequestCommand."""

    def handle(self, command: RejectRenewalRequestCommand) -> RenewalRequestDTO:
        """
        Handle reject renewal request command. Devices are not touched.

        Args:
            command: RejectRenewalRequestCommand

        Returns:
            RenewalRequestDTO of the REJECTED request

        Raises:
            ActorKindNotAllowedError: If the actor is not a TOP
            RenewalRequestNotFoundError: If the request does not exist
            NotManagedError: If the TOP has no say over the request
            InvalidRequestStatusError: If the request cannot be rejected
        """
        self._require_kind(command.actor, OrgKind.TOP, "Only TOP organizations can reject requests.")

        now = self.clock()
        with self.unit_of_work:
            request = self._get_request(command.request_id, for_update=True)
            requester = self._get_org(request.requester_org_id)
            RenewalDecisionPolicy.check(command.actor.org_id, requester, request)
            rejected = self.renewal_request_repository.save(request.reject())

        event_bus.publish(
            RenewalRejected(request_id=rejected.id, actor=str(command.actor), occurred_at=now)
        )
        return RenewalRequestDTO.from_entity(rejected, requester_org_name=requester.name)


class ListRenewalRequestsHandler(_RenewalRequestHandler):
    """Handler for ListRenewalRequestsQuery."""

    def handle(self, query: ListRenewalRequestsQuery) -> List[RenewalRequestDTO]:
        """
        Handle list renewal requests query.

        A TOP sees every request of its UNITs and its own; a RESELLER sees
        the PENDING requests of its clients.

        Args:
            query: ListRenewalRequestsQuery

        Returns:
            RenewalRequestDTOs, newest first

        Raises:
            ActorKindNotAllowedError: If the actor is a UNIT
        """
        actor = query.actor
        if actor.kind == OrgKind.TOP:
            requester_ids = {actor.org_id, *self.organization_repository.find_ids_by_parent([actor.org_id])}
            statuses = None
        elif actor.kind == OrgKind.RESELLER:
            requester_ids = {org.id for org in self.organization_repository.find_by_reseller(actor.org_id)}
            statuses = [RequestStatus.PENDING]
        else:
            raise ActorKindNotAllowedError("Only TOP or RESELLER organizations can view requests.")

        if not requester_ids:
            return []
        requests = self.renewal_request_repository.find_by_requester_ids(requester_ids, statuses=statuses)
        names = {org.id: org.name for org in self.organization_repository.find_by_ids(requester_ids)}
        return [
            RenewalRequestDTO.from_entity(request, requester_org_name=names.get(request.requester_org_id))
            for request in requests
        ]


class GetQuoteHandler(_RenewalRequestHandler):
    """Handler for GetQuoteQuery."""

    def handle(self, query: GetQuoteQuery) -> QuoteDTO:
        """
        Handle get quote query.

        Args:
            query: GetQuoteQuery

        Returns:
            QuoteDTO

        Raises:
            RenewalRequestNotFoundError: If the request does not exist
            NotManagedError: If the actor may not read the quote
            QuoteNotFoundError: If no quote has been produced yet
        """
        request = self._get_request(query.request_id)
        requester = self._get_org(request.requester_org_id)
        if not RenewalDecisionPolicy.can_read_quote(query.actor.org_id, requester):
            raise NotManagedError("You cannot view this quote.")
        if not request.has_quote:
            raise QuoteNotFoundError("No quote has been produced for this request.")
        return QuoteDTO(
            request_id=request.id,
            quote_pdf_data=request.quote_pdf_data,
            response_message=request.response_message,
            responded_at=request.responded_at,
        )
