"""
Django implementation of RenewalRequestRepository port.
"""
import uuid
from datetime import datetime
from typing import Iterable, List, Optional

from core.domain.value_objects import RequestStatus
from renewals.domain.renewal_request import RenewalRequest
from renewals.infrastructure.models import RenewalRequest as RenewalRequestModel
from renewals.ports.renewal_request_repository import RenewalRequestRepository


class DjangoRenewalRequestRepository(RenewalRequestRepository):
    """Django ORM implementation of RenewalRequestRepository."""

    def _to_domain(self, model: RenewalRequestModel) -> RenewalRequest:
        """Convert Django model to domain entity."""
        return RenewalRequest(
            id=model.id,
            requester_org_id=model.requester_id,
            status=RequestStatus(model.status),
            device_ids=tuple(uuid.UUID(str(value)) for value in model.device_ids or []),
            notes=model.notes,
            quote_pdf_data=model.quote_pdf_data,
            response_message=model.response_message,
            responded_at=model.responded_at,
            created_at=model.created_at,
        )

    def save(self, renewal_request: RenewalRequest) -> RenewalRequest:
        """
        Save a renewal request entity.

        Args:
            renewal_request: RenewalRequest entity to save

        Returns:
            Saved RenewalRequest entity
        """
        # pylint: disable=no-member
        model, _created = RenewalRequestModel.objects.update_or_create(
            id=renewal_request.id,
            defaults={
                "requester_id": renewal_request.requester_org_id,
                "device_ids": [str(device_id) for device_id in renewal_request.device_ids],
                "notes": renewal_request.notes,
                "status": renewal_request.status.value,
                "quote_pdf_data": renewal_request.quote_pdf_data,
                "response_message": renewal_request.response_message,
                "responded_at": renewal_request.responded_at,
                "created_at": renewal_request.created_at,
            },
        )
        return self._to_domain(model)

    def find_by_id(
        self, request_id: uuid.UUID, for_update: bool = False
    ) -> Optional[RenewalRequest]:
        """
        Find a renewal request by ID.

        Args:
            request_id: Request UUID
            for_update: Lock the row for the rest of the transaction

        Returns:
            RenewalRequest entity or None if not found
        """
        # pylint: disable=no-member
        queryset = RenewalRequestModel.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        model = queryset.filter(id=request_id).first()
        return self._to_domain(model) if model else None

    def find_by_requester_ids(
        self,
        requester_org_ids: Iterable[uuid.UUID],
        statuses: Optional[Iterable[RequestStatus]] = None,
    ) -> List[RenewalRequest]:
        """
        List requests raised by a set of organizations, newest first.

        Args:
            requester_org_ids: Requesting organization UUIDs
            statuses: Optional status filter

        Returns:
            List of RenewalRequest entities
        """
        # pylint: disable=no-member
        queryset = RenewalRequestModel.objects.filter(requester_id__in=list(requester_org_ids))
        if statuses is not None:
            queryset = queryset.filter(status__in=[status.value for status in statuses])
        return [self._to_domain(model) for model in queryset.order_by("-created_at")]

    def find_pending_since(
        self, requester_org_ids: Iterable[uuid.UUID], since: datetime
    ) -> List[RenewalRequest]:
        """
        List PENDING requests created after ``since``.

        Args:
            requester_org_ids: Requesting organization UUIDs
            since: Exclusive lower creation bound

        Returns:
            List of RenewalRequest entities
        """
        # pylint: disable=no-member
        queryset = RenewalRequestModel.objects.filter(
            requester_id__in=list(requester_org_ids),
            status=RequestStatus.PENDING.value,
            created_at__gt=since,
        )
        return [self._to_domain(model) for model in queryset]
