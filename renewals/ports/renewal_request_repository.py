"""
Renewal request repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, List, Optional

from core.domain.value_objects import RequestStatus
from renewals.domain.renewal_request import RenewalRequest


class RenewalRequestRepository(ABC):
    """Abstract repository for RenewalRequest entities."""

    @abstractmethod
    def save(self, renewal_request: RenewalRequest) -> RenewalRequest:
        """
        Save a renewal request entity.

        Args:
            renewal_request: RenewalRequest entity to save

        Returns:
            Saved RenewalRequest entity
        """

    @abstractmethod
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

    @abstractmethod
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

    @abstractmethod
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
