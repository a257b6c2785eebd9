"""
Organization repository port (interface).

This defines the contract for organization persistence operations.
Implementations are in the infrastructure layer.
"""
import uuid
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from organizations.domain.organization import Organization


class OrganizationRepository(ABC):
    """
    Abstract repository for Organization entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    def save(self, organization: Organization) -> Organization:
        """
        Save an organization entity.

        Args:
            organization: Organization entity to save

        Returns:
            Saved organization entity
        """

    @abstractmethod
    def find_by_id(self, org_id: uuid.UUID) -> Optional[Organization]:
        """
        Find an organization by ID.

        Args:
            org_id: Organization UUID

        Returns:
            Organization entity or None if not found
        """

    @abstractmethod
    def find_by_ids(self, org_ids: Iterable[uuid.UUID]) -> List[Organization]:
        """
        Find organizations by a set of IDs.

        Args:
            org_ids: Organization UUIDs

        Returns:
            List of Organization entities (missing IDs are omitted)
        """

    @abstractmethod
    def find_ids_by_parent(self, parent_ids: Iterable[uuid.UUID]) -> List[uuid.UUID]:
        """
        Find the IDs of every organization whose parent is in ``parent_ids``.

        Args:
            parent_ids: Parent organization UUIDs

        Returns:
            List of child organization UUIDs
        """

    @abstractmethod
    def find_by_reseller(self, reseller_id: uuid.UUID) -> List[Organization]:
        """
        Find every organization managed by a reseller.

        Args:
            reseller_id: Reseller organization UUID

        Returns:
            List of Organization entities
        """
