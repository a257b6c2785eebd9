"""
Django implementation of OrganizationRepository port.

This adapter converts between domain entities and Django ORM models.
"""

import uuid
from typing import Iterable, List, Optional

from core.domain.value_objects import BillingMode, OrgKind
from organizations.domain.organization import Organization
from organizations.infrastructure.models import Organization as OrganizationModel
from organizations.ports.organization_repository import OrganizationRepository


class DjangoOrganizationRepository(OrganizationRepository):
    """
    Django ORM implementation of OrganizationRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django models
    3. Implements repository interface
    """

    def _to_domain(self, model: OrganizationModel) -> Organization:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Organization model

        Returns:
            Organization domain entity
        """
        return Organization(
            id=model.id,
            name=model.name,
            kind=OrgKind(model.kind),
            parent_id=model.parent_id,
            reseller_id=model.reseller_id,
            billing_mode=BillingMode(model.billing_mode),
            created_at=model.created_at,
        )

    def save(self, organization: Organization) -> Organization:
        """
        Save an organization entity.

        Args:
            organization: Organization entity to save

        Returns:
            Saved organization entity
        """
        # pylint: disable=no-member
        model = OrganizationModel.objects.filter(id=organization.id).first()
        if model is None:
            model = OrganizationModel(id=organization.id, kind=organization.kind.value)
        model.name = organization.name
        model.parent_id = organization.parent_id
        model.reseller_id = organization.reseller_id
        model.billing_mode = organization.billing_mode.value
        model.save()
        return self._to_domain(model)

    def find_by_id(self, org_id: uuid.UUID) -> Optional[Organization]:
        """
        Find an organization by ID.

        Args:
            org_id: Organization UUID

        Returns:
            Organization entity or None if not found
        """
        try:
            # pylint: disable=no-member
            return self._to_domain(OrganizationModel.objects.get(id=org_id))
        except OrganizationModel.DoesNotExist:
            return None

    def find_by_ids(self, org_ids: Iterable[uuid.UUID]) -> List[Organization]:
        """
        Find organizations by a set of IDs.

        Args:
            org_ids: Organization UUIDs

        Returns:
            List of Organization entities
        """
        # pylint: disable=no-member
        models = OrganizationModel.objects.filter(id__in=list(org_ids))
        return [self._to_domain(model) for model in models]

    def find_ids_by_parent(self, parent_ids: Iterable[uuid.UUID]) -> List[uuid.UUID]:
        """
        Find the IDs of every organization whose parent is in ``parent_ids``.

        Args:
            parent_ids: Parent organization UUIDs

        Returns:
            List of child organization UUIDs
        """
        # pylint: disable=no-member
        return list(
            OrganizationModel.objects.filter(parent_id__in=list(parent_ids)).values_list(
                "id", flat=True
            )
        )

    def find_by_reseller(self, reseller_id: uuid.UUID) -> List[Organization]:
        """
        Find every organization managed by a reseller.

        Args:
            reseller_id: Reseller organization UUID

        Returns:
            List of Organization entities
        """
        # pylint: disable=no-member
        models = OrganizationModel.objects.filter(reseller_id=reseller_id)
        return [self._to_domain(model) for model in models]
