"""
Organization domain services.

The hierarchy resolver computes which organizations an acting
organization may act upon. It reads the current persisted hierarchy on
every call; parent and reseller links can change between requests.
"""
import logging
import uuid
from typing import Set

from core.domain.value_objects import Actor, OrgKind
from organizations.ports.organization_repository import OrganizationRepository

logger = logging.getLogger(__name__)


class OrgHierarchyResolver:
    """Domain service resolving the managed organization scope of an actor."""

    def __init__(self, repository: OrganizationRepository):
        """Initialize resolver with an organization repository."""
        self.repository = repository

    def resolve_managed_org_ids(
        self, acting_org_id: uuid.UUID, acting_org_kind: OrgKind
    ) -> Set[uuid.UUID]:
        """
        Compute the closed set of organization IDs an actor may act upon.

        - TOP: itself plus its UNITs.
        - RESELLER: every TOP it manages plus the UNITs of those TOPs.
        - UNIT: itself only.

        Args:
            acting_org_id: Acting organization UUID
            acting_org_kind: Acting organization kind

        Returns:
            Set of organization UUIDs
        """
        if acting_org_kind == OrgKind.TOP:
            managed = {acting_org_id}
            managed.update(self.repository.find_ids_by_parent([acting_org_id]))
        elif acting_org_kind == OrgKind.RESELLER:
            client_ids = {client.id for client in self.repository.find_by_reseller(acting_org_id)}
            managed = set(client_ids)
            if client_ids:
                managed.update(self.repository.find_ids_by_parent(client_ids))
        elif acting_org_kind == OrgKind.UNIT:
            managed = {acting_org_id}
        else:
            raise ValueError(f"Unknown organization kind: {acting_org_kind}")

        logger.debug(
            "Resolved %d managed organization(s) for %s %s",
            len(managed),
            acting_org_kind.value,
            acting_org_id,
        )
        return managed

    def resolve_for(self, actor: Actor) -> Set[uuid.UUID]:
        """Shortcut for ``resolve_managed_org_ids`` taking an Actor."""
        return self.resolve_managed_org_ids(actor.org_id, actor.kind)

    def is_org_managed_by(
        self,
        target_org_id: uuid.UUID,
        acting_org_id: uuid.UUID,
        acting_org_kind: OrgKind,
    ) -> bool:
        """
        Check whether an organization lies in the actor's managed set.

        Args:
            target_org_id: Organization being acted upon
            acting_org_id: Acting organization UUID
            acting_org_kind: Acting organization kind

        Returns:
            True if the actor manages the target organization
        """
        return target_org_id in self.resolve_managed_org_ids(acting_org_id, acting_org_kind)
