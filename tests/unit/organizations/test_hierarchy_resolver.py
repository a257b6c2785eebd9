"""
Unit tests for OrgHierarchyResolver.
"""

import uuid
from typing import Dict, Iterable, List, Optional

import pytest

from core.domain.value_objects import Actor, BillingMode, OrgKind
from organizations.domain.organization import Organization
from organizations.domain.services import OrgHierarchyResolver
from organizations.ports.organization_repository import OrganizationRepository


class InMemoryOrganizationRepository(OrganizationRepository):
    """Dictionary backed repository for resolver tests."""

    def __init__(self):
        self.organizations: Dict[uuid.UUID, Organization] = {}

    def save(self, organization: Organization) -> Organization:
        self.organizations[organization.id] = organization
        return organization

    def find_by_id(self, org_id: uuid.UUID) -> Optional[Organization]:
        return self.organizations.get(org_id)

    def find_by_ids(self, org_ids: Iterable[uuid.UUID]) -> List[Organization]:
        return [self.organizations[org_id] for org_id in org_ids if org_id in self.organizations]

    def find_ids_by_parent(self, parent_ids: Iterable[uuid.UUID]) -> List[uuid.UUID]:
        parents = set(parent_ids)
        return [org.id for org in self.organizations.values() if org.parent_id in parents]

    def find_by_reseller(self, reseller_id: uuid.UUID) -> List[Organization]:
        return [org for org in self.organizations.values() if org.reseller_id == reseller_id]


@pytest.fixture
def repository():
    """Fixture for the in-memory repository."""
    return InMemoryOrganizationRepository()


@pytest.fixture
def tree(repository):
    """Two TOPs with units, one of them managed by a reseller."""

    def add(name, kind, parent=None, reseller=None):
        return repository.save(
            Organization.create(
                name=name,
                kind=kind,
                parent_id=parent.id if parent else None,
                reseller_id=reseller.id if reseller else None,
                billing_mode=BillingMode.RESELLER_ONLY if reseller else BillingMode.SELF_PAY,
            )
        )

    hq = add("HQ", OrgKind.TOP)
    reseller = add("Reseller", OrgKind.RESELLER)
    client = add("Client", OrgKind.TOP, reseller=reseller)
    return {
        "hq": hq,
        "london": add("London", OrgKind.UNIT, parent=hq),
        "manchester": add("Manchester", OrgKind.UNIT, parent=hq),
        "reseller": reseller,
        "client": client,
        "client_unit": add("Client Unit", OrgKind.UNIT, parent=client),
        "idle_reseller": add("Idle Reseller", OrgKind.RESELLER),
    }


class TestOrgHierarchyResolver:
    """Tests for OrgHierarchyResolver."""

    def test_top_manages_itself_and_units(self, repository, tree):
        """Test TOP scope."""
        resolver = OrgHierarchyResolver(repository)
        managed = resolver.resolve_managed_org_ids(tree["hq"].id, OrgKind.TOP)

        assert managed == {tree["hq"].id, tree["london"].id, tree["manchester"].id}

    def test_reseller_manages_clients_and_their_units(self, repository, tree):
        """A reseller's scope excludes the reseller itself."""
        resolver = OrgHierarchyResolver(repository)
        managed = resolver.resolve_managed_org_ids(tree["reseller"].id, OrgKind.RESELLER)

        assert managed == {tree["client"].id, tree["client_unit"].id}
        assert tree["reseller"].id not in managed

    def test_unit_manages_only_itself(self, repository, tree):
        """Test UNIT scope."""
        resolver = OrgHierarchyResolver(repository)
        assert resolver.resolve_for(Actor(tree["london"].id, OrgKind.UNIT)) == {tree["london"].id}

    def test_reseller_without_clients(self, repository, tree):
        """A reseller with no clients manages nothing."""
        resolver = OrgHierarchyResolver(repository)
        assert resolver.resolve_managed_org_ids(tree["idle_reseller"].id, OrgKind.RESELLER) == set()

    def test_is_org_managed_by(self, repository, tree):
        """Test membership checks."""
        resolver = OrgHierarchyResolver(repository)

        assert resolver.is_org_managed_by(tree["london"].id, tree["hq"].id, OrgKind.TOP)
        assert not resolver.is_org_managed_by(tree["client_unit"].id, tree["hq"].id, OrgKind.TOP)
        assert resolver.is_org_managed_by(tree["client_unit"].id, tree["reseller"].id, OrgKind.RESELLER)
        assert not resolver.is_org_managed_by(tree["hq"].id, tree["london"].id, OrgKind.UNIT)

    def test_reads_current_hierarchy(self, repository, tree):
        """A unit added after the first call shows up on the next one."""
        resolver = OrgHierarchyResolver(repository)
        before = resolver.resolve_managed_org_ids(tree["hq"].id, OrgKind.TOP)
        leeds = repository.save(Organization.create(name="Leeds", kind=OrgKind.UNIT, parent_id=tree["hq"].id))

        after = resolver.resolve_managed_org_ids(tree["hq"].id, OrgKind.TOP)
        assert after == before | {leeds.id}
