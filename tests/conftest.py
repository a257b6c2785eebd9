"""
Pytest configuration and shared fixtures.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from core.domain.value_objects import Actor, BillingMode, DeviceStatus, OrgKind
from core.infrastructure.event_handlers import register_event_handlers
from devices.domain.device import Device
from devices.infrastructure.repositories.django_device_repository import DjangoDeviceRepository
from organizations.domain.organization import Organization
from organizations.infrastructure.models import Organization as OrganizationModel
from organizations.infrastructure.repositories.django_organization_repository import (
    DjangoOrganizationRepository,
)
from renewals.infrastructure.repositories.django_renewal_request_repository import (
    DjangoRenewalRequestRepository,
)

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def event_handlers():
    """Make sure audit and metrics handlers are subscribed."""
    register_event_handlers()


@pytest.fixture
def now():
    """Fixed reference instant."""
    return NOW


@pytest.fixture
def clock():
    """Clock frozen at the reference instant."""
    return lambda: NOW


@pytest.fixture
def organization_repository():
    """Fixture for OrganizationRepository."""
    return DjangoOrganizationRepository()


@pytest.fixture
def device_repository():
    """Fixture for DeviceRepository."""
    return DjangoDeviceRepository()


@pytest.fixture
def renewal_request_repository():
    """Fixture for RenewalRequestRepository."""
    return DjangoRenewalRequestRepository()


@pytest.fixture
def make_org(db, organization_repository):
    """Factory saving an Organization."""

    def _make(name, kind, parent=None, reseller=None, billing_mode=BillingMode.SELF_PAY):
        return organization_repository.save(
            Organization.create(
                name=name,
                kind=kind,
                parent_id=parent.id if parent else None,
                reseller_id=reseller.id if reseller else None,
                billing_mode=billing_mode,
            )
        )

    return _make


@pytest.fixture
def make_device(db, device_repository):
    """Factory saving a Device with a given status and expiry."""

    def _make(org, status=DeviceStatus.ACTIVE, expiry_date=None, grace_token_expiry=None, name="Screen"):
        device = Device.create(
            organization_id=org.id,
            name=name,
            serial_number=f"SN-{uuid.uuid4().hex[:12]}",
            location="Store",
            expiry_date=expiry_date or NOW + timedelta(days=120),
        )
        device = device.with_status(status).with_grace_token(grace_token_expiry)
        return device_repository.save(device)

    return _make


@pytest.fixture
def orgs(make_org):
    """
    A small hierarchy.

    hq (TOP) with units london and manchester; reseller managing client
    (TOP, reseller only) which has client_unit; other_top is unrelated.
    """
    hq = make_org("Global Retail HQ", OrgKind.TOP)
    reseller = make_org("Channel Partners", OrgKind.RESELLER)
    client = make_org(
        "Northwind Retail", OrgKind.TOP, reseller=reseller, billing_mode=BillingMode.RESELLER_ONLY
    )
    return {
        "hq": hq,
        "london": make_org("London Flagship", OrgKind.UNIT, parent=hq),
        "manchester": make_org("Manchester Outlet", OrgKind.UNIT, parent=hq),
        "reseller": reseller,
        "client": client,
        "client_unit": make_org("Northwind Leeds", OrgKind.UNIT, parent=client),
        "other_top": make_org("Other Corp", OrgKind.TOP),
    }


def actor_for(organization):
    """Actor acting as an organization."""
    return Actor(org_id=organization.id, kind=organization.kind)


@pytest.fixture
def actor():
    """Fixture exposing actor_for to tests."""
    return actor_for


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def api_key_for(db):
    """Factory returning a fresh raw API key for an organization."""

    def _make(organization):
        # pylint: disable=no-member
        api_key = OrganizationModel.objects.get(id=organization.id).generate_api_key()
        return api_key._raw_key  # pylint: disable=protected-access

    return _make
