"""
Integration tests for repository implementations.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from core.domain.value_objects import DeviceStatus, RequestStatus
from devices.domain.lifecycle import LicenseLifecycleEngine
from renewals.domain.renewal_request import RenewalRequest

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.django_db
@pytest.mark.integration
class TestOrganizationRepository:
    """Integration tests for OrganizationRepository."""

    def test_save_and_find(self, organization_repository, orgs):
        """Test saving and finding an organization."""
        found = organization_repository.find_by_id(orgs["client"].id)

        assert found == orgs["client"]
        assert found.reseller_id == orgs["reseller"].id

    def test_find_missing(self, organization_repository):
        """Test finding an unknown organization."""
        assert organization_repository.find_by_id(uuid.uuid4()) is None

    def test_find_ids_by_parent(self, organization_repository, orgs):
        """Test listing units of several parents at once."""
        ids = organization_repository.find_ids_by_parent([orgs["hq"].id, orgs["client"].id])

        assert set(ids) == {orgs["london"].id, orgs["manchester"].id, orgs["client_unit"].id}

    def test_find_by_reseller(self, organization_repository, orgs):
        """Test listing a reseller's clients."""
        clients = organization_repository.find_by_reseller(orgs["reseller"].id)
        assert [client.id for client in clients] == [orgs["client"].id]


@pytest.mark.django_db
@pytest.mark.integration
class TestDeviceRepository:
    """Integration tests for DeviceRepository."""

    def test_save_and_find(self, device_repository, orgs, make_device):
        """Test round trip of a device."""
        device = make_device(orgs["london"], DeviceStatus.EXPIRED, NOW - timedelta(days=5))
        found = device_repository.find_by_id(device.id)

        assert found.status == DeviceStatus.EXPIRED
        assert found.expiry_date == NOW - timedelta(days=5)
        assert found.organization_id == orgs["london"].id

    def test_find_by_org_ids_filters_and_orders(self, device_repository, orgs, make_device):
        """Devices come back by ascending expiry, filtered by status and ID."""
        late = make_device(orgs["london"], expiry_date=NOW + timedelta(days=200))
        early = make_device(orgs["manchester"], expiry_date=NOW + timedelta(days=10))
        expired = make_device(orgs["london"], DeviceStatus.EXPIRED, NOW - timedelta(days=1))
        make_device(orgs["other_top"])

        scope = {orgs["london"].id, orgs["manchester"].id}
        assert [d.id for d in device_repository.find_by_org_ids(scope)] == [expired.id, early.id, late.id]
        assert [
            d.id for d in device_repository.find_by_org_ids(scope, statuses=[DeviceStatus.EXPIRED])
        ] == [expired.id]
        assert [
            d.id for d in device_repository.find_by_org_ids(scope, device_ids=[late.id, uuid.uuid4()])
        ] == [late.id]

    def test_count_by_status_is_zero_filled(self, device_repository, orgs, make_device):
        """Every status has an entry."""
        make_device(orgs["london"], DeviceStatus.EXPIRED, NOW - timedelta(days=1))
        make_device(orgs["london"], DeviceStatus.EXPIRED, NOW - timedelta(days=2))

        counts = device_repository.count_by_status({orgs["london"].id})
        assert counts == {
            DeviceStatus.ACTIVE: 0,
            DeviceStatus.EXPIRING_SOON: 0,
            DeviceStatus.EXPIRED: 2,
            DeviceStatus.SUSPENDED: 0,
        }

    def test_apply_sweep_rule_matches_pure_rule(self, device_repository, orgs, make_device):
        """The bulk update selects the same devices as the in-memory rule."""
        warn = LicenseLifecycleEngine().rules[0]
        devices = [
            make_device(orgs["london"], expiry_date=NOW + timedelta(days=offset))
            for offset in (-1, 0, 1, 60, 61)
        ]
        expected = {device.id for device in devices if warn.matches(device, NOW)}

        assert device_repository.apply_sweep_rule(warn, NOW) == len(expected)
        flagged = {
            device.id
            for device in device_repository.find_by_org_ids(
                {orgs["london"].id}, statuses=[DeviceStatus.EXPIRING_SOON]
            )
        }
        assert flagged == expected


@pytest.mark.django_db
@pytest.mark.integration
class TestRenewalRequestRepository:
    """Integration tests for RenewalRequestRepository."""

    def test_save_and_find(self, renewal_request_repository, orgs):
        """Device IDs survive the JSON column."""
        device_ids = [uuid.uuid4(), uuid.uuid4()]
        request = renewal_request_repository.save(
            RenewalRequest.create(orgs["london"].id, device_ids=device_ids, notes="Q2", created_at=NOW)
        )
        found = renewal_request_repository.find_by_id(request.id)

        assert found.device_ids == tuple(device_ids)
        assert found.status == RequestStatus.PENDING
        assert found.notes == "Q2"
        assert found.created_at == NOW

    def test_find_by_requester_ids(self, renewal_request_repository, orgs):
        """Newest first, optionally filtered by status."""
        older = renewal_request_repository.save(
            RenewalRequest.create(orgs["london"].id, created_at=NOW - timedelta(days=1))
        )
        newer = renewal_request_repository.save(
            RenewalRequest.create(orgs["manchester"].id, created_at=NOW).reject()
        )
        ids = {orgs["london"].id, orgs["manchester"].id}

        assert [r.id for r in renewal_request_repository.find_by_requester_ids(ids)] == [newer.id, older.id]
        assert [
            r.id for r in renewal_request_repository.find_by_requester_ids(ids, [RequestStatus.PENDING])
        ] == [older.id]

    def test_find_pending_since_is_exclusive(self, renewal_request_repository, orgs):
        """A request created exactly at the cutoff is not recent."""
        since = NOW - timedelta(hours=6)
        renewal_request_repository.save(RenewalRequest.create(orgs["london"].id, created_at=since))
        recent = renewal_request_repository.save(
            RenewalRequest.create(orgs["london"].id, created_at=since + timedelta(minutes=1))
        )

        found = renewal_request_repository.find_pending_since({orgs["london"].id}, since)
        assert [r.id for r in found] == [recent.id]
