"""
Integration tests for the device renewal handlers.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from core.domain.exceptions import (
    ActorKindNotAllowedError,
    DeviceNotFoundError,
    DomainValidationError,
    InvalidDeviceStatusError,
    NotManagedError,
)
from core.domain.value_objects import DeviceStatus
from core.infrastructure.models import AuditLog
from devices.application.commands.bulk_renew import BulkRenewCommand
from devices.application.commands.co_term import CoTermCommand
from devices.application.commands.issue_grace_token import IssueGraceTokenCommand
from devices.application.handlers.device_renewal_handlers import (
    BulkRenewHandler,
    CoTermHandler,
    IssueGraceTokenHandler,
)

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
END_OF_2025 = datetime(2025, 12, 31, 23, 59, 59, 999000, tzinfo=timezone.utc)


@pytest.fixture
def bulk_renew(device_repository, organization_repository, clock):
    """Fixture for BulkRenewHandler."""
    return BulkRenewHandler(device_repository, organization_repository, clock=clock)


@pytest.fixture
def co_term(device_repository, organization_repository, clock):
    """Fixture for CoTermHandler."""
    return CoTermHandler(device_repository, organization_repository, clock=clock)


@pytest.fixture
def grace(device_repository, organization_repository, clock):
    """Fixture for IssueGraceTokenHandler."""
    return IssueGraceTokenHandler(device_repository, organization_repository, clock=clock)


@pytest.mark.django_db
@pytest.mark.integration
class TestBulkRenewHandler:
    """Integration tests for BulkRenewHandler."""

    def test_renews_devices_in_scope(self, bulk_renew, device_repository, orgs, make_device, actor):
        """Each device gains the requested years on top of its own expiry."""
        expired = make_device(
            orgs["london"], DeviceStatus.EXPIRED, NOW - timedelta(days=5), grace_token_expiry=NOW
        )
        active = make_device(orgs["hq"], expiry_date=datetime(2025, 6, 1, tzinfo=timezone.utc))

        result = bulk_renew.handle(
            BulkRenewCommand(actor=actor(orgs["hq"]), device_ids=[expired.id, active.id], years=2)
        )

        assert result.updated_count == 2
        renewed = device_repository.find_by_id(expired.id)
        assert renewed.expiry_date == datetime(2027, 2, 24, 12, 0, tzinfo=timezone.utc)
        assert renewed.status == DeviceStatus.ACTIVE
        assert renewed.grace_token_expiry is None
        assert device_repository.find_by_id(active.id).expiry_date == datetime(2027, 6, 1, tzinfo=timezone.utc)

    def test_skips_missing_and_foreign_devices(self, bulk_renew, device_repository, orgs, make_device, actor):
        """Out of scope and unknown IDs are skipped without error."""
        mine = make_device(orgs["manchester"])
        foreign = make_device(orgs["other_top"])

        result = bulk_renew.handle(
            BulkRenewCommand(actor=actor(orgs["hq"]), device_ids=[mine.id, foreign.id, uuid.uuid4()])
        )

        assert result.updated_count == 1
        assert [device.id for device in result.updated] == [mine.id]
        assert device_repository.find_by_id(foreign.id).expiry_date == foreign.expiry_date

    def test_reseller_renews_client_devices(self, bulk_renew, orgs, make_device, actor):
        """A reseller reaches the units of its clients."""
        device = make_device(orgs["client_unit"], DeviceStatus.SUSPENDED, NOW - timedelta(days=30))
        hq_device = make_device(orgs["london"])

        result = bulk_renew.handle(
            BulkRenewCommand(actor=actor(orgs["reseller"]), device_ids=[device.id, hq_device.id])
        )

        assert [d.id for d in result.updated] == [device.id]
        assert result.updated[0].status == "ACTIVE"

    def test_unit_cannot_bulk_renew(self, bulk_renew, orgs, make_device, actor):
        """UNITs renew through requests."""
        device = make_device(orgs["london"])
        with pytest.raises(ActorKindNotAllowedError):
            bulk_renew.handle(BulkRenewCommand(actor=actor(orgs["london"]), device_ids=[device.id]))

    def test_validation(self, bulk_renew, orgs, make_device, actor):
        """Empty ID lists and zero years are rejected."""
        device = make_device(orgs["london"])
        with pytest.raises(DomainValidationError, match="at least one device"):
            bulk_renew.handle(BulkRenewCommand(actor=actor(orgs["hq"]), device_ids=[]))
        with pytest.raises(DomainValidationError, match="years"):
            bulk_renew.handle(BulkRenewCommand(actor=actor(orgs["hq"]), device_ids=[device.id], years=0))

    def test_years_above_limit_rejected(self, bulk_renew, device_repository, orgs, make_device, actor):
        """Huge renewal terms fail validation instead of overflowing the calendar."""
        device = make_device(orgs["london"])

        with pytest.raises(DomainValidationError, match="between 1 and 10"):
            bulk_renew.handle(BulkRenewCommand(actor=actor(orgs["hq"]), device_ids=[device.id], years=9000))

        assert device_repository.find_by_id(device.id).expiry_date == device.expiry_date

    def test_expiry_past_year_9999_rolls_back_batch(self, bulk_renew, device_repository, orgs, make_device, actor):
        """A renewal beyond the last representable year fails the whole batch."""
        ordinary = make_device(orgs["london"])
        distant = make_device(orgs["london"], expiry_date=datetime(9995, 6, 1, tzinfo=timezone.utc))

        with pytest.raises(DomainValidationError, match="cannot be renewed"):
            bulk_renew.handle(
                BulkRenewCommand(actor=actor(orgs["hq"]), device_ids=[ordinary.id, distant.id], years=5)
            )

        assert device_repository.find_by_id(ordinary.id).expiry_date == ordinary.expiry_date
        assert device_repository.find_by_id(distant.id).expiry_date == distant.expiry_date

    def test_renewals_are_audited(self, bulk_renew, orgs, make_device, actor):
        """One audit row per renewed device."""
        devices = [make_device(orgs["london"]) for _ in range(3)]

        bulk_renew.handle(BulkRenewCommand(actor=actor(orgs["hq"]), device_ids=[d.id for d in devices]))

        entries = AuditLog.objects.filter(action="device_renewed")
        assert entries.count() == 3
        assert {entry.changes["operation"] for entry in entries} == {"bulk_renew"}
        assert {entry.actor for entry in entries} == {f"TOP:{orgs['hq'].id}"}


@pytest.mark.django_db
@pytest.mark.integration
class TestCoTermHandler:
    """Integration tests for CoTermHandler."""

    def test_defaults_to_end_of_year(self, co_term, device_repository, orgs, make_device, actor):
        """Without a target every device ends on 31 December."""
        devices = [
            make_device(orgs["london"], DeviceStatus.EXPIRED, NOW - timedelta(days=3)),
            make_device(orgs["manchester"], expiry_date=NOW + timedelta(days=400)),
        ]

        result = co_term.handle(CoTermCommand(actor=actor(orgs["hq"]), device_ids=[d.id for d in devices]))

        assert result.updated_count == 2
        for device in devices:
            stored = device_repository.find_by_id(device.id)
            assert stored.expiry_date == END_OF_2025
            assert stored.status == DeviceStatus.ACTIVE

    def test_explicit_target(self, co_term, device_repository, orgs, make_device, actor):
        """An explicit target date is used as given."""
        device = make_device(orgs["london"])
        target = datetime(2026, 6, 30, tzinfo=timezone.utc)

        co_term.handle(CoTermCommand(actor=actor(orgs["hq"]), device_ids=[device.id], target_date=target))

        assert device_repository.find_by_id(device.id).expiry_date == target

    @pytest.mark.parametrize("org_key", ["reseller", "london"])
    def test_only_top_can_co_term(self, co_term, orgs, make_device, actor, org_key):
        """RESELLER and UNIT actors are refused."""
        device = make_device(orgs["client"])
        with pytest.raises(ActorKindNotAllowedError, match="Only TOP"):
            co_term.handle(CoTermCommand(actor=actor(orgs[org_key]), device_ids=[device.id]))

    def test_foreign_devices_untouched(self, co_term, device_repository, orgs, make_device, actor):
        """Another TOP's devices are skipped."""
        foreign = make_device(orgs["client"])
        result = co_term.handle(CoTermCommand(actor=actor(orgs["hq"]), device_ids=[foreign.id]))

        assert result.updated_count == 0
        assert device_repository.find_by_id(foreign.id).expiry_date == foreign.expiry_date


@pytest.mark.django_db
@pytest.mark.integration
class TestIssueGraceTokenHandler:
    """Integration tests for IssueGraceTokenHandler."""

    def test_issues_token(self, grace, device_repository, orgs, make_device, actor):
        """An EXPIRED unit device gets a seven day token."""
        device = make_device(orgs["london"], DeviceStatus.EXPIRED, NOW - timedelta(days=2))

        result = grace.handle(IssueGraceTokenCommand(actor=actor(orgs["hq"]), device_id=device.id))

        assert result.grace_token_expiry == NOW + timedelta(days=7)
        assert device_repository.find_by_id(device.id).grace_token_expiry == NOW + timedelta(days=7)
        assert AuditLog.objects.filter(action="grace_token_issued", entity_id=str(device.id)).exists()

    def test_unknown_device(self, grace, orgs, actor):
        """Test a device that does not exist."""
        with pytest.raises(DeviceNotFoundError):
            grace.handle(IssueGraceTokenCommand(actor=actor(orgs["hq"]), device_id=uuid.uuid4()))

    def test_foreign_device(self, grace, orgs, make_device, actor):
        """Test a device of another TOP."""
        device = make_device(orgs["client_unit"], DeviceStatus.EXPIRED, NOW - timedelta(days=2))
        with pytest.raises(NotManagedError, match="do not manage this device"):
            grace.handle(IssueGraceTokenCommand(actor=actor(orgs["hq"]), device_id=device.id))

    def test_device_not_expired(self, grace, orgs, make_device, actor):
        """Test a device that is still ACTIVE."""
        device = make_device(orgs["london"])
        with pytest.raises(InvalidDeviceStatusError):
            grace.handle(IssueGraceTokenCommand(actor=actor(orgs["hq"]), device_id=device.id))

    def test_reseller_cannot_issue(self, grace, orgs, make_device, actor):
        """Only TOP organizations issue grace tokens."""
        device = make_device(orgs["client"], DeviceStatus.EXPIRED, NOW - timedelta(days=2))
        with pytest.raises(ActorKindNotAllowedError):
            grace.handle(IssueGraceTokenCommand(actor=actor(orgs["reseller"]), device_id=device.id))
