"""
Integration tests for the lifecycle sweep handler, task and command.
"""

from datetime import datetime, timedelta, timezone
from io import StringIO

import pytest
from django.core.management import call_command
from django.test import override_settings

from core.domain.value_objects import DeviceStatus
from core.infrastructure.models import AuditLog
from core.tasks import run_lifecycle_sweep_task
from devices.application.commands.run_lifecycle_sweep import RunLifecycleSweepCommand
from devices.application.handlers.run_lifecycle_sweep_handler import (
    RunLifecycleSweepHandler,
    build_lifecycle_engine,
)
from devices.domain.lifecycle import GRANT_GRACE, MARK_EXPIRED, SUSPEND, WARN_EXPIRING

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def seeded(orgs, make_device):
    """One device per interesting position in the lifecycle."""
    london = orgs["london"]
    return {
        "far": make_device(london, expiry_date=NOW + timedelta(days=120)),
        "warn": make_device(london, expiry_date=NOW + timedelta(days=30)),
        "expire": make_device(london, DeviceStatus.EXPIRING_SOON, NOW - timedelta(hours=1)),
        "late": make_device(london, expiry_date=NOW - timedelta(days=20)),
        "graced": make_device(
            london, DeviceStatus.EXPIRED, NOW - timedelta(days=3), grace_token_expiry=NOW + timedelta(days=4)
        ),
        "suspended": make_device(orgs["manchester"], DeviceStatus.SUSPENDED, NOW - timedelta(days=20)),
    }


def sweep(device_repository, dry_run=False, at=NOW):
    handler = RunLifecycleSweepHandler(device_repository, clock=lambda: at)
    return handler.handle(RunLifecycleSweepCommand(dry_run=dry_run))


@pytest.mark.django_db
@pytest.mark.integration
class TestRunLifecycleSweepHandler:
    """Integration tests for RunLifecycleSweepHandler."""

    def test_sweep_transitions(self, device_repository, seeded):
        """Each device lands where the rules say."""
        result = sweep(device_repository)

        assert result.counts == {WARN_EXPIRING: 1, MARK_EXPIRED: 2, GRANT_GRACE: 2, SUSPEND: 1}
        assert not result.dry_run

        def status_of(key):
            return device_repository.find_by_id(seeded[key].id).status

        assert status_of("far") == DeviceStatus.ACTIVE
        assert status_of("warn") == DeviceStatus.EXPIRING_SOON
        assert status_of("expire") == DeviceStatus.EXPIRED
        assert status_of("late") == DeviceStatus.SUSPENDED
        assert status_of("graced") == DeviceStatus.EXPIRED
        assert status_of("suspended") == DeviceStatus.SUSPENDED

        expired = device_repository.find_by_id(seeded["expire"].id)
        assert expired.grace_token_expiry == NOW + timedelta(days=7)
        graced = device_repository.find_by_id(seeded["graced"].id)
        assert graced.grace_token_expiry == NOW + timedelta(days=4)

    def test_second_run_is_a_no_op(self, device_repository, seeded):
        """Sweeping twice at the same instant changes nothing the second time."""
        sweep(device_repository)
        assert sweep(device_repository).total == 0

    def test_dry_run_reports_exact_counts_without_writing(self, device_repository, seeded, orgs):
        """A dry run reports what a real run changes and leaves the data alone."""
        scope = {orgs["london"].id, orgs["manchester"].id}
        before = device_repository.count_by_status(scope)

        dry = sweep(device_repository, dry_run=True)

        assert dry.dry_run
        assert device_repository.count_by_status(scope) == before
        assert device_repository.find_by_id(seeded["expire"].id).grace_token_expiry is None
        assert sweep(device_repository).counts == dry.counts

    def test_completed_sweep_is_audited(self, device_repository, seeded):
        """Real runs write an audit row, dry runs do not."""
        sweep(device_repository, dry_run=True)
        assert not AuditLog.objects.filter(action="lifecycle_sweep_completed").exists()

        sweep(device_repository)
        entry = AuditLog.objects.get(action="lifecycle_sweep_completed")
        assert entry.actor == "system"
        assert entry.changes["counts"][SUSPEND] == 1

    def test_missed_days_are_caught_up(self, device_repository, orgs, make_device):
        """Twenty days without a sweep still land every device in its final state."""
        expiring = make_device(orgs["london"], expiry_date=NOW + timedelta(days=5))
        lapsing = make_device(orgs["london"], DeviceStatus.EXPIRING_SOON, NOW - timedelta(hours=1))

        first = sweep(device_repository)
        assert first.counts == {WARN_EXPIRING: 1, MARK_EXPIRED: 1, GRANT_GRACE: 1, SUSPEND: 0}
        assert device_repository.find_by_id(expiring.id).status == DeviceStatus.EXPIRING_SOON
        assert device_repository.find_by_id(lapsing.id).grace_token_expiry == NOW + timedelta(days=7)

        later = NOW + timedelta(days=20)
        second = sweep(device_repository, at=later)
        assert second.counts == {WARN_EXPIRING: 0, MARK_EXPIRED: 1, GRANT_GRACE: 1, SUSPEND: 2}

        expiring = device_repository.find_by_id(expiring.id)
        lapsing = device_repository.find_by_id(lapsing.id)
        assert expiring.status == DeviceStatus.SUSPENDED
        assert expiring.grace_token_expiry == later + timedelta(days=7)
        assert lapsing.status == DeviceStatus.SUSPENDED
        assert lapsing.grace_token_expiry == NOW + timedelta(days=7)

        assert sweep(device_repository, at=later).total == 0

    @override_settings(LICENSE_LIFECYCLE={"WARNING_WINDOW_DAYS": 10})
    def test_windows_come_from_settings(self, device_repository, seeded):
        """The warning window is configurable."""
        assert build_lifecycle_engine().rules[0].expiry_until == timedelta(days=10)
        assert sweep(device_repository).counts[WARN_EXPIRING] == 0


@pytest.mark.django_db
@pytest.mark.integration
class TestSweepEntryPoints:
    """The management command and Celery task drive the same sweep."""

    def test_management_command_dry_run(self, device_repository, orgs, make_device):
        """The command prints per-rule counts."""
        make_device(orgs["london"], expiry_date=datetime.now(timezone.utc) - timedelta(days=1))
        out = StringIO()

        call_command("run_lifecycle_sweep", "--dry-run", stdout=out)

        output = out.getvalue()
        assert "Dry run" in output
        assert f"{MARK_EXPIRED}: 1" in output
        assert device_repository.count_by_status({orgs["london"].id})[DeviceStatus.ACTIVE] == 1

    def test_celery_task(self, device_repository, orgs, make_device):
        """The task returns the serialized sweep result."""
        device = make_device(orgs["london"], expiry_date=datetime.now(timezone.utc) + timedelta(days=5))

        result = run_lifecycle_sweep_task.apply().get()

        assert result["counts"][WARN_EXPIRING] == 1
        assert result["dry_run"] is False
        assert device_repository.find_by_id(device.id).status == DeviceStatus.EXPIRING_SOON
