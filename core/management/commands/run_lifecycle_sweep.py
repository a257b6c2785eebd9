"""
Django management command to run the license lifecycle sweep.

Runs the same sweep as the nightly Celery task. With ``--dry-run`` the
updates are executed and rolled back, so the reported counts are what a
real run would change.
"""

import logging

from django.core.management.base import BaseCommand

from devices.application.commands.run_lifecycle_sweep import RunLifecycleSweepCommand
from devices.application.handlers.run_lifecycle_sweep_handler import RunLifecycleSweepHandler
from devices.infrastructure.repositories.django_device_repository import DjangoDeviceRepository

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Command to run the lifecycle sweep."""

    help = "Advance device licenses through their lifecycle (expiring, expired, grace, suspended)"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report the transitions without writing them",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        handler = RunLifecycleSweepHandler(device_repository=DjangoDeviceRepository())
        result = handler.handle(RunLifecycleSweepCommand(dry_run=options["dry_run"]))

        if result.dry_run:
            # pylint: disable=no-member
            self.stdout.write(self.style.WARNING("Dry run: no changes were written"))
        for rule, count in result.counts.items():
            self.stdout.write(f"  {rule}: {count}")
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(f"Lifecycle sweep complete: {result.total} transition(s)"))
