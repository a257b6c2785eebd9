"""
Django management command to create test data for development and testing.

Creates:
- A superuser (admin/admin)
- A TOP organization with two UNITs and devices in every status
- A RESELLER managing a second TOP organization
- One API key per organization
"""

import logging
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from core.domain.value_objects import BillingMode, DeviceStatus, OrgKind
from devices.domain.device import Device
from devices.infrastructure.repositories.django_device_repository import DjangoDeviceRepository
from organizations.domain.organization import Organization
from organizations.infrastructure.models import Organization as OrganizationModel
from organizations.infrastructure.repositories.django_organization_repository import (
    DjangoOrganizationRepository,
)

logger = logging.getLogger(__name__)
User = get_user_model()

HQ_NAME = "Global Retail HQ"

# (organization, name prefix, serial prefix, location, count, status, expiry offset in days)
DEVICE_BATCHES = [
    ("london", "London Active Screen", "LDN-ACT", "London Store", 3, DeviceStatus.ACTIVE, 120),
    ("london", "London Warning Screen", "LDN-WARN", "London Store", 3, DeviceStatus.EXPIRING_SOON, 30),
    ("london", "London Expired Screen", "LDN-EXP", "London Store", 4, DeviceStatus.EXPIRED, -5),
    ("manchester", "Manchester Suspended Screen", "MAN-SUSP", "Manchester Outlet", 5, DeviceStatus.SUSPENDED, -20),
    ("client", "Northwind Kiosk", "NW-ACT", "Northwind Store", 2, DeviceStatus.ACTIVE, 200),
    ("client", "Northwind Expired Kiosk", "NW-EXP", "Northwind Store", 2, DeviceStatus.EXPIRED, -3),
]


class Command(BaseCommand):
    """Command to create test data."""

    help = "Create test data (superuser, organizations, devices, API keys)"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--skip-superuser",
            action="store_true",
            help="Skip creating superuser",
        )

    def handle(self, *args, **options):
        """Execute the command."""
        # pylint: disable=no-member
        if OrganizationModel.objects.filter(name=HQ_NAME, kind=OrgKind.TOP.value).exists():
            self.stdout.write(self.style.WARNING(f"'{HQ_NAME}' already exists, nothing to do"))
            return

        with transaction.atomic():
            if not options["skip_superuser"]:
                self.create_superuser()

            organizations = self.create_organizations()
            device_count = self.create_devices(organizations)
            raw_keys = self.create_api_keys(organizations.values())

        self.print_summary(organizations, device_count, raw_keys)

    def create_superuser(self):
        """Create a superuser if it doesn't exist."""
        username = "admin"
        if User.objects.filter(username=username).exists():
            # pylint: disable=no-member
            self.stdout.write(self.style.WARNING(f"Superuser '{username}' already exists"))
            return

        User.objects.create_superuser(username=username, email="admin@example.com", password="admin")
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(f"Created superuser: {username} / admin"))

    def create_organizations(self):
        """Create the demo organization tree."""
        repository = DjangoOrganizationRepository()

        hq = repository.save(Organization.create(name=HQ_NAME, kind=OrgKind.TOP))
        reseller = repository.save(Organization.create(name="Channel Partners Ltd", kind=OrgKind.RESELLER))
        client = repository.save(
            Organization.create(
                name="Northwind Retail",
                kind=OrgKind.TOP,
                reseller_id=reseller.id,
                billing_mode=BillingMode.RESELLER_ONLY,
            )
        )
        organizations = {
            "hq": hq,
            "london": repository.save(
                Organization.create(name="London Flagship", kind=OrgKind.UNIT, parent_id=hq.id)
            ),
            "manchester": repository.save(
                Organization.create(name="Manchester Outlet", kind=OrgKind.UNIT, parent_id=hq.id)
            ),
            "reseller": reseller,
            "client": client,
        }
        for organization in organizations.values():
            # pylint: disable=no-member
            self.stdout.write(
                self.style.SUCCESS(f"Created organization: {organization.name} ({organization.kind})")
            )
        return organizations

    def create_devices(self, organizations) -> int:
        """Create devices in every lifecycle status."""
        repository = DjangoDeviceRepository()
        now = timezone.now()
        count = 0

        for org_key, name, serial, location, total, status, offset in DEVICE_BATCHES:
            for index in range(1, total + 1):
                device = Device.create(
                    organization_id=organizations[org_key].id,
                    name=f"{name} {index}",
                    serial_number=f"{serial}-{index}",
                    location=location,
                    expiry_date=now + timedelta(days=offset),
                )
                repository.save(device.with_status(status))
                count += 1

        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS(f"Created {count} devices"))
        return count

    def create_api_keys(self, organizations):
        """Create one API key per organization and return the raw keys."""
        raw_keys = {}
        for organization in organizations:
            # pylint: disable=no-member
            model = OrganizationModel.objects.get(id=organization.id)
            api_key = model.generate_api_key()
            raw_keys[organization.name] = api_key._raw_key  # pylint: disable=protected-access
        return raw_keys

    def print_summary(self, organizations, device_count, raw_keys):
        """Print summary of created test data."""
        # pylint: disable=no-member
        self.stdout.write(self.style.SUCCESS("\n" + "=" * 60))
        self.stdout.write(self.style.SUCCESS("Test Data Summary"))
        self.stdout.write(self.style.SUCCESS("=" * 60))

        self.stdout.write("\nSuperuser:")
        self.stdout.write("   Username: admin")
        self.stdout.write("   Password: admin")
        self.stdout.write("   URL: http://localhost:8000/admin/")

        self.stdout.write("\nOrganizations:")
        for organization in organizations.values():
            self.stdout.write(f"   {organization.name} ({organization.kind}): {organization.id}")
        self.stdout.write(f"\nDevices: {device_count}")

        self.stdout.write("\nAPI Keys:")
        for name, raw_key in raw_keys.items():
            self.stdout.write(f"   {name}: {raw_key}")
        self.stdout.write(self.style.WARNING("   Save these keys - they cannot be retrieved later!"))

        hq_key = raw_keys[organizations["hq"].name]
        self.stdout.write("\nExample API Request:")
        self.stdout.write("   curl http://localhost:8000/api/v1/dashboard/stats \\")
        self.stdout.write(f'     -H "X-API-Key: {hq_key}"')

        self.stdout.write(self.style.SUCCESS("\n" + "=" * 60 + "\n"))
