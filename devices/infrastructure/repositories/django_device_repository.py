"""
Django implementation of DeviceRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from django.db.models import Count
from django.utils import timezone

from core.domain.value_objects import DeviceStatus
from devices.domain.device import Device
from devices.domain.lifecycle import SweepRule
from devices.infrastructure.models import Device as DeviceModel
from devices.ports.device_repository import DeviceRepository


class DjangoDeviceRepository(DeviceRepository):
    """
    Django ORM implementation of DeviceRepository.

    Reads made with ``for_update=True`` take row locks so two
    transactions renewing the same device serialize on it.
    """

    def _to_domain(self, model: DeviceModel) -> Device:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Device model

        Returns:
            Device domain entity
        """
        return Device(
            id=model.id,
            organization_id=model.organization_id,
            name=model.name,
            serial_number=model.serial_number,
            location=model.location,
            status=DeviceStatus(model.status),
            expiry_date=model.expiry_date,
            grace_token_expiry=model.grace_token_expiry,
            latitude=model.latitude,
            longitude=model.longitude,
            created_at=model.created_at,
        )

    def save(self, device: Device) -> Device:
        """
        Save a device entity.

        Args:
            device: Device entity to save

        Returns:
            Saved device entity
        """
        # pylint: disable=no-member
        model, _created = DeviceModel.objects.update_or_create(
            id=device.id,
            defaults={
                "organization_id": device.organization_id,
                "name": device.name,
                "serial_number": device.serial_number,
                "location": device.location,
                "latitude": device.latitude,
                "longitude": device.longitude,
                "status": device.status.value,
                "expiry_date": device.expiry_date,
                "grace_token_expiry": device.grace_token_expiry,
            },
        )
        return self._to_domain(model)

    def find_by_id(self, device_id: uuid.UUID, for_update: bool = False) -> Optional[Device]:
        """
        Find a device by ID.

        Args:
            device_id: Device UUID
            for_update: Lock the row for the rest of the transaction

        Returns:
            Device entity or None if not found
        """
        # pylint: disable=no-member
        queryset = DeviceModel.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        model = queryset.filter(id=device_id).first()
        return self._to_domain(model) if model else None

    def find_by_org_ids(
        self,
        org_ids: Iterable[uuid.UUID],
        statuses: Optional[Iterable[DeviceStatus]] = None,
        device_ids: Optional[Iterable[uuid.UUID]] = None,
        for_update: bool = False,
    ) -> List[Device]:
        """
        List devices owned by a set of organizations, by ascending expiry.

        Args:
            org_ids: Owning organization UUIDs
            statuses: Optional status filter
            device_ids: Optional device ID filter
            for_update: Lock the rows for the rest of the transaction

        Returns:
            List of Device entities
        """
        # pylint: disable=no-member
        queryset = DeviceModel.objects.filter(organization_id__in=list(org_ids))
        if statuses is not None:
            queryset = queryset.filter(status__in=[status.value for status in statuses])
        if device_ids is not None:
            queryset = queryset.filter(id__in=list(device_ids))
        if for_update:
            queryset = queryset.select_for_update()
        return [self._to_domain(model) for model in queryset.order_by("expiry_date", "id")]

    def find_expiring_between(
        self, org_ids: Iterable[uuid.UUID], start: datetime, end: datetime
    ) -> List[Device]:
        """
        List devices whose expiry falls in ``[start, end]``.

        Args:
            org_ids: Owning organization UUIDs
            start: Inclusive lower bound
            end: Inclusive upper bound

        Returns:
            List of Device entities
        """
        # pylint: disable=no-member
        queryset = DeviceModel.objects.filter(
            organization_id__in=list(org_ids),
            expiry_date__gte=start,
            expiry_date__lte=end,
        ).order_by("expiry_date")
        return [self._to_domain(model) for model in queryset]

    def count_by_status(self, org_ids: Iterable[uuid.UUID]) -> Dict[DeviceStatus, int]:
        """
        Count devices per status within a set of organizations.

        Args:
            org_ids: Owning organization UUIDs

        Returns:
            Mapping with an entry for every DeviceStatus
        """
        counts = {status: 0 for status in DeviceStatus}
        # pylint: disable=no-member
        rows = (
            DeviceModel.objects.filter(organization_id__in=list(org_ids))
            .values("status")
            .annotate(total=Count("id"))
        )
        for row in rows:
            counts[DeviceStatus(row["status"])] = row["total"]
        return counts

    def apply_sweep_rule(self, rule: SweepRule, now: datetime) -> int:
        """
        Apply one lifecycle rule as a single bulk UPDATE.

        Args:
            rule: Sweep rule
            now: Reference instant

        Returns:
            Number of devices updated
        """
        lower, upper = rule.bounds(now)
        # pylint: disable=no-member
        queryset = DeviceModel.objects.filter(
            status__in=[status.value for status in rule.from_statuses],
            expiry_date__lte=upper,
        )
        if lower is not None:
            queryset = queryset.filter(expiry_date__gt=lower)
        if rule.requires_no_grace_token:
            queryset = queryset.filter(grace_token_expiry__isnull=True)

        updates = {}
        for attribute, value in rule.changes(now).items():
            updates[attribute] = value.value if isinstance(value, DeviceStatus) else value
        # update() bypasses auto_now
        updates["updated_at"] = timezone.now()
        return queryset.update(**updates)
