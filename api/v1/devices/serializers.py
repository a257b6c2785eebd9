"""
Serializers for device endpoints.
"""

from rest_framework import serializers

from devices.application.commands.bulk_renew import MAX_RENEWAL_YEARS


class BulkRenewRequestSerializer(serializers.Serializer):
    """Serializer for bulk renew request."""

    device_ids = serializers.ListField(child=serializers.UUIDField(), min_length=1)
    years = serializers.IntegerField(required=False, default=1, min_value=1, max_value=MAX_RENEWAL_YEARS)


class CoTermRequestSerializer(serializers.Serializer):
    """Serializer for co-term request; target_date defaults to the end of the year."""

    device_ids = serializers.ListField(child=serializers.UUIDField(), min_length=1)
    target_date = serializers.DateTimeField(required=False, allow_null=True)


class DeviceListParamsSerializer(serializers.Serializer):
    """Query parameters for the device list."""

    client_id = serializers.UUIDField(required=False)


class DeviceSerializer(serializers.Serializer):
    """Serializer for DeviceDTO."""

    id = serializers.UUIDField()
    organization_id = serializers.UUIDField()
    organization_name = serializers.CharField(allow_null=True, required=False)
    name = serializers.CharField()
    serial_number = serializers.CharField()
    location = serializers.CharField(allow_blank=True)
    latitude = serializers.DecimalField(max_digits=9, decimal_places=6, allow_null=True)
    longitude = serializers.DecimalField(max_digits=9, decimal_places=6, allow_null=True)
    status = serializers.CharField()
    expiry_date = serializers.DateTimeField()
    grace_token_expiry = serializers.DateTimeField(allow_null=True)
    active_renewal_request = serializers.BooleanField()


class BatchRenewalResultSerializer(serializers.Serializer):
    """Serializer for BatchRenewalResultDTO."""

    updated_count = serializers.IntegerField()
    updated = DeviceSerializer(many=True)
