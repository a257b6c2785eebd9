"""
Serializers for renewal request endpoints.
"""

from rest_framework import serializers

from api.v1.devices.serializers import DeviceSerializer


class CreateRenewalRequestSerializer(serializers.Serializer):
    """Serializer for creating a renewal request."""

    device_ids = serializers.ListField(child=serializers.UUIDField(), required=False, default=list)
    notes = serializers.CharField(required=False, allow_blank=True, default="", max_length=2000)


class RespondWithQuoteSerializer(serializers.Serializer):
    """Serializer for a reseller quote."""

    quote_pdf_data = serializers.CharField()
    response_message = serializers.CharField(required=False, allow_blank=True, default="")


class RenewalRequestSerializer(serializers.Serializer):
    """Serializer for RenewalRequestDTO."""

    id = serializers.UUIDField()
    requester_org_id = serializers.UUIDField()
    requester_org_name = serializers.CharField(allow_null=True)
    status = serializers.CharField()
    device_ids = serializers.ListField(child=serializers.UUIDField())
    notes = serializers.CharField(allow_blank=True)
    has_quote = serializers.BooleanField()
    response_message = serializers.CharField(allow_null=True)
    responded_at = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField()


class ApprovalResultSerializer(serializers.Serializer):
    """Serializer for ApprovalResultDTO."""

    request = RenewalRequestSerializer()
    renewed_count = serializers.IntegerField()
    renewed = DeviceSerializer(many=True)


class QuoteSerializer(serializers.Serializer):
    """Serializer for QuoteDTO."""

    request_id = serializers.UUIDField()
    quote_pdf_data = serializers.CharField()
    response_message = serializers.CharField(allow_null=True)
    responded_at = serializers.DateTimeField(allow_null=True)
