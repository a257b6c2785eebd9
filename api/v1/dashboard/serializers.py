"""
Serializers for dashboard endpoints.
"""

from rest_framework import serializers


class DashboardSummarySerializer(serializers.Serializer):
    """Headline counts of the dashboard."""

    active = serializers.IntegerField()
    warning = serializers.IntegerField()
    critical = serializers.IntegerField()
    expired = serializers.IntegerField()
    suspended = serializers.IntegerField()


class TimelineEntrySerializer(serializers.Serializer):
    """Serializer for TimelineEntryDTO."""

    month = serializers.CharField()
    count = serializers.IntegerField()


class DashboardStatsSerializer(serializers.Serializer):
    """Serializer for DashboardStatsDTO."""

    summary = DashboardSummarySerializer(source="*")
    counts = serializers.DictField(child=serializers.IntegerField())
    timeline = TimelineEntrySerializer(many=True)


class ResellerClientSerializer(serializers.Serializer):
    """Serializer for ResellerClientDTO."""

    id = serializers.UUIDField()
    name = serializers.CharField()
    total_devices = serializers.IntegerField()
    at_risk = serializers.IntegerField()
