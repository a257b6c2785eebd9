"""
Django admin configuration for devices app.
"""

from django.contrib import admin

from devices.infrastructure.models import Device


@admin.register(Device)
class DeviceAdmin(admin.ModelAdmin):
    """Admin interface for Device model."""

    list_display = [
        "name",
        "serial_number",
        "organization",
        "status",
        "expiry_date",
        "grace_token_expiry",
    ]
    list_filter = ["status", "organization"]
    search_fields = ["name", "serial_number", "location", "organization__name"]
    readonly_fields = ["id", "created_at", "updated_at"]
    date_hierarchy = "expiry_date"
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "organization", "name", "serial_number"),
            },
        ),
        (
            "Location",
            {
                "fields": ("location", "latitude", "longitude"),
            },
        ),
        (
            "License",
            {
                "fields": ("status", "expiry_date", "grace_token_expiry"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("organization")
