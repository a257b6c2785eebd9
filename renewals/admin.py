"""
Django admin configuration for renewals app.
"""

from django.contrib import admin

from renewals.infrastructure.models import RenewalRequest


@admin.register(RenewalRequest)
class RenewalRequestAdmin(admin.ModelAdmin):
    """Admin interface for RenewalRequest model."""

    list_display = ["id", "requester", "status", "device_count", "created_at", "responded_at"]
    list_filter = ["status", "created_at"]
    search_fields = ["requester__name", "notes"]
    readonly_fields = ["id", "created_at", "updated_at", "responded_at"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "requester", "status", "device_ids", "notes"),
            },
        ),
        (
            "Quote",
            {
                "fields": ("quote_pdf_data", "response_message", "responded_at"),
                "classes": ("collapse",),
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

    def device_count(self, obj):
        """Display the number of named devices, or 'all' for organization-wide requests."""
        return len(obj.device_ids) if obj.device_ids else "all"

    device_count.short_description = "Devices"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("requester")
