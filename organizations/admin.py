"""
Django admin configuration for organizations app.
"""

from django.contrib import admin
from django.utils.html import format_html

from organizations.infrastructure.models import ApiKey, Organization


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    """Admin interface for Organization model."""

    list_display = ["name", "kind", "parent", "reseller", "billing_mode", "created_at"]
    list_filter = ["kind", "billing_mode", "created_at"]
    search_fields = ["name", "parent__name", "reseller__name"]
    readonly_fields = ["id", "created_at", "updated_at"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "name", "kind", "billing_mode"),
            },
        ),
        (
            "Hierarchy",
            {
                "fields": ("parent", "reseller"),
                "description": "UNITs have a parent TOP. A TOP may be managed by a RESELLER.",
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

    def get_readonly_fields(self, request, obj=None):
        """Kind is fixed once the organization exists."""
        if obj is not None:
            return [*self.readonly_fields, "kind"]
        return self.readonly_fields

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("parent", "reseller")


@admin.register(ApiKey)
class ApiKeyAdmin(admin.ModelAdmin):
    """Admin interface for ApiKey model."""

    list_display = [
        "organization",
        "key_prefix_display",
        "is_valid_display",
        "expires_at",
        "last_used_at",
        "created_at",
    ]
    list_filter = ["expires_at", "created_at"]
    search_fields = ["key_prefix", "organization__name"]
    readonly_fields = [
        "id",
        "key_prefix",
        "key_hash",
        "created_at",
        "last_used_at",
        "is_valid_display",
    ]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "organization"),
            },
        ),
        (
            "Key Information",
            {
                "fields": ("key_prefix", "key_hash"),
                "description": "The raw key is only shown once when created.",
            },
        ),
        (
            "Validity",
            {
                "fields": ("expires_at", "is_valid_display"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "last_used_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def key_prefix_display(self, obj):
        """Display key prefix with ellipsis."""
        return f"{obj.key_prefix}..."

    key_prefix_display.short_description = "Key Prefix"

    def is_valid_display(self, obj):
        """Display validity status with color."""
        if obj.is_valid():
            return format_html('<span style="color: green;">{}</span>', "Valid")
        return format_html('<span style="color: red;">{}</span>', "Expired")

    is_valid_display.short_description = "Status"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("organization")

    def save_model(self, request, obj, form, change):
        """Save model and show raw key if new."""
        super().save_model(request, obj, form, change)
        if not change and hasattr(obj, "_raw_key"):
            self.message_user(
                request,
                f"API Key created! Raw key: {obj._raw_key} "  # pylint: disable=protected-access
                "(Save this - it won't be shown again)",
                level="WARNING",
            )
