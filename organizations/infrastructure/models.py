"""
Organization and API Key models.
"""

import hashlib
import secrets
import uuid

from django.db import models
from django.utils import timezone


class Organization(models.Model):
    """
    An operator account (TOP), one of its sub-units (UNIT), or a
    reseller managing TOP accounts on their behalf (RESELLER).
    """

    KIND_CHOICES = [
        ("TOP", "Top-level operator"),
        ("UNIT", "Managed unit"),
        ("RESELLER", "Reseller"),
    ]

    BILLING_CHOICES = [
        ("SELF_PAY", "Self pay"),
        ("RESELLER_ONLY", "Reseller only"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, help_text="Organization display name")
    kind = models.CharField(max_length=10, choices=KIND_CHOICES, db_index=True)
    parent = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="units",
        help_text="Parent TOP organization (UNIT only)",
    )
    reseller = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="clients",
        help_text="Managing reseller (TOP only)",
    )
    billing_mode = models.CharField(max_length=20, choices=BILLING_CHOICES, default="SELF_PAY")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "organizations"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["parent"]),
            models.Index(fields=["reseller"]),
        ]

    def __str__(self):
        return f"{self.name} ({self.kind})"

    def clean(self):
        """Validate the hierarchy links."""
        from django.core.exceptions import ValidationError

        if self.kind == "UNIT":
            if not self.parent_id:
                raise ValidationError("A UNIT organization requires a parent")
            if self.parent and self.parent.kind != "TOP":
                raise ValidationError("A UNIT's parent must be a TOP organization")
        elif self.parent_id:
            raise ValidationError("Only UNIT organizations can have a parent")

        if self.reseller_id:
            if self.kind != "TOP":
                raise ValidationError("Only TOP organizations can be reseller managed")
            if self.reseller and self.reseller.kind != "RESELLER":
                raise ValidationError("Reseller link must reference a RESELLER organization")

        if self.pk and self.kind:
            previous = Organization.objects.filter(pk=self.pk).values_list("kind", flat=True).first()
            if previous and previous != self.kind:
                raise ValidationError("Organization kind cannot change after creation")

    def save(self, *args, **kwargs):
        """Save organization with validation."""
        self.full_clean()
        super().save(*args, **kwargs)

    def generate_api_key(self):
        """
        Generate a new API key for this organization.

        Returns:
            ApiKey instance with _raw_key attribute set
        """
        return ApiKey.objects.create(organization=self)


class ApiKey(models.Model):
    """
    API keys identifying the acting organization.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        Organization, on_delete=models.CASCADE, related_name="api_keys"
    )
    key_prefix = models.CharField(max_length=8, editable=False)
    key_hash = models.CharField(max_length=64, editable=False, db_index=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    last_used_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "api_keys"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["key_hash"]),
        ]

    def __str__(self):
        return f"{self.organization.name} - {self.key_prefix}..."

    def save(self, *args, **kwargs):
        """Generate API key on first save."""
        if not self.key_hash:
            raw_key = secrets.token_urlsafe(32)
            self.key_prefix = raw_key[:8]
            self.key_hash = hash_api_key(raw_key)
            # Only available on the instance that created the key
            self._raw_key = raw_key
        super().save(*args, **kwargs)

    def verify_key(self, raw_key: str) -> bool:
        """
        Verify a raw API key against the stored hash.

        Args:
            raw_key: The raw API key to verify

        Returns:
            True if key matches, False otherwise
        """
        return secrets.compare_digest(self.key_hash, hash_api_key(raw_key))

    def is_valid(self) -> bool:
        """
        Check if the API key is still valid.

        Returns:
            True if key is valid, False if expired
        """
        if self.expires_at and self.expires_at < timezone.now():
            return False
        return True

    def mark_used(self):
        """Update last_used_at timestamp."""
        self.last_used_at = timezone.now()
        self.save(update_fields=["last_used_at"])


def hash_api_key(raw_key: str) -> str:
    """Return the SHA-256 hex digest stored for an API key."""
    return hashlib.sha256(raw_key.encode()).hexdigest()
