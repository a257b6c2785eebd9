"""
Device model.
"""
import uuid

from django.db import models


class Device(models.Model):
    """
    A physical device whose license expires at ``expiry_date``.
    Devices belong to an organization.
    """

    STATUS_CHOICES = [
        ("ACTIVE", "Active"),
        ("EXPIRING_SOON", "Expiring soon"),
        ("EXPIRED", "Expired"),
        ("SUSPENDED", "Suspended"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    organization = models.ForeignKey(
        "organizations.Organization", on_delete=models.CASCADE, related_name="devices"
    )
    name = models.CharField(max_length=255)
    serial_number = models.CharField(max_length=100, unique=True)
    location = models.CharField(max_length=255, blank=True, default="")
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="ACTIVE")
    expiry_date = models.DateTimeField()
    grace_token_expiry = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "devices"
        ordering = ["expiry_date"]
        indexes = [
            models.Index(fields=["organization", "status"]),
            models.Index(fields=["status", "expiry_date"]),
            models.Index(fields=["expiry_date"]),
        ]

    def __str__(self):
        return f"{self.name} ({self.serial_number})"
