"""
Renewal request model.
"""
import uuid

from django.db import models


class RenewalRequest(models.Model):
    """
    A request from a UNIT or reseller-managed TOP to renew devices.
    """

    STATUS_CHOICES = [
        ("PENDING", "Pending"),
        ("QUOTED", "Quoted"),
        ("APPROVED", "Approved"),
        ("REJECTED", "Rejected"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    requester = models.ForeignKey(
        "organizations.Organization",
        on_delete=models.CASCADE,
        related_name="renewal_requests",
    )
    device_ids = models.JSONField(
        default=list, blank=True, help_text="Explicit device scope; empty means organization-wide"
    )
    notes = models.TextField(blank=True, default="")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="PENDING")
    quote_pdf_data = models.TextField(null=True, blank=True)
    response_message = models.TextField(null=True, blank=True)
    responded_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "renewal_requests"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["requester", "status"]),
            models.Index(fields=["status", "created_at"]),
        ]

    def __str__(self):
        return f"Renewal request {self.id} ({self.status})"
