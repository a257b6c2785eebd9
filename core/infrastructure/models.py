"""
Shared models.
"""
import uuid

from django.db import models


class AuditLog(models.Model):
    """
    Immutable audit trail of device and renewal request changes.
    """

    ACTION_CHOICES = [
        ("device_renewed", "Device Renewed"),
        ("grace_token_issued", "Grace Token Issued"),
        ("lifecycle_sweep_completed", "Lifecycle Sweep Completed"),
        ("renewal_requested", "Renewal Requested"),
        ("renewal_quoted", "Renewal Quoted"),
        ("renewal_approved", "Renewal Approved"),
        ("renewal_rejected", "Renewal Rejected"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    entity_type = models.CharField(max_length=50)
    entity_id = models.CharField(max_length=64)
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    changes = models.JSONField(default=dict, help_text="Details of the change")
    actor = models.CharField(max_length=255, help_text="Who performed the action")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "audit_logs"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["entity_type", "entity_id"]),
            models.Index(fields=["created_at"]),
            models.Index(fields=["action"]),
        ]

    def __str__(self):
        return f"{self.action} - {self.entity_type} {self.entity_id}"
