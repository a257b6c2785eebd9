"""
Event handlers for domain events.

These handlers process committed domain events for side effects like
audit logging and business metrics.
"""

import logging

from core import metrics
from core.domain.events import DomainEvent, EventHandler
from devices.domain.events import DeviceRenewed, GraceTokenIssued, LifecycleSweepCompleted
from renewals.domain.events import (
    RenewalApproved,
    RenewalQuoted,
    RenewalRejected,
    RenewalRequested,
)

logger = logging.getLogger(__name__)

# event type -> (entity type, audit action)
AUDIT_ACTIONS = {
    DeviceRenewed: ("device", "device_renewed"),
    GraceTokenIssued: ("device", "grace_token_issued"),
    LifecycleSweepCompleted: ("sweep", "lifecycle_sweep_completed"),
    RenewalRequested: ("renewal_request", "renewal_requested"),
    RenewalQuoted: ("renewal_request", "renewal_quoted"),
    RenewalApproved: ("renewal_request", "renewal_approved"),
    RenewalRejected: ("renewal_request", "renewal_rejected"),
}


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Persists one AuditLog row per event.
    """

    def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        from core.infrastructure.models import AuditLog

        entity_type, action = AUDIT_ACTIONS[type(event)]
        # pylint: disable=no-member
        AuditLog.objects.create(
            entity_type=entity_type,
            entity_id=event.aggregate_id,
            action=action,
            changes=event.payload(),
            actor=event.actor,
        )
        logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra={
                "event_id": str(event.event_id),
                "event_type": event.event_type,
                "aggregate_id": event.aggregate_id,
                "occurred_at": event.occurred_at.isoformat(),
            },
        )


class MetricsEventHandler(EventHandler):
    """
    Event handler for business metrics.

    Increments Prometheus counters for renewals, grace tokens, sweeps and
    request transitions.
    """

    REQUEST_STATUSES = {
        RenewalRequested: "PENDING",
        RenewalQuoted: "QUOTED",
        RenewalApproved: "APPROVED",
        RenewalRejected: "REJECTED",
    }

    def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for metrics.

        Args:
            event: Domain event
        """
        if isinstance(event, DeviceRenewed):
            metrics.device_renewals_total.labels(operation=event.operation).inc()
        elif isinstance(event, GraceTokenIssued):
            metrics.grace_tokens_issued_total.inc()
        elif isinstance(event, LifecycleSweepCompleted):
            metrics.lifecycle_sweep_runs_total.inc()
            for rule, count in event.counts.items():
                metrics.lifecycle_sweep_transitions_total.labels(rule=rule).inc(count)
        elif type(event) in self.REQUEST_STATUSES:
            status = self.REQUEST_STATUSES[type(event)]
            metrics.renewal_request_transitions_total.labels(status=status).inc()


def register_event_handlers():
    """Register all event handlers with the event bus."""
    from core.infrastructure.events import event_bus

    audit_handler = AuditLogEventHandler()
    metrics_handler = MetricsEventHandler()

    for event_type in AUDIT_ACTIONS:
        event_bus.subscribe(event_type, audit_handler)
        event_bus.subscribe(event_type, metrics_handler)

    logger.info("Event handlers registered")
