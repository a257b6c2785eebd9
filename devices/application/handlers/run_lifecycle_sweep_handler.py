"""
Lifecycle sweep handler.

Runs every sweep rule in one transaction. A dry run executes the same
updates and then rolls them back, so the reported counts are exact.
The handler is synchronous because a Django atomic block cannot span
async code.
"""
import logging
from datetime import timedelta
from typing import Optional

from django.conf import settings
from django.utils import timezone

from core.domain.dates import Clock
from core.infrastructure.database import DjangoUnitOfWork
from core.infrastructure.events import event_bus
from core.ports.unit_of_work import UnitOfWork
from devices.application.commands.run_lifecycle_sweep import RunLifecycleSweepCommand
from devices.domain.device import GRACE_PERIOD
from devices.domain.events import LifecycleSweepCompleted
from devices.domain.lifecycle import (
    SUSPENSION_CUTOFF,
    WARNING_WINDOW,
    LicenseLifecycleEngine,
    SweepResult,
)
from devices.ports.device_repository import DeviceRepository

logger = logging.getLogger(__name__)


def build_lifecycle_engine() -> LicenseLifecycleEngine:
    """
    Build the engine, honouring ``LICENSE_LIFECYCLE`` overrides.

    Recognised keys: WARNING_WINDOW_DAYS, GRACE_PERIOD_DAYS,
    SUSPENSION_CUTOFF_DAYS.
    """
    config = getattr(settings, "LICENSE_LIFECYCLE", {})

    def days(key: str, default: timedelta) -> timedelta:
        return timedelta(days=config[key]) if key in config else default

    return LicenseLifecycleEngine(
        warning_window=days("WARNING_WINDOW_DAYS", WARNING_WINDOW),
        grace_period=days("GRACE_PERIOD_DAYS", GRACE_PERIOD),
        suspension_cutoff=days("SUSPENSION_CUTOFF_DAYS", SUSPENSION_CUTOFF),
    )


class RunLifecycleSweepHandler:
    """Handler for RunLifecycleSweepCommand."""

    def __init__(
        self,
        device_repository: DeviceRepository,
        unit_of_work: Optional[UnitOfWork] = None,
        engine: Optional[LicenseLifecycleEngine] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize handler with repository and engine."""
        self.device_repository = device_repository
        self.unit_of_work = unit_of_work or DjangoUnitOfWork()
        self.engine = engine or build_lifecycle_engine()
        self.clock = clock or timezone.now

    def handle(self, command: RunLifecycleSweepCommand) -> SweepResult:
        """
        Handle run lifecycle sweep command.

        Args:
            command: RunLifecycleSweepCommand

        Returns:
            SweepResult with per-rule counts
        """
        now = self.clock()
        logger.info("Starting lifecycle sweep at %s (dry_run=%s)", now.isoformat(), command.dry_run)

        with self.unit_of_work:
            result = self.engine.sweep(self.device_repository, now)
            if command.dry_run:
                self.unit_of_work.rollback()
        result.dry_run = command.dry_run

        if not command.dry_run:
            event_bus.publish(LifecycleSweepCompleted(swept_at=now, counts=dict(result.counts)))

        logger.info("Lifecycle sweep finished", extra=result.as_dict())
        return result
