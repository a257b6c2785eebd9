"""
Celery tasks for background processing.

The nightly lifecycle sweep runs here.
"""
import logging

from DeviceLicenseService.celery import app

from devices.application.commands.run_lifecycle_sweep import RunLifecycleSweepCommand
from devices.application.handlers.run_lifecycle_sweep_handler import RunLifecycleSweepHandler
from devices.infrastructure.repositories.django_device_repository import DjangoDeviceRepository

logger = logging.getLogger(__name__)


@app.task(bind=True, max_retries=3)
def run_lifecycle_sweep_task(self, dry_run: bool = False) -> dict:
    """
    Celery task for the license lifecycle sweep.

    Args:
        dry_run: Report the transitions without writing them

    Returns:
        Per-rule transition counts
    """
    handler = RunLifecycleSweepHandler(device_repository=DjangoDeviceRepository())
    try:
        result = handler.handle(RunLifecycleSweepCommand(dry_run=dry_run))
    except Exception as exc:
        logger.error("Lifecycle sweep failed: %s", exc, exc_info=True)
        raise self.retry(exc=exc, countdown=2 ** self.request.retries)
    return result.as_dict()
