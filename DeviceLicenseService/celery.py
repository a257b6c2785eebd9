"""
Celery configuration for background tasks.

Runs the nightly license lifecycle sweep.
"""
import os

from celery import Celery
from celery.schedules import crontab

# Set default Django settings module
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "DeviceLicenseService.settings.dev")

app = Celery("DeviceLicenseService")

# Load configuration from Django settings
app.config_from_object("django.conf:settings", namespace="CELERY")

# Auto-discover tasks from all installed apps
app.autodiscover_tasks()

app.conf.beat_schedule = {
    "run-lifecycle-sweep": {
        "task": "core.tasks.run_lifecycle_sweep_task",
        "schedule": crontab(hour=0, minute=0),
    },
}
