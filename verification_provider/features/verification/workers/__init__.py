"""Celery workers module - imports all task modules for autodiscovery."""

from verification_provider.features.verification.workers import tasks  # noqa: F401
from verification_provider.features.verification.workers import periodic_tasks  # noqa: F401
