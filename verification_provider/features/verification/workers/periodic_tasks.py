"""
Celery periodic tasks for verification record maintenance.

This module contains tasks that run on a schedule via Celery Beat.
"""
import asyncio
import logging
from datetime import datetime, timezone

from celery import shared_task

from verification_provider.features.verification.services.cleanup_service import CleanupService
from verification_provider.features.verification.services.record_store import SqlAlchemyVerificationRecordStore
from verification_provider.platform.celery_app import REMOVE_EXPIRED_RECORDS_TASK
from verification_provider.platform.db.session import worker_session

logger = logging.getLogger(__name__)


async def _remove_expired_records() -> int:
    async with worker_session() as db:
        return await CleanupService(SqlAlchemyVerificationRecordStore(db)).remove_expired_records()


@shared_task(bind=True, name=REMOVE_EXPIRED_RECORDS_TASK)
def remove_expired_verification_records(self):
    """
    Delete expired verification codes.

    Runs every CLEANUP_INTERVAL_SECONDS via Celery Beat. Failures are raised
    so the worker records them; the next tick simply tries again.
    """
    logger.info("Removing expired verification records...")

    try:
        removed = asyncio.run(_remove_expired_records())
    except Exception as e:
        logger.error(f"Error in remove_expired_verification_records: {e}")
        raise

    return {
        "status": "success",
        "removed": removed,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
