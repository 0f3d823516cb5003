import logging
from datetime import datetime
from typing import Callable

from verification_provider.features.verification.services.record_store import VerificationRecordStore
from verification_provider.features.verification.utils.clock import utc_now

logger = logging.getLogger(__name__)


class CleanupService:
    """Removes verification records whose expiry has passed."""

    def __init__(self, store: VerificationRecordStore, *, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.clock = clock

    async def remove_expired_records(self) -> int:
        """
        Delete every record with expires_at <= now in one bulk removal.

        Always removes and commits exactly once, even when nothing has
        expired, so a scheduler sees the same behaviour on every tick.

        Returns:
            Number of records removed
        """
        now = self.clock()
        expired = await self.store.find_expired(now)

        await self.store.remove_range(expired)
        await self.store.save_changes()

        if expired:
            logger.info(f"Removed {len(expired)} expired verification record(s)")
        else:
            logger.debug("No expired verification records to remove")
        return len(expired)
