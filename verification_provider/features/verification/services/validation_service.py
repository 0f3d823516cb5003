import logging
from datetime import datetime
from typing import Callable

from verification_provider.features.verification.schemas.verification import ValidateRequest
from verification_provider.features.verification.services.record_store import VerificationRecordStore
from verification_provider.features.verification.utils.clock import is_expired, utc_now
from verification_provider.platform.exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)


class ValidationService:
    """Checks a submitted code against the stored record. Read-only."""

    def __init__(self, store: VerificationRecordStore, *, clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.clock = clock

    async def validate_code(self, request: ValidateRequest | None) -> bool:
        if request is None:
            raise InvalidArgumentError("request")

        record = await self.store.find_by_email(request.email)

        if record is None:
            logger.info(f"No verification code on record for {request.email}")
            return False

        if record.code != request.code:
            logger.info(f"Verification code mismatch for {request.email}")
            return False

        if is_expired(record.expires_at, self.clock()):
            logger.info(f"Verification code for {request.email} expired at {record.expires_at.isoformat()}")
            return False

        logger.info(f"Verification code accepted for {request.email}")
        return True
