import asyncio

from verification_provider.features.verification.services.cleanup_service import CleanupService
from verification_provider.features.verification.services.record_store import SqlAlchemyVerificationRecordStore
from verification_provider.platform.db.session import SessionLocal


async def purge_expired_codes() -> int:
    async with SessionLocal() as db:
        return await CleanupService(SqlAlchemyVerificationRecordStore(db)).remove_expired_records()


if __name__ == "__main__":
    removed = asyncio.run(purge_expired_codes())
    print(f"Removed {removed} expired verification code(s)")
