import logging
from datetime import datetime
from typing import Iterable, Protocol

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from verification_provider.features.verification.models.verification_record import VerificationRecord
from verification_provider.platform.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class VerificationRecordStore(Protocol):
    """The handful of verbs the verification services need from persistence.

    Mutations (`add`, `remove_range`) are staged and only become visible
    once `save_changes` commits them; `save_changes` returns the number of
    affected records.
    """

    def add(self, record: VerificationRecord) -> None: ...

    async def find_by_email(self, email: str) -> VerificationRecord | None: ...

    async def find_expired(self, now: datetime) -> list[VerificationRecord]: ...

    async def remove_range(self, records: Iterable[VerificationRecord]) -> None: ...

    async def save_changes(self) -> int: ...


class SqlAlchemyVerificationRecordStore:
    """VerificationRecordStore backed by one AsyncSession (one unit of work).

    Affected rows are counted as the session flushes, so changes written by
    an autoflush ahead of a query are still reported by `save_changes`.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self._flushed = 0
        event.listen(db.sync_session, "after_flush", self._count_flushed)

    def add(self, record: VerificationRecord) -> None:
        self.db.add(record)

    async def find_by_email(self, email: str) -> VerificationRecord | None:
        try:
            result = await self.db.execute(
                select(VerificationRecord).where(VerificationRecord.email == email)
            )
        except SQLAlchemyError as e:
            raise PersistenceError("find_by_email", str(e)) from e
        return result.scalars().first()

    async def find_expired(self, now: datetime) -> list[VerificationRecord]:
        try:
            result = await self.db.execute(
                select(VerificationRecord).where(VerificationRecord.expires_at <= now)
            )
        except SQLAlchemyError as e:
            raise PersistenceError("find_expired", str(e)) from e
        return list(result.scalars().all())

    async def remove_range(self, records: Iterable[VerificationRecord]) -> None:
        for record in records:
            await self.db.delete(record)

    def _count_flushed(self, session, flush_context) -> None:
        # new/dirty/deleted still hold their pre-flush state here
        modified = sum(1 for obj in session.dirty if session.is_modified(obj))
        self._flushed += len(session.new) + len(session.deleted) + modified

    async def save_changes(self) -> int:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            self._flushed = 0
            logger.error(f"Commit failed and was rolled back: {e}")
            raise PersistenceError("commit", str(e)) from e

        affected, self._flushed = self._flushed, 0
        return affected
