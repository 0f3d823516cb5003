from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from verification_provider.platform.config import settings


def _normalize_url(db_url: str) -> str:
    if db_url.startswith("postgresql://"):
        return db_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return db_url


def _pool_options(db_url: str) -> dict:
    # SQLite drivers manage their own pool; sizing options only apply to server databases
    if db_url.startswith("sqlite"):
        return {}
    return {
        "pool_pre_ping": True,
        "pool_recycle": 1800,
        "pool_size": 20,
        "max_overflow": 30,
        "pool_timeout": 30,
    }


DATABASE_URL = _normalize_url(settings.DATABASE_URL)

engine = create_async_engine(DATABASE_URL, echo=False, **_pool_options(DATABASE_URL))
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, autoflush=False, autocommit=False)


async def get_db():
    async with SessionLocal() as session:
        yield session


# Celery tasks drive each unit of work with asyncio.run(), so every task gets a
# fresh event loop. Pooled connections are bound to the loop that opened them,
# hence the worker engine never pools.
_worker_engine = None
_worker_session_factory = None


def get_worker_session_factory() -> async_sessionmaker:
    """Get the session factory used by Celery tasks."""
    global _worker_engine, _worker_session_factory

    if _worker_engine is None:
        _worker_engine = create_async_engine(DATABASE_URL, echo=False, poolclass=NullPool)
        _worker_session_factory = async_sessionmaker(
            _worker_engine, expire_on_commit=False, autoflush=False, autocommit=False
        )

    return _worker_session_factory


@asynccontextmanager
async def worker_session() -> AsyncIterator[AsyncSession]:
    """One unit of work for a Celery task; rolled back if the task body raises."""
    factory = get_worker_session_factory()
    async with factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
