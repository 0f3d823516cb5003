"""
Test configuration and fixtures for the Verification Provider.

Environment is set before any application module is imported so that
settings, the Celery app and the database engine pick up test values.
"""

import os
import tempfile
from datetime import datetime, timedelta

from dotenv import load_dotenv

load_dotenv()

_tmp_dir = tempfile.mkdtemp(prefix="verification_provider_tests_")
os.environ["DATABASE_URL"] = os.getenv(
    "TEST_DATABASE_URL", f"sqlite+aiosqlite:///{os.path.join(_tmp_dir, 'test.db')}"
)
os.environ["LOG_DIR"] = os.path.join(_tmp_dir, "logs")
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"
os.environ["EMAIL_RELAY_URL"] = ""
os.environ["EMAIL_RELAY_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from verification_provider.features.verification.models.verification_record import VerificationRecord
from verification_provider.platform.db.base import Base

FIXED_NOW = datetime(2026, 10, 18, 12, 0, 0)


class InMemoryVerificationRecordStore:
    """Test double for VerificationRecordStore; staged changes apply on save_changes()."""

    def __init__(self, records=None):
        self.records = {record.email: record for record in records or []}
        self._saved = self._snapshot()
        self._pending_add = []
        self._pending_remove = []
        self.add_calls = 0
        self.remove_range_calls = 0
        self.save_changes_calls = 0

    def _snapshot(self):
        return {email: (record.code, record.expires_at) for email, record in self.records.items()}

    def add(self, record):
        self.add_calls += 1
        self._pending_add.append(record)

    async def find_by_email(self, email):
        return self.records.get(email)

    async def find_expired(self, now):
        return [record for record in self.records.values() if record.expires_at <= now]

    async def remove_range(self, records):
        self.remove_range_calls += 1
        self._pending_remove.extend(records)

    async def save_changes(self):
        self.save_changes_calls += 1
        modified = sum(
            1 for email, record in self.records.items()
            if email in self._saved and self._saved[email] != (record.code, record.expires_at)
        )
        affected = len(self._pending_add) + len(self._pending_remove) + modified
        for record in self._pending_add:
            self.records[record.email] = record
        for record in self._pending_remove:
            self.records.pop(record.email, None)
        self._pending_add.clear()
        self._pending_remove.clear()
        self._saved = self._snapshot()
        return affected


def make_record(email="test@example.com", code="123456", expires_in=timedelta(minutes=10), now=FIXED_NOW):
    return VerificationRecord(email=email, code=code, expires_at=now + expires_in)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def store_factory():
    return InMemoryVerificationRecordStore


@pytest.fixture
def memory_store():
    return InMemoryVerificationRecordStore()


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def test_session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture(scope="session")
def test_app():
    from verification_provider.main import app

    return app


@pytest.fixture
def client(test_app):
    with TestClient(test_app) as test_client:
        yield test_client
