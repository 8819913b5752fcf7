"""
Pytest Configuration and Fixtures
Shared fixtures for the database, sequence stores and generators
"""

from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

import document_numbering.models  # noqa: F401
from document_numbering.database import Base
from document_numbering.exceptions import SequenceStoreError
from document_numbering.services import DocumentNumberGenerator, SQLSequenceStore


class InMemorySequenceStore:
    """Dict-backed store recording every call (no await between read and write)"""

    def __init__(self):
        self.counters = {}
        self.calls = []

    async def allocate(self, account_id, doc_type, period_key, prefix_key=""):
        self.calls.append(("allocate", account_id, doc_type, period_key, prefix_key))
        key = (account_id, doc_type, period_key, prefix_key)
        self.counters[key] = self.counters.get(key, 0) + 1
        return self.counters[key]

    async def peek(self, account_id, doc_type, period_key, prefix_key=""):
        self.calls.append(("peek", account_id, doc_type, period_key, prefix_key))
        return self.counters.get((account_id, doc_type, period_key, prefix_key), 0)


class BrokenSequenceStore:
    """Store whose backend is unreachable"""

    def __init__(self):
        self.attempts = 0

    async def allocate(self, account_id, doc_type, period_key, prefix_key=""):
        self.attempts += 1
        raise SequenceStoreError("Failed to allocate sequence value: connection refused")

    async def peek(self, account_id, doc_type, period_key, prefix_key=""):
        self.attempts += 1
        raise SequenceStoreError("Failed to read sequence value: connection refused")


@pytest.fixture
def account_id():
    return uuid4()


@pytest.fixture
def memory_store():
    return InMemorySequenceStore()


@pytest.fixture
def broken_store():
    return BrokenSequenceStore()


@pytest.fixture
def database_url(tmp_path):
    """File-backed SQLite database (separate connections per session, like PostgreSQL)"""
    return f"sqlite+aiosqlite:///{tmp_path / 'numbering_test.db'}"


@pytest_asyncio.fixture(scope="function")
async def db_engine(database_url):
    """Create a test database engine with a clean schema"""
    engine = create_async_engine(database_url, poolclass=NullPool, echo=False, connect_args={"timeout": 30})

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(db_engine):
    """Session factory bound to the test engine"""
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def sequence_store(session_factory):
    return SQLSequenceStore(session_factory)


@pytest.fixture
def generator(sequence_store):
    return DocumentNumberGenerator(sequence_store)
