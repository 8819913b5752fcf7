"""Sequence Store - Atomic per-scope counters backing document numbers

The generator only needs two operations from its storage:
- allocate: increment-and-return in one atomic statement
- peek: read the last allocated value without writing

SQLSequenceStore implements both over the number_sequences table. Each
allocation runs in its own short transaction and is committed immediately,
so an allocated value stays consumed even if the caller's document insert
later fails.
"""

import logging
from typing import Protocol
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from document_numbering.exceptions import SequenceStoreError
from document_numbering.models import NumberSequence

logger = logging.getLogger(__name__)

DEFAULT_PREFIX_KEY = ""

# Dialects with INSERT ... ON CONFLICT DO UPDATE ... RETURNING
_UPSERT_BUILDERS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class SequenceStore(Protocol):
    """Storage contract consumed by DocumentNumberGenerator"""

    async def allocate(self, account_id: UUID, doc_type: str, period_key: str, prefix_key: str = "") -> int:
        """Atomically increment the scope's counter and return the new value (first call returns 1)"""
        ...

    async def peek(self, account_id: UUID, doc_type: str, period_key: str, prefix_key: str = "") -> int:
        """Return the scope's last allocated value (0 if never allocated) without writing"""
        ...


class SQLSequenceStore:
    """SequenceStore over the number_sequences table (PostgreSQL or SQLite)"""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """Initialize the store

        Args:
            session_factory: Factory for short-lived sessions, one per call
        """
        self.session_factory = session_factory

    def _upsert_statement(self, session: AsyncSession, account_id, doc_type, period_key, prefix_key):
        dialect_name = session.get_bind(NumberSequence).dialect.name
        builder = _UPSERT_BUILDERS.get(dialect_name)
        if builder is None:
            raise SequenceStoreError(f"Atomic allocation is not supported on '{dialect_name}' databases")

        stmt = builder(NumberSequence).values(
            account_id=account_id,
            doc_type=doc_type,
            period_key=period_key,
            prefix_key=prefix_key,
            last_value=1,
        )
        # Existing scope: increment in place, the row lock serializes concurrent callers
        stmt = stmt.on_conflict_do_update(
            index_elements=["account_id", "doc_type", "period_key", "prefix_key"],
            set_={
                "last_value": NumberSequence.last_value + 1,
                "updated_at": func.now(),
            },
        )
        return stmt.returning(NumberSequence.last_value)

    async def allocate(
        self, account_id: UUID, doc_type: str, period_key: str, prefix_key: str = DEFAULT_PREFIX_KEY
    ) -> int:
        """Allocate the next value for a scope

        Args:
            account_id: Account owning the counter
            doc_type: "invoice" or "quote"
            period_key: "global", "YYYY" or "YYYY-MM"
            prefix_key: Series discriminator (always "" for now)

        Returns:
            int: The newly allocated value (1 for a new scope)

        Raises:
            SequenceStoreError: If the database call fails. Not retried: the
                value may or may not have been committed.
        """
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    stmt = self._upsert_statement(session, account_id, doc_type, period_key, prefix_key)
                    result = await session.execute(stmt)
                    value = result.scalar_one()
        except (SQLAlchemyError, OSError) as e:
            logger.error(
                f"Failed to allocate sequence for account={account_id} doc_type={doc_type} "
                f"period={period_key}: {e}",
                exc_info=True,
            )
            raise SequenceStoreError(f"Failed to allocate sequence value: {e}") from e

        logger.debug(f"Allocated {doc_type} sequence {value} for account={account_id} period={period_key}")
        return value

    async def peek(
        self, account_id: UUID, doc_type: str, period_key: str, prefix_key: str = DEFAULT_PREFIX_KEY
    ) -> int:
        """Read the last allocated value for a scope (0 if the scope does not exist)

        May be stale relative to a concurrent allocate.

        Raises:
            SequenceStoreError: If the database call fails
        """
        stmt = select(NumberSequence.last_value).where(
            NumberSequence.account_id == account_id,
            NumberSequence.doc_type == doc_type,
            NumberSequence.period_key == period_key,
            NumberSequence.prefix_key == prefix_key,
        )
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                last_value = result.scalar_one_or_none()
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Failed to read sequence for account={account_id} doc_type={doc_type}: {e}", exc_info=True)
            raise SequenceStoreError(f"Failed to read sequence value: {e}") from e

        return last_value or 0
