"""Number Generator - Build invoice and quote numbers from account patterns

generate() consumes a sequence value and must be called exactly once per
document, when the document is persisted. preview() only reads the
counter: it shows what the next number would look like and may be stale
if another document is being created at the same time.

The pattern is validated on every call and the period key recomputed,
since the account's pattern may change between calls.
"""

import logging
from datetime import date, datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from document_numbering.config import settings
from document_numbering.exceptions import InvalidPatternError
from document_numbering.models import DocType
from document_numbering.schemas.pattern import PatternValidation
from document_numbering.services.pattern_grammar import compute_period_key, substitute_tokens, validate_pattern
from document_numbering.services.sequence_store import DEFAULT_PREFIX_KEY, SequenceStore, SQLSequenceStore

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS = {
    DocType.INVOICE: settings.DEFAULT_INVOICE_PATTERN,
    DocType.QUOTE: settings.DEFAULT_QUOTE_PATTERN,
}


def resolve_pattern(doc_type: DocType | str, configured: str | None) -> str:
    """Pattern to use for a document type

    Falls back to the default only when the account has not configured a
    pattern. A configured pattern is returned untouched, even if invalid,
    so that validation reports it instead of the numbering scheme changing
    silently.
    """
    if configured is None:
        return DEFAULT_PATTERNS[DocType(doc_type)]
    return configured


class DocumentNumberGenerator:
    """Generate and preview document numbers over a SequenceStore

    Stateless: every counter value lives in the store.
    """

    def __init__(self, store: SequenceStore):
        """Initialize generator

        Args:
            store: Sequence store providing allocate() and peek()
        """
        self.store = store

    def _validate(self, pattern: str) -> PatternValidation:
        validation = validate_pattern(pattern)
        if not validation.valid:
            logger.info(f"Rejected numbering pattern {pattern!r}: {validation.error}")
            raise InvalidPatternError(validation.error_code, validation.error, pattern)
        return validation

    async def generate(
        self,
        account_id: UUID,
        doc_type: DocType | str,
        pattern: str,
        on: date | None = None,
    ) -> str:
        """Allocate the next sequence value and return the formatted number

        The allocated value is never given back, even if the document
        creation that requested it fails afterwards.

        Args:
            account_id: Account creating the document
            doc_type: DocType.INVOICE or DocType.QUOTE
            pattern: Account's numbering pattern (e.g. "FA-{SEQ:3}-{YY}")
            on: Document date (defaults to now)

        Returns:
            str: Document number (e.g. "FA-001-25")

        Raises:
            InvalidPatternError: If the pattern is invalid (message is user-facing)
            SequenceStoreError: If the allocation fails
            ValueError: If doc_type is not a known document type
        """
        doc_type = DocType(doc_type)
        validation = self._validate(pattern)
        on = on or datetime.now()

        period_key = compute_period_key(validation.has_year, validation.has_month, on)
        seq_value = await self.store.allocate(account_id, doc_type.value, period_key, DEFAULT_PREFIX_KEY)

        number = substitute_tokens(pattern, on, seq_value, validation.seq_padding)
        logger.info(f"Generated {doc_type.value} number {number} for account={account_id}")
        return number

    async def preview(
        self,
        account_id: UUID,
        doc_type: DocType | str,
        pattern: str,
        on: date | None = None,
    ) -> str:
        """Return the number generate() would produce next, without allocating

        Advisory only: a concurrent generate() can take the previewed value.

        Raises:
            InvalidPatternError: If the pattern is invalid (message is user-facing)
            SequenceStoreError: If reading the counter fails
            ValueError: If doc_type is not a known document type
        """
        doc_type = DocType(doc_type)
        validation = self._validate(pattern)
        on = on or datetime.now()

        period_key = compute_period_key(validation.has_year, validation.has_month, on)
        last_value = await self.store.peek(account_id, doc_type.value, period_key, DEFAULT_PREFIX_KEY)

        return substitute_tokens(pattern, on, last_value + 1, validation.seq_padding)


async def generate_doc_number(
    session_factory: async_sessionmaker[AsyncSession],
    account_id: UUID,
    doc_type: DocType | str,
    pattern: str,
    on: date | None = None,
) -> str:
    """Convenience function to generate a document number."""
    generator = DocumentNumberGenerator(SQLSequenceStore(session_factory))
    return await generator.generate(account_id, doc_type, pattern, on)


async def preview_doc_number(
    session_factory: async_sessionmaker[AsyncSession],
    account_id: UUID,
    doc_type: DocType | str,
    pattern: str,
    on: date | None = None,
) -> str:
    """Convenience function to preview the next document number."""
    generator = DocumentNumberGenerator(SQLSequenceStore(session_factory))
    return await generator.preview(account_id, doc_type, pattern, on)
