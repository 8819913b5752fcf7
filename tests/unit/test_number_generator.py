"""Unit Tests for DocumentNumberGenerator

The sequence store is replaced by in-memory fakes (see conftest.py), so these
tests only check orchestration: validation first, period key, store calls,
substitution and error propagation.
"""

from datetime import date, datetime

import pytest

from document_numbering.config import settings
from document_numbering.exceptions import InvalidPatternError, PatternErrorCode, SequenceStoreError
from document_numbering.models import DocType
from document_numbering.services import DEFAULT_PATTERNS, DocumentNumberGenerator, resolve_pattern, validate_pattern

pytestmark = pytest.mark.unit


class TestGenerate:
    """Mutating path"""

    @pytest.mark.asyncio
    async def test_first_number_of_scope(self, memory_store, account_id):
        generator = DocumentNumberGenerator(memory_store)

        number = await generator.generate(account_id, DocType.INVOICE, "FA-{SEQ:3}-{YY}", date(2025, 3, 1))

        assert number == "FA-001-25"
        assert memory_store.calls == [("allocate", account_id, "invoice", "2025", "")]

    @pytest.mark.asyncio
    async def test_consecutive_numbers(self, memory_store, account_id):
        generator = DocumentNumberGenerator(memory_store)
        on = date(2025, 3, 1)

        numbers = [await generator.generate(account_id, "quote", "DEV-{SEQ:3}-{YY}", on) for _ in range(3)]

        assert numbers == ["DEV-001-25", "DEV-002-25", "DEV-003-25"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "pattern,expected_period",
        [
            ("{SEQ:4}", "global"),
            ("{MM}-{SEQ:4}", "global"),
            ("INV-{YYYY}-{SEQ:4}", "2025"),
            ("F{YY}{MM}-{SEQ:3}", "2025-01"),
        ],
    )
    async def test_period_key_follows_tokens(self, memory_store, account_id, pattern, expected_period):
        generator = DocumentNumberGenerator(memory_store)

        await generator.generate(account_id, DocType.INVOICE, pattern, date(2025, 1, 15))

        assert memory_store.calls[0][3] == expected_period

    @pytest.mark.asyncio
    async def test_pattern_change_switches_scope(self, memory_store, account_id):
        generator = DocumentNumberGenerator(memory_store)
        on = date(2025, 1, 15)

        assert await generator.generate(account_id, DocType.INVOICE, "FA-{SEQ:3}-{YY}", on) == "FA-001-25"
        assert await generator.generate(account_id, DocType.INVOICE, "F{YY}{MM}-{SEQ:3}", on) == "F2501-001"
        assert await generator.generate(account_id, DocType.INVOICE, "FA/{SEQ:3}/{YY}", on) == "FA/002/25"

    @pytest.mark.asyncio
    async def test_defaults_to_today(self, memory_store, account_id):
        generator = DocumentNumberGenerator(memory_store)

        number = await generator.generate(account_id, DocType.INVOICE, "{YYYY}-{SEQ:1}")

        assert number.startswith(f"{datetime.now().year}-")

    @pytest.mark.asyncio
    async def test_invalid_pattern_raises_verbatim_error(self, memory_store, account_id):
        generator = DocumentNumberGenerator(memory_store)

        with pytest.raises(InvalidPatternError) as exc_info:
            await generator.generate(account_id, DocType.INVOICE, "FA-{SEQ:7}")

        assert exc_info.value.code == PatternErrorCode.INVALID_COUNTER_WIDTH
        assert str(exc_info.value) == validate_pattern("FA-{SEQ:7}").error
        assert exc_info.value.pattern == "FA-{SEQ:7}"
        assert memory_store.calls == []

    @pytest.mark.asyncio
    async def test_invalid_pattern_is_a_value_error(self, memory_store, account_id):
        generator = DocumentNumberGenerator(memory_store)

        with pytest.raises(ValueError):
            await generator.generate(account_id, DocType.INVOICE, "FA-{YY}")

    @pytest.mark.asyncio
    async def test_unknown_doc_type(self, memory_store, account_id):
        generator = DocumentNumberGenerator(memory_store)

        with pytest.raises(ValueError):
            await generator.generate(account_id, "credit_note", "AV-{SEQ:3}")
        assert memory_store.calls == []

    @pytest.mark.asyncio
    async def test_store_failure_propagates_without_retry(self, broken_store, account_id):
        generator = DocumentNumberGenerator(broken_store)

        with pytest.raises(SequenceStoreError):
            await generator.generate(account_id, DocType.INVOICE, "FA-{SEQ:3}-{YY}")

        assert broken_store.attempts == 1


class TestPreview:
    """Read-only path"""

    @pytest.mark.asyncio
    async def test_preview_unseeded_scope(self, memory_store, account_id):
        generator = DocumentNumberGenerator(memory_store)

        number = await generator.preview(account_id, DocType.INVOICE, "FA-{SEQ:3}-{YY}", date(2025, 6, 1))

        assert number == "FA-001-25"
        assert memory_store.calls == [("peek", account_id, "invoice", "2025", "")]
        assert memory_store.counters == {}

    @pytest.mark.asyncio
    async def test_preview_is_idempotent_and_matches_next_generate(self, memory_store, account_id):
        generator = DocumentNumberGenerator(memory_store)
        on = date(2025, 6, 1)
        await generator.generate(account_id, DocType.QUOTE, "DEV-{SEQ:3}-{YY}", on)

        previews = {await generator.preview(account_id, DocType.QUOTE, "DEV-{SEQ:3}-{YY}", on) for _ in range(5)}

        assert previews == {"DEV-002-25"}
        assert await generator.generate(account_id, DocType.QUOTE, "DEV-{SEQ:3}-{YY}", on) == "DEV-002-25"

    @pytest.mark.asyncio
    async def test_preview_rejects_invalid_pattern(self, memory_store, account_id):
        generator = DocumentNumberGenerator(memory_store)

        with pytest.raises(InvalidPatternError) as exc_info:
            await generator.preview(account_id, DocType.INVOICE, "FA-{SEQ:3}-{SEQ:2}")

        assert exc_info.value.code == PatternErrorCode.AMBIGUOUS_COUNTER_TOKEN
        assert memory_store.calls == []

    @pytest.mark.asyncio
    async def test_preview_store_failure_propagates(self, broken_store, account_id):
        generator = DocumentNumberGenerator(broken_store)

        with pytest.raises(SequenceStoreError):
            await generator.preview(account_id, DocType.INVOICE, "FA-{SEQ:3}-{YY}")


class TestDefaultPatterns:
    """First-time setup patterns"""

    def test_defaults_come_from_settings(self):
        assert DEFAULT_PATTERNS[DocType.INVOICE] == settings.DEFAULT_INVOICE_PATTERN == "FA-{SEQ:3}-{YY}"
        assert DEFAULT_PATTERNS[DocType.QUOTE] == settings.DEFAULT_QUOTE_PATTERN == "DEV-{SEQ:3}-{YY}"

    @pytest.mark.parametrize("doc_type", list(DocType))
    def test_defaults_are_valid(self, doc_type):
        assert validate_pattern(DEFAULT_PATTERNS[doc_type]).valid

    def test_resolve_unconfigured_uses_default(self):
        assert resolve_pattern("quote", None) == "DEV-{SEQ:3}-{YY}"

    def test_resolve_keeps_configured_pattern(self):
        assert resolve_pattern(DocType.INVOICE, "INV-{YYYY}-{SEQ:4}") == "INV-{YYYY}-{SEQ:4}"

    @pytest.mark.asyncio
    async def test_resolve_never_replaces_invalid_pattern(self, memory_store, account_id):
        pattern = resolve_pattern(DocType.INVOICE, "")
        assert pattern == ""

        with pytest.raises(InvalidPatternError) as exc_info:
            await DocumentNumberGenerator(memory_store).generate(account_id, DocType.INVOICE, pattern)
        assert exc_info.value.code == PatternErrorCode.EMPTY_PATTERN
