"""Services"""

from document_numbering.services.number_generator import (
    DEFAULT_PATTERNS,
    DocumentNumberGenerator,
    generate_doc_number,
    preview_doc_number,
    resolve_pattern,
)
from document_numbering.services.pattern_grammar import (
    PATTERN_EXAMPLES,
    compute_period_key,
    substitute_tokens,
    validate_pattern,
)
from document_numbering.services.sequence_store import SequenceStore, SQLSequenceStore

__all__ = [
    # Pattern grammar
    "validate_pattern",
    "substitute_tokens",
    "compute_period_key",
    "PATTERN_EXAMPLES",
    # Sequence store
    "SequenceStore",
    "SQLSequenceStore",
    # Number generator
    "DocumentNumberGenerator",
    "DEFAULT_PATTERNS",
    "resolve_pattern",
    "generate_doc_number",
    "preview_doc_number",
]
