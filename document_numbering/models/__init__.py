"""Database Models

All models must be imported here for Alembic auto-detect to work.
"""

from document_numbering.models.number_sequence import DocType, NumberSequence

__all__ = [
    "NumberSequence",
    # Enums
    "DocType",
]
