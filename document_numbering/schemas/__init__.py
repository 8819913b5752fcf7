"""Pydantic Schemas"""

from document_numbering.schemas.pattern import PatternExample, PatternValidation

__all__ = [
    "PatternValidation",
    "PatternExample",
]
