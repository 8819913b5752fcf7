"""Numbering Exceptions

Two families of failure:
- InvalidPatternError: user-input errors from the closed pattern taxonomy,
  shown verbatim to the account owner.
- SequenceStoreError: infrastructure errors from the counter storage,
  propagated to the caller and never retried here.
"""

from enum import Enum as PyEnum


class PatternErrorCode(str, PyEnum):
    """Closed set of reasons a numbering pattern is rejected"""

    EMPTY_PATTERN = "empty_pattern"
    MISSING_COUNTER_TOKEN = "missing_counter_token"
    AMBIGUOUS_COUNTER_TOKEN = "ambiguous_counter_token"
    INVALID_COUNTER_WIDTH = "invalid_counter_width"
    DISALLOWED_CHARACTERS = "disallowed_characters"


class NumberingError(Exception):
    """Base class for document numbering errors"""


class InvalidPatternError(NumberingError, ValueError):
    """Raised by generate/preview when the pattern fails validation"""

    def __init__(self, code: PatternErrorCode, message: str, pattern: str):
        super().__init__(message)
        self.code = code
        self.message = message
        self.pattern = pattern

    def __repr__(self) -> str:
        return f"<InvalidPatternError(code={self.code.value}, pattern={self.pattern!r})>"


class SequenceStoreError(NumberingError):
    """Raised when allocating or reading a sequence counter fails"""
