"""Pattern Schemas - Validation result and UI examples for numbering patterns"""

from pydantic import BaseModel

from document_numbering.exceptions import PatternErrorCode


class PatternValidation(BaseModel):
    """Outcome of validating a numbering pattern

    On success `seq_padding`, `has_year` and `has_month` describe the pattern.
    On failure `error_code` names the rule that was violated and `error` is the
    message shown to the account owner.
    """

    valid: bool
    error: str | None = None
    error_code: PatternErrorCode | None = None
    seq_padding: int | None = None  # Width of the {SEQ:n} token (1-6)
    has_seq: bool = False
    has_year: bool = False  # {YYYY} or {YY} present -> yearly reset
    has_month: bool = False  # {MM} present -> monthly reset (with a year token)


class PatternExample(BaseModel):
    """Sample pattern shown next to the pattern field in settings"""

    pattern: str
    example: str
    description: str
