"""Pattern Grammar - Validate numbering patterns and substitute their tokens

Supported tokens:
- {YYYY}  : 4-digit year (2025)
- {YY}    : 2-digit year (25)
- {MM}    : 2-digit month (01-12)
- {DD}    : 2-digit day (01-31)
- {SEQ:n} : Sequence number zero-padded to n digits (n: 1-6)

Examples:
- FA-{SEQ:3}-{YY}          => FA-001-25
- FA/{SEQ:3}/{YY}          => FA/001/25
- INV-{YYYY}-{MM}-{SEQ:4}  => INV-2025-01-0001

Everything here is pure: no I/O, no state.
"""

import re
from datetime import date

from document_numbering.exceptions import PatternErrorCode
from document_numbering.schemas.pattern import PatternExample, PatternValidation

MIN_SEQ_PADDING = 1
MAX_SEQ_PADDING = 6

GLOBAL_PERIOD_KEY = "global"

# [0-9] rather than \d: Python's \d also matches non-ASCII digits
TOKEN_RE = re.compile(r"\{(YYYY|YY|MM|DD|SEQ:[0-9]+)\}")
SEQ_TOKEN_RE = re.compile(r"\{SEQ:([0-9]+)\}")
YEAR_TOKEN_RE = re.compile(r"\{YYYY\}|\{YY\}")
MONTH_TOKEN_RE = re.compile(r"\{MM\}")
# ASCII whitespace only: str \s would also accept \x1c-\x1f and \x85
DISALLOWED_CHAR_RE = re.compile(r"[^a-zA-Z0-9\-/_. \t\n\r\f\v]")

ERROR_MESSAGES = {
    PatternErrorCode.EMPTY_PATTERN: "Pattern cannot be empty",
    PatternErrorCode.MISSING_COUNTER_TOKEN: "Pattern must contain a {SEQ:n} token",
    PatternErrorCode.AMBIGUOUS_COUNTER_TOKEN: "Pattern can only contain one {SEQ:n} token",
    PatternErrorCode.INVALID_COUNTER_WIDTH: (
        f"SEQ padding must be between {MIN_SEQ_PADDING} and {MAX_SEQ_PADDING}"
    ),
    PatternErrorCode.DISALLOWED_CHARACTERS: "Disallowed characters",
}

PATTERN_EXAMPLES = [
    PatternExample(pattern="FA-{SEQ:3}-{YY}", example="FA-001-25", description="Simple with year"),
    PatternExample(pattern="FA/{SEQ:3}/{YY}", example="FA/001/25", description="With slashes"),
    PatternExample(pattern="INV-{YYYY}-{SEQ:4}", example="INV-2025-0001", description="Full year"),
    PatternExample(pattern="F{YY}{MM}-{SEQ:3}", example="F2501-001", description="Monthly reset"),
    PatternExample(pattern="{YY}-{MM}-{DD}-{SEQ:2}", example="25-01-15-01", description="Full date"),
]


def _invalid(code: PatternErrorCode, has_seq: bool = False, detail: str | None = None) -> PatternValidation:
    message = ERROR_MESSAGES[code]
    if detail:
        message = f"{message}: {detail}"
    return PatternValidation(
        valid=False,
        error=message,
        error_code=code,
        has_seq=has_seq,
    )


def validate_pattern(pattern: str | None) -> PatternValidation:
    """Validate a numbering pattern

    Total: returns a result for every input, never raises.

    Args:
        pattern: Raw pattern as stored in the account settings

    Returns:
        PatternValidation: valid=True with seq_padding/has_year/has_month,
        or valid=False with error_code and a human-readable error
    """
    if not pattern or pattern.strip() == "":
        return _invalid(PatternErrorCode.EMPTY_PATTERN)

    seq_matches = SEQ_TOKEN_RE.findall(pattern)
    if len(seq_matches) == 0:
        return _invalid(PatternErrorCode.MISSING_COUNTER_TOKEN)
    if len(seq_matches) > 1:
        return _invalid(PatternErrorCode.AMBIGUOUS_COUNTER_TOKEN, has_seq=True)

    # Leading zeros are accepted ({SEQ:03}); very long digit runs are rejected before int()
    digits = seq_matches[0].lstrip("0") or "0"
    seq_padding = int(digits) if len(digits) <= len(str(MAX_SEQ_PADDING)) else MAX_SEQ_PADDING + 1
    if not MIN_SEQ_PADDING <= seq_padding <= MAX_SEQ_PADDING:
        return _invalid(PatternErrorCode.INVALID_COUNTER_WIDTH, has_seq=True)

    # Literal characters only, tokens removed
    literals = TOKEN_RE.sub("", pattern)
    disallowed = DISALLOWED_CHAR_RE.findall(literals)
    if disallowed:
        # Deduplicate, keep first-seen order
        chars = ", ".join(dict.fromkeys(disallowed))
        return _invalid(PatternErrorCode.DISALLOWED_CHARACTERS, has_seq=True, detail=chars)

    return PatternValidation(
        valid=True,
        seq_padding=seq_padding,
        has_seq=True,
        has_year=YEAR_TOKEN_RE.search(pattern) is not None,
        has_month=MONTH_TOKEN_RE.search(pattern) is not None,
    )


def compute_period_key(has_year: bool, has_month: bool, on: date) -> str:
    """Scope key for the counter: "global", "2025" or "2025-01"

    A month token without a year token does not scope the counter.
    """
    if not has_year:
        return GLOBAL_PERIOD_KEY
    if has_month:
        return f"{on.year:04d}-{on.month:02d}"
    return f"{on.year:04d}"


def substitute_tokens(pattern: str, on: date, seq_value: int, seq_padding: int) -> str:
    """Replace every token of an already validated pattern

    Args:
        pattern: Valid numbering pattern
        on: Date (or datetime) rendered into the date tokens
        seq_value: Allocated sequence integer
        seq_padding: Minimum width of the sequence; longer values are not truncated

    Returns:
        str: Document number (e.g. "FA-001-25")
    """
    seq_str = str(seq_value).rjust(seq_padding, "0")

    number = pattern.replace("{YYYY}", f"{on.year:04d}")
    number = number.replace("{YY}", f"{on.year % 100:02d}")
    number = number.replace("{MM}", f"{on.month:02d}")
    number = number.replace("{DD}", f"{on.day:02d}")
    return SEQ_TOKEN_RE.sub(lambda _match: seq_str, number)
