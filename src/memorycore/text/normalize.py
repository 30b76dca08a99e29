"""
Text normalization and tokenization for memory comparison.

Every comparison MemoryCore makes starts from the normalized form:
- Collapse every whitespace run to a single space
- Map curly quotes to their straight ASCII forms
- Remove leading and trailing whitespace

Tokens are runs of lowercase ASCII letters and digits. Anything else,
including letters from non-Latin scripts, acts as a separator, so such text
tokenizes to nothing.
"""

from __future__ import annotations

import re
from typing import List, Set

# U+FEFF counts as whitespace so a leading byte order mark is trimmed
WHITESPACE_PATTERN = re.compile(r"[\s\ufeff]+")
CURLY_DOUBLE_QUOTES_PATTERN = re.compile("[“”]")
CURLY_SINGLE_QUOTES_PATTERN = re.compile("[‘’]")
NON_TOKEN_CHARS_PATTERN = re.compile(r"[^a-z0-9\s]")

MEANINGFUL_TOKEN_MIN_LENGTH = 3


def normalize_memory_text(text: str) -> str:
    """
    Canonicalize whitespace and quote glyphs.

    Idempotent: ``normalize_memory_text(normalize_memory_text(s))`` equals
    ``normalize_memory_text(s)``. Whitespace-only input yields ``""``.
    """
    if not text:
        return ""

    normalized = WHITESPACE_PATTERN.sub(" ", text)
    normalized = CURLY_DOUBLE_QUOTES_PATTERN.sub('"', normalized)
    normalized = CURLY_SINGLE_QUOTES_PATTERN.sub("'", normalized)
    return normalized.strip()


def tokenize(text: str) -> List[str]:
    """Split text into lowercase alphanumeric tokens, preserving order."""
    cleaned = NON_TOKEN_CHARS_PATTERN.sub(" ", text.lower())
    return [token for token in cleaned.split() if token]


def is_meaningful_token(token: str) -> bool:
    return len(token) >= MEANINGFUL_TOKEN_MIN_LENGTH


def meaningful_tokens(text: str) -> List[str]:
    return [token for token in tokenize(text) if is_meaningful_token(token)]


def unique_token_set(text: str) -> Set[str]:
    """Distinct tokens longer than two characters."""
    return set(meaningful_tokens(text))
