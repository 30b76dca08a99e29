"""Normalization, tokenization and signatures for memory texts."""

from .normalize import meaningful_tokens, normalize_memory_text, tokenize, unique_token_set
from .signature import is_name_signature, memory_signature

__all__ = [
    "normalize_memory_text",
    "tokenize",
    "meaningful_tokens",
    "unique_token_set",
    "memory_signature",
    "is_name_signature",
]
