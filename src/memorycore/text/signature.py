"""
Canonical comparison keys for memory texts.

A signature is a cheap stand-in for "these two texts state the same fact".
Name declarations ("my name is Alex", "the user's name is alex") collapse to
``name:<identifier>`` so that any two of them naming the same person compare
equal regardless of the surrounding wording. Everything else is reduced to
lowercase alphanumeric words with English articles removed.
"""

from __future__ import annotations

import re

from memorycore.text.normalize import WHITESPACE_PATTERN, normalize_memory_text

# Shared with the profile-fact relevance rule, which only needs the prefix.
NAME_DECLARATION_PREFIX = r"\b(?:my|user(?:'s)?|their)\s+name\s+is"

NAME_SIGNATURE_PATTERN = re.compile(NAME_DECLARATION_PREFIX + r"\s+([a-z][a-z0-9-]*)", re.ASCII)
NON_SIGNATURE_CHARS_PATTERN = re.compile(r"[^a-z0-9\s]")
ARTICLES_PATTERN = re.compile(r"\b(?:a|an|the)\b", re.ASCII)

NAME_SIGNATURE_PREFIX = "name:"


def memory_signature(text: str) -> str:
    """
    Derive the canonical signature of a memory text.

    The input is normalized and lowercased first, so raw candidate text and
    its normalized form give the same signature. An empty result means the
    text carries nothing comparable and must not be used for deduplication.
    """
    normalized = normalize_memory_text(text).lower()

    name_match = NAME_SIGNATURE_PATTERN.search(normalized)
    if name_match:
        return NAME_SIGNATURE_PREFIX + name_match.group(1)

    signature = NON_SIGNATURE_CHARS_PATTERN.sub(" ", normalized)
    signature = ARTICLES_PATTERN.sub(" ", signature)
    signature = WHITESPACE_PATTERN.sub(" ", signature)
    return signature.strip()


def is_name_signature(signature: str) -> bool:
    return signature.startswith(NAME_SIGNATURE_PREFIX)
