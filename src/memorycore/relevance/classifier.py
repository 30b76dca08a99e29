"""
Relevance classifiers for memory candidates.

The base classifier filters out acknowledgements, greetings, meta-commentary
and texts too short to carry a fact. Profile facts and insights layer their
own keyword and structure checks on top of it.
"""

from __future__ import annotations

from typing import Optional

from memorycore.protocols import MemoryKind
from memorycore.relevance import rules
from memorycore.text.normalize import meaningful_tokens, normalize_memory_text, tokenize


def rejection_reason(text: str) -> Optional[str]:
    """
    Name the base rule that rejects ``text``, or None if it is relevant.

    Reasons: ``empty``, ``low_signal_exact``, the name of a low-signal
    pattern, ``too_short`` or ``too_sparse``.
    """
    normalized = normalize_memory_text(text)
    if not normalized:
        return "empty"

    if normalized.lower() in rules.LOW_SIGNAL_EXACT:
        return "low_signal_exact"

    matched_rule = rules.matching_low_signal_rule(normalized)
    if matched_rule is not None:
        return matched_rule.name

    tokens = tokenize(normalized)
    if len(tokens) <= rules.SHORT_TEXT_MAX_TOKENS and len(normalized) < rules.SHORT_TEXT_MIN_LENGTH:
        return "too_short"

    if (
        len(meaningful_tokens(normalized)) < rules.SPARSE_TEXT_MIN_MEANINGFUL_TOKENS
        and len(normalized) < rules.SPARSE_TEXT_MIN_LENGTH
    ):
        return "too_sparse"

    return None


def is_likely_relevant_memory(text: str) -> bool:
    """True when ``text`` carries enough signal to be stored as a memory."""
    return rejection_reason(text) is None


def is_likely_relevant_profile_fact(text: str) -> bool:
    """Base relevance plus evidence that the text is about a person."""
    normalized = normalize_memory_text(text)
    if not is_likely_relevant_memory(normalized):
        return False

    lower = normalized.lower()
    if rules.NAME_DECLARATION_PATTERN.search(lower):
        return True
    if rules.PERSON_REFERENCE_PATTERN.search(lower):
        return True

    return len(tokenize(normalized)) >= rules.PROFILE_FACT_MIN_TOKENS


def is_likely_relevant_insight(text: str, importance: int = rules.DEFAULT_IMPORTANCE) -> bool:
    """
    Base relevance plus either a high importance claim, a decision/obstacle
    keyword, or enough words to describe something specific.
    """
    normalized = normalize_memory_text(text)
    if not is_likely_relevant_memory(normalized):
        return False
    if importance >= rules.HIGH_IMPORTANCE:
        return True

    if rules.INSIGHT_KEYWORD_PATTERN.search(normalized.lower()):
        return True

    return len(tokenize(normalized)) >= rules.INSIGHT_MIN_TOKENS


def is_relevant_for_kind(text: str, kind: MemoryKind, importance: int = rules.DEFAULT_IMPORTANCE) -> bool:
    """Apply the relevance check matching a memory's declared kind."""
    if kind is MemoryKind.PROFILE_FACT:
        return is_likely_relevant_profile_fact(text)
    if kind is MemoryKind.INSIGHT:
        return is_likely_relevant_insight(text, importance)
    return is_likely_relevant_memory(text)
