"""Relevance classification for memory candidates."""

from .classifier import (
    is_likely_relevant_insight,
    is_likely_relevant_memory,
    is_likely_relevant_profile_fact,
    is_relevant_for_kind,
    rejection_reason,
)
from .rules import LOW_SIGNAL_EXACT, LOW_SIGNAL_PATTERNS, LowSignalRule

__all__ = [
    "is_likely_relevant_memory",
    "is_likely_relevant_profile_fact",
    "is_likely_relevant_insight",
    "is_relevant_for_kind",
    "rejection_reason",
    "LOW_SIGNAL_EXACT",
    "LOW_SIGNAL_PATTERNS",
    "LowSignalRule",
]
