"""
Near-duplicate detection for memories.

Signature layer: canonical keys compared for equality and containment.
Token layer: Jaccard overlap of meaningful words, threshold 0.82.
"""

from .near_duplicate import (
    CONTAINMENT_MIN_SIGNATURE_LENGTH,
    TOKEN_OVERLAP_THRESHOLD,
    are_near_duplicate_memories,
    check_near_duplicate,
)
from .similarity import jaccard_similarity

__all__ = [
    "CONTAINMENT_MIN_SIGNATURE_LENGTH",
    "TOKEN_OVERLAP_THRESHOLD",
    "are_near_duplicate_memories",
    "check_near_duplicate",
    "jaccard_similarity",
]
