"""
Near-duplicate detection for memory texts.

Layered comparison, cheapest first:
1. Signature equality (covers reformatted restatements and name declarations)
2. Containment of one long signature inside the other
3. Jaccard overlap of the meaningful words of both signatures

Every step is symmetric, so swapping the two arguments never changes the
verdict.
"""

from __future__ import annotations

from memorycore.dedup.similarity import jaccard_similarity
from memorycore.protocols import DuplicateCheck, DuplicateReason
from memorycore.text.normalize import normalize_memory_text, unique_token_set
from memorycore.text.signature import memory_signature

# Signatures must be longer than this before containment counts as duplication.
CONTAINMENT_MIN_SIGNATURE_LENGTH = 18
TOKEN_OVERLAP_THRESHOLD = 0.82


def check_near_duplicate(candidate: str, existing: str) -> DuplicateCheck:
    """
    Compare two memory texts and report which step decided.

    Args:
        candidate: Text proposed for storage
        existing: Text already stored

    Returns:
        DuplicateCheck with the verdict, the deciding step and, when the
        token step ran, the Jaccard similarity of the two signatures.
    """
    normalized_candidate = normalize_memory_text(candidate)
    normalized_existing = normalize_memory_text(existing)
    if not normalized_candidate or not normalized_existing:
        return DuplicateCheck(False, DuplicateReason.EMPTY)

    candidate_signature = memory_signature(normalized_candidate)
    existing_signature = memory_signature(normalized_existing)
    if not candidate_signature or not existing_signature:
        return DuplicateCheck(False, DuplicateReason.EMPTY)

    if candidate_signature == existing_signature:
        return DuplicateCheck(True, DuplicateReason.SIGNATURE_MATCH, 1.0)

    if (
        len(candidate_signature) > CONTAINMENT_MIN_SIGNATURE_LENGTH
        and len(existing_signature) > CONTAINMENT_MIN_SIGNATURE_LENGTH
    ):
        if candidate_signature in existing_signature or existing_signature in candidate_signature:
            return DuplicateCheck(True, DuplicateReason.CONTAINMENT)

    similarity = jaccard_similarity(unique_token_set(candidate_signature), unique_token_set(existing_signature))
    if similarity >= TOKEN_OVERLAP_THRESHOLD:
        return DuplicateCheck(True, DuplicateReason.TOKEN_OVERLAP, similarity)
    return DuplicateCheck(False, DuplicateReason.DISTINCT, similarity)


def are_near_duplicate_memories(candidate: str, existing: str) -> bool:
    """True when ``candidate`` restates ``existing`` closely enough to skip it."""
    return check_near_duplicate(candidate, existing).is_duplicate
