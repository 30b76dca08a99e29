"""Set-overlap scoring for token sets."""

from __future__ import annotations

from typing import AbstractSet


def jaccard_similarity(a: AbstractSet[str], b: AbstractSet[str]) -> float:
    """
    Jaccard similarity of two token sets.

    Returns 0.0 when either set is empty, including when both are. Two empty
    memories have nothing to compare and must never look identical.
    """
    if not a or not b:
        return 0.0

    overlap = len(a & b)
    union = len(a) + len(b) - overlap
    return overlap / union
