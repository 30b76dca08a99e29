"""
MemoryCore - memory significance and deduplication engine.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config
from .curation import MemoryCurator
from .dedup import are_near_duplicate_memories, check_near_duplicate
from .relevance import (
    is_likely_relevant_insight,
    is_likely_relevant_memory,
    is_likely_relevant_profile_fact,
)
from .text import memory_signature, normalize_memory_text

__all__ = [
    "__version__",
    "Config",
    "MemoryCurator",
    "normalize_memory_text",
    "memory_signature",
    "are_near_duplicate_memories",
    "check_near_duplicate",
    "is_likely_relevant_memory",
    "is_likely_relevant_profile_fact",
    "is_likely_relevant_insight",
]
