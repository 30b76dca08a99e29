"""Curation of profile facts and insights using the MemoryCore classifiers."""

from .curator import MemoryCurator, find_near_duplicate, sanitize_insights, sanitize_profile_facts

__all__ = ["MemoryCurator", "find_near_duplicate", "sanitize_insights", "sanitize_profile_facts"]
