"""Parsing of memory suggestions embedded in assistant messages."""

from .tags import (
    extract_uuid,
    parse_extracted_insights,
    parse_importance,
    parse_suggested_facts,
    parse_tag_blocks,
)

__all__ = [
    "parse_tag_blocks",
    "extract_uuid",
    "parse_importance",
    "parse_suggested_facts",
    "parse_extracted_insights",
]
