"""
Extraction of memory suggestions from assistant messages.

The conversational agent proposes memories inline using tag blocks:

    [PROFILE_UPDATE] category: goals fact: Wants to run a marathon [/PROFILE_UPDATE]

    [AI_INSIGHT]
    type: blocker
    content: The user is stuck choosing a thesis topic
    importance: 8
    [/AI_INSIGHT]

Every suggestion passes through the relevance classifiers before the caller
sees it. A suggestion that repeats an earlier one with the same signature is
dropped.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional

import structlog

from memorycore.dedup.near_duplicate import are_near_duplicate_memories
from memorycore.protocols import ExtractedInsight, InsightType, ProfileCategory, SuggestedFact
from memorycore.relevance.classifier import is_likely_relevant_insight, is_likely_relevant_profile_fact
from memorycore.relevance.rules import DEFAULT_IMPORTANCE
from memorycore.text.normalize import normalize_memory_text
from memorycore.text.signature import memory_signature

logger = structlog.get_logger(__name__)

PROFILE_UPDATE_PATTERN = re.compile(
    r"\[PROFILE_UPDATE\]\s*category:\s*(\w+)\s*fact:\s*([^\[]+?)\s*\[/PROFILE_UPDATE\]"
)
UUID_PATTERN = re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE)
LEADING_INTEGER_PATTERN = re.compile(r"^\s*([+-]?\d+)")

# Line cleanup inside a tag block
BULLET_PATTERN = re.compile(r"^[-*]\s+")
NUMBERED_PATTERN = re.compile(r"^\d+\.\s+")
BOLD_LINE_PATTERN = re.compile(r"^\*\*(.+?)\*\*$")
CODE_LINE_PATTERN = re.compile(r"^`(.+)`$")
FIELD_PATTERN = re.compile(r"^`?([a-zA-Z0-9_]+)`?\s*[:=]\s*(.*)$")

_PROFILE_CATEGORIES = {category.value for category in ProfileCategory}
_INSIGHT_TYPES = {insight_type.value for insight_type in InsightType}


def _clean_line(raw_line: str) -> str:
    line = raw_line.strip()
    line = BULLET_PATTERN.sub("", line)
    line = NUMBERED_PATTERN.sub("", line)
    line = BOLD_LINE_PATTERN.sub(r"\1", line)
    return CODE_LINE_PATTERN.sub(r"\1", line)


def parse_tag_blocks(message: str, tag: str) -> List[Dict[str, str]]:
    """
    Parse every ``[tag]...[/tag]`` block into a dict of lowercase field names.

    Lines of the form ``key: value`` or ``key = value`` start a field; any
    other non-empty line continues the previous field.
    """
    block_pattern = re.compile(rf"\[{re.escape(tag)}\](.*?)\[/{re.escape(tag)}\]", re.IGNORECASE | re.DOTALL)
    blocks: List[Dict[str, str]] = []

    for block_match in block_pattern.finditer(message):
        fields: Dict[str, str] = {}
        current_key: Optional[str] = None

        for raw_line in (block_match.group(1) or "").split("\n"):
            line = _clean_line(raw_line)
            if not line:
                continue

            field_match = FIELD_PATTERN.match(line)
            if field_match:
                current_key = field_match.group(1).lower()
                fields[current_key] = field_match.group(2).strip()
                continue

            if current_key:
                fields[current_key] = f"{fields[current_key]} {line}".strip()

        blocks.append(fields)

    return blocks


def extract_uuid(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    match = UUID_PATTERN.search(value)
    return match.group(0) if match else None


def parse_importance(value: Optional[str]) -> int:
    """Leading integer of ``value``; the default importance when there is none."""
    if not value:
        return DEFAULT_IMPORTANCE
    match = LEADING_INTEGER_PATTERN.match(value)
    return int(match.group(1)) if match else DEFAULT_IMPORTANCE


def _repeats_earlier(seen_by_signature: Dict[str, str], text: str) -> bool:
    """
    True when an earlier suggestion with the same signature restates ``text``.

    Only suggestions sharing a signature are compared; otherwise ``text`` is
    remembered under its signature.
    """
    signature = memory_signature(text)
    earlier = seen_by_signature.get(signature)
    if earlier is not None and are_near_duplicate_memories(earlier, text):
        return True
    seen_by_signature[signature] = text
    return False


def parse_suggested_facts(message: str) -> List[SuggestedFact]:
    """Profile facts proposed in ``message`` that are relevant and not repeated."""
    suggested: List[SuggestedFact] = []
    seen_by_signature: Dict[str, str] = {}

    for match in PROFILE_UPDATE_PATTERN.finditer(message):
        category = match.group(1).lower()
        fact = normalize_memory_text(match.group(2))

        if not is_likely_relevant_profile_fact(fact):
            logger.debug("Skipping vague suggested fact", category=category)
            continue
        if category not in _PROFILE_CATEGORIES:
            logger.debug("Skipping suggested fact with unknown category", category=category)
            continue
        if _repeats_earlier(seen_by_signature, fact):
            continue

        suggested.append(SuggestedFact(category=ProfileCategory(category), fact=fact))

    return suggested


def parse_extracted_insights(message: str) -> List[ExtractedInsight]:
    """Insights proposed in ``message`` that are relevant and not repeated."""
    extracted: List[ExtractedInsight] = []
    seen_by_signature: Dict[str, str] = {}

    for fields in parse_tag_blocks(message, "AI_INSIGHT"):
        insight_type = (fields.get("type") or "").lower()
        raw_content = (fields.get("content") or "").strip()
        importance = parse_importance(fields.get("importance"))
        content = normalize_memory_text(raw_content)
        project_id = extract_uuid(fields.get("project_id") or fields.get("projectid"))

        if not content or insight_type not in _INSIGHT_TYPES:
            logger.debug("Skipping malformed insight block", insight_type=insight_type)
            continue
        if not is_likely_relevant_insight(content, importance):
            logger.debug("Skipping vague insight", insight_type=insight_type, importance=importance)
            continue
        if _repeats_earlier(seen_by_signature, content):
            continue

        extracted.append(
            ExtractedInsight(
                insight_type=InsightType(insight_type),
                content=content,
                importance=importance,
                project_id=project_id,
            )
        )

    return extracted
