"""
Fixed rule tables for memory relevance.

These tables are versioned data: they are built once at import time and never
mutated. Each low-signal pattern is a named rule so it can be exercised and
reported on its own. Every pattern is compiled with ``re.ASCII`` so that word
boundaries agree with the ASCII-only tokenizer: an accented letter next to a
keyword separates it rather than extending it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import FrozenSet, Optional, Pattern, Tuple

from memorycore.text.signature import NAME_DECLARATION_PREFIX

# Whole-text acknowledgements, compared after normalizing and lowercasing.
LOW_SIGNAL_EXACT: FrozenSet[str] = frozenset(
    {
        "ok",
        "okay",
        "cool",
        "nice",
        "great",
        "sounds good",
        "thanks",
        "thank you",
        "got it",
    }
)


@dataclass(frozen=True)
class LowSignalRule:
    """A named pattern whose match marks text as not worth remembering."""

    name: str
    pattern: Pattern[str]

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


def _rule(name: str, expression: str) -> LowSignalRule:
    return LowSignalRule(name, re.compile(expression, re.IGNORECASE | re.ASCII))


BARE_GREETING = _rule("bare_greeting", r"^(hi|hello|hey)\b[.!?]*$")
GENERIC_AGREEMENT = _rule("generic_agreement", r"^(sounds good|looks good|all good|makes sense)\b[.!?]*$")
CONVERSATION_OPENING = _rule(
    "conversation_opening",
    r"^(this is|that is)\s+(just\s+)?(the\s+)?opening of (a|the) conversation",
)
USER_SAID_OK = _rule("user_said_ok", r"user said [\"']?ok(?:ay)?[\"']?")
ASSISTANT_GREETED = _rule("assistant_greeted", r"assistant (?:responded|greeted|said hello)")
SMALL_TALK = _rule("small_talk", r"small talk")
GENERIC_GREETING = _rule("generic_greeting", r"generic greeting")

LOW_SIGNAL_PATTERNS: Tuple[LowSignalRule, ...] = (
    BARE_GREETING,
    GENERIC_AGREEMENT,
    CONVERSATION_OPENING,
    USER_SAID_OK,
    ASSISTANT_GREETED,
    SMALL_TALK,
    GENERIC_GREETING,
)

# Profile facts
NAME_DECLARATION_PATTERN = re.compile(NAME_DECLARATION_PREFIX + r"\b", re.ASCII)
PERSON_REFERENCE_PATTERN = re.compile(r"\b(?:i|my|me|user|they|their)\b", re.ASCII)

# Insights
INSIGHT_KEYWORDS: Tuple[str, ...] = (
    "decided",
    "decision",
    "blocked",
    "blocker",
    "prefers",
    "preference",
    "goal",
    "constraint",
    "risk",
    "stuck",
    "problem",
)
INSIGHT_KEYWORD_PATTERN = re.compile(r"\b(?:" + "|".join(INSIGHT_KEYWORDS) + r")\b", re.ASCII)

# Length and count thresholds
SHORT_TEXT_MAX_TOKENS = 2
SHORT_TEXT_MIN_LENGTH = 18
SPARSE_TEXT_MIN_MEANINGFUL_TOKENS = 2
SPARSE_TEXT_MIN_LENGTH = 26
PROFILE_FACT_MIN_TOKENS = 5
INSIGHT_MIN_TOKENS = 6
HIGH_IMPORTANCE = 7
DEFAULT_IMPORTANCE = 5


def matching_low_signal_rule(text: str) -> Optional[LowSignalRule]:
    """First low-signal rule that matches ``text``, if any."""
    for rule in LOW_SIGNAL_PATTERNS:
        if rule.matches(text):
            return rule
    return None
