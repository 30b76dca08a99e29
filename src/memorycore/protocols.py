"""
Core contracts and dataclasses for MemoryCore.

This module defines the records the curation layer and the tag parser pass
around. The classifier core itself only ever sees ``str`` and ``int`` values;
these shapes exist so that the host's loosely typed rows are converted once at
the boundary instead of leaking into the text rules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar
from uuid import uuid4

# ============================================================================
# Enums
# ============================================================================


class MemoryKind(Enum):
    """Declared kind of a memory candidate; selects the relevance rules."""

    GENERIC = "generic"
    PROFILE_FACT = "profile_fact"
    INSIGHT = "insight"


class ProfileCategory(Enum):
    """Categories a profile fact can be filed under."""

    BACKGROUND = "background"
    SKILLS = "skills"
    SITUATION = "situation"
    GOALS = "goals"
    PREFERENCES = "preferences"
    CONSTRAINTS = "constraints"


class InsightType(Enum):
    """Kinds of insight an assistant can record about the user."""

    DISCOVERY = "discovery"
    DECISION = "decision"
    BLOCKER = "blocker"
    PREFERENCE = "preference"
    LEARNING = "learning"


class DuplicateReason(Enum):
    """Which step of the duplicate check produced the verdict."""

    EMPTY = "empty"
    SIGNATURE_MATCH = "signature_match"
    CONTAINMENT = "containment"
    TOKEN_OVERLAP = "token_overlap"
    DISTINCT = "distinct"


class AdmissionOutcome(Enum):
    """Result of offering a new candidate to the curator."""

    REJECTED = "rejected"
    DUPLICATE = "duplicate"
    ACCEPTED = "accepted"


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return str(uuid4())


# ============================================================================
# Core Dataclasses
# ============================================================================


@dataclass(frozen=True)
class DuplicateCheck:
    """Verdict of a near-duplicate comparison between two memory texts."""

    is_duplicate: bool
    reason: DuplicateReason
    similarity: float = 0.0


@dataclass
class ProfileFact:
    """A stable fact about the user (name, background, constraints...)."""

    category: ProfileCategory
    fact: str
    id: str = field(default_factory=_new_id)
    created_at: str = field(default_factory=_utcnow_iso)
    is_active: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ProfileFact:
        return cls(
            category=ProfileCategory(str(data.get("category", "background")).lower()),
            fact=str(data.get("fact", "")),
            id=str(data.get("id") or _new_id()),
            created_at=str(data.get("created_at") or _utcnow_iso()),
            is_active=bool(data.get("is_active", True)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category.value,
            "fact": self.fact,
            "created_at": self.created_at,
            "is_active": self.is_active,
        }


@dataclass
class Insight:
    """An observation the assistant made about the user's work or habits."""

    insight_type: InsightType
    content: str
    importance: int = 5
    project_id: Optional[str] = None
    id: str = field(default_factory=_new_id)
    created_at: str = field(default_factory=_utcnow_iso)
    is_active: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Insight:
        raw_importance = data.get("importance")
        return cls(
            insight_type=InsightType(str(data.get("insight_type", "discovery")).lower()),
            content=str(data.get("content", "")),
            importance=int(raw_importance) if raw_importance is not None else 5,
            project_id=data.get("project_id"),
            id=str(data.get("id") or _new_id()),
            created_at=str(data.get("created_at") or _utcnow_iso()),
            is_active=bool(data.get("is_active", True)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "insight_type": self.insight_type.value,
            "content": self.content,
            "importance": self.importance,
            "project_id": self.project_id,
            "created_at": self.created_at,
            "is_active": self.is_active,
        }


RecordT = TypeVar("RecordT", ProfileFact, Insight)


@dataclass
class CurationResult(Generic[RecordT]):
    """Records that survived a sanitize pass and the ids of those that did not."""

    kept: List[RecordT] = field(default_factory=list)
    dropped_ids: List[str] = field(default_factory=list)


@dataclass
class AdmissionResult(Generic[RecordT]):
    """What happened when a single candidate was offered to the curator."""

    outcome: AdmissionOutcome
    record: Optional[RecordT] = None
    importance_raised: bool = False

    @property
    def accepted(self) -> bool:
        return self.outcome is AdmissionOutcome.ACCEPTED


@dataclass(frozen=True)
class SuggestedFact:
    """A profile fact proposed inside an assistant message."""

    category: ProfileCategory
    fact: str


@dataclass(frozen=True)
class ExtractedInsight:
    """An insight proposed inside an assistant message."""

    insight_type: InsightType
    content: str
    importance: int = 5
    project_id: Optional[str] = None
