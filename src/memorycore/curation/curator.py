"""
Memory curation on top of the relevance and duplicate classifiers.

The host service keeps profile facts and insights in its own store. Before it
writes, it asks the curator whether a candidate should be stored at all and
whether it restates something already there; when it reads, it runs the
sanitize passes to hide vague or repeated rows. Nothing here performs I/O:
every function takes the caller's records and returns new ones.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

import structlog

from memorycore.config.config import CurationConfig
from memorycore.dedup.near_duplicate import check_near_duplicate
from memorycore.exceptions import DuplicateMemoryError, UnknownMemoryError, VagueMemoryError
from memorycore.observability.metrics import record_candidate, record_duplicate
from memorycore.protocols import (
    AdmissionOutcome,
    AdmissionResult,
    CurationResult,
    Insight,
    InsightType,
    MemoryKind,
    ProfileCategory,
    ProfileFact,
)
from memorycore.relevance.classifier import (
    is_likely_relevant_insight,
    is_likely_relevant_profile_fact,
    rejection_reason,
)
from memorycore.text.normalize import normalize_memory_text

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def find_near_duplicate(candidate: str, existing: Iterable[T], text_of: Callable[[T], str]) -> Optional[T]:
    """Return the first record whose text near-duplicates ``candidate``."""
    for record in existing:
        check = check_near_duplicate(text_of(record), candidate)
        if check.is_duplicate:
            record_duplicate(check.reason.value)
            return record
    return None


def sanitize_profile_facts(facts: Sequence[ProfileFact]) -> CurationResult[ProfileFact]:
    """
    Drop vague and repeated profile facts, newest first.

    The newest statement of a fact wins; older restatements are reported in
    ``dropped_ids`` so the caller can deactivate them.
    """
    result: CurationResult[ProfileFact] = CurationResult()

    for fact in sorted(facts, key=lambda f: f.created_at, reverse=True):
        cleaned = normalize_memory_text(fact.fact)
        if not is_likely_relevant_profile_fact(cleaned):
            logger.debug("Dropping vague profile fact", fact_id=fact.id, reason=rejection_reason(cleaned))
            result.dropped_ids.append(fact.id)
            continue

        duplicate = find_near_duplicate(cleaned, result.kept, lambda kept: kept.fact)
        if duplicate is not None:
            logger.debug("Dropping repeated profile fact", fact_id=fact.id, duplicate_of=duplicate.id)
            result.dropped_ids.append(fact.id)
            continue

        result.kept.append(replace(fact, fact=cleaned))

    return result


def sanitize_insights(insights: Sequence[Insight]) -> CurationResult[Insight]:
    """Drop vague and repeated insights, keeping the first of each in input order."""
    result: CurationResult[Insight] = CurationResult()

    for insight in insights:
        cleaned = normalize_memory_text(insight.content)
        if not is_likely_relevant_insight(cleaned, insight.importance):
            logger.debug("Dropping vague insight", insight_id=insight.id)
            result.dropped_ids.append(insight.id)
            continue

        duplicate = find_near_duplicate(cleaned, result.kept, lambda kept: kept.content)
        if duplicate is not None:
            logger.debug("Dropping repeated insight", insight_id=insight.id, duplicate_of=duplicate.id)
            result.dropped_ids.append(insight.id)
            continue

        result.kept.append(replace(insight, content=cleaned))

    return result


class MemoryCurator:
    """
    Decides whether single new or edited memories should be stored.

    Only the ``existing_limit`` most recent records are scanned for
    duplicates, mirroring what the host fetches before an insert.
    """

    def __init__(self, config: Optional[CurationConfig] = None) -> None:
        self.config = config or CurationConfig()

    def clamp_importance(self, importance: Optional[int]) -> int:
        """Clamp to the configured range; missing or zero means the default."""
        value = importance or self.config.default_importance
        return max(self.config.min_importance, min(self.config.max_importance, value))

    def _recent(self, records: Sequence[T], created_at: Callable[[T], str]) -> List[T]:
        ordered = sorted(records, key=created_at, reverse=True)
        return ordered[: self.config.existing_limit]

    def admit_profile_fact(
        self,
        existing: Sequence[ProfileFact],
        category: ProfileCategory,
        fact: str,
    ) -> AdmissionResult[ProfileFact]:
        """
        Offer a new profile fact.

        Returns:
            REJECTED when the fact is too vague, DUPLICATE with the stored
            fact it restates, or ACCEPTED with a new normalized ProfileFact.
        """
        kind = MemoryKind.PROFILE_FACT.value
        cleaned = normalize_memory_text(fact)
        if not is_likely_relevant_profile_fact(cleaned):
            logger.info("Rejected profile fact", category=category.value, reason=rejection_reason(cleaned))
            record_candidate(kind, AdmissionOutcome.REJECTED.value)
            return AdmissionResult(AdmissionOutcome.REJECTED)

        active = [f for f in existing if f.is_active]
        duplicate = find_near_duplicate(cleaned, self._recent(active, lambda f: f.created_at), lambda f: f.fact)
        if duplicate is not None:
            logger.info("Profile fact already remembered", duplicate_of=duplicate.id)
            record_candidate(kind, AdmissionOutcome.DUPLICATE.value)
            return AdmissionResult(AdmissionOutcome.DUPLICATE, duplicate)

        record_candidate(kind, AdmissionOutcome.ACCEPTED.value)
        return AdmissionResult(AdmissionOutcome.ACCEPTED, ProfileFact(category=category, fact=cleaned))

    def admit_insight(
        self,
        existing: Sequence[Insight],
        insight_type: InsightType,
        content: str,
        importance: Optional[int] = None,
        project_id: Optional[str] = None,
    ) -> AdmissionResult[Insight]:
        """
        Offer a new insight.

        A duplicate keeps the stored insight but raises its importance when
        the new claim is higher; the returned record carries the raised value
        and ``importance_raised`` is set so the caller can persist it.
        """
        kind = MemoryKind.INSIGHT.value
        cleaned = normalize_memory_text(content)
        clamped = self.clamp_importance(importance)
        if not is_likely_relevant_insight(cleaned, clamped):
            logger.info("Rejected insight", insight_type=insight_type.value, importance=clamped)
            record_candidate(kind, AdmissionOutcome.REJECTED.value)
            return AdmissionResult(AdmissionOutcome.REJECTED)

        active = [i for i in existing if i.is_active]
        recent = self._recent(active, lambda i: i.created_at)
        duplicate = find_near_duplicate(cleaned, recent, lambda i: i.content)
        if duplicate is not None:
            record_candidate(kind, AdmissionOutcome.DUPLICATE.value)
            if duplicate.importance < clamped:
                logger.info(
                    "Insight already remembered, raising importance",
                    duplicate_of=duplicate.id,
                    previous=duplicate.importance,
                    importance=clamped,
                )
                return AdmissionResult(AdmissionOutcome.DUPLICATE, replace(duplicate, importance=clamped), True)
            logger.info("Insight already remembered", duplicate_of=duplicate.id)
            return AdmissionResult(AdmissionOutcome.DUPLICATE, duplicate)

        record_candidate(kind, AdmissionOutcome.ACCEPTED.value)
        insight = Insight(insight_type=insight_type, content=cleaned, importance=clamped, project_id=project_id)
        return AdmissionResult(AdmissionOutcome.ACCEPTED, insight)

    def update_profile_fact(self, existing: Sequence[ProfileFact], fact_id: str, fact: str) -> ProfileFact:
        """
        Edit the text of a stored profile fact.

        Raises:
            UnknownMemoryError: If no fact has ``fact_id``
            VagueMemoryError: If the new text is too vague to remember
            DuplicateMemoryError: If the new text restates another fact
        """
        target = next((f for f in existing if f.id == fact_id), None)
        if target is None:
            raise UnknownMemoryError(fact_id)

        cleaned = normalize_memory_text(fact)
        if not is_likely_relevant_profile_fact(cleaned):
            raise VagueMemoryError("Fact is too vague to remember")

        others = [f for f in existing if f.id != fact_id and f.is_active]
        duplicate = find_near_duplicate(cleaned, others, lambda f: f.fact)
        if duplicate is not None:
            raise DuplicateMemoryError(f"Fact already remembered as {duplicate.id}")

        return replace(target, fact=cleaned)
