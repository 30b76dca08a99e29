"""
Unit tests for memory curation.

Covers the sanitize passes over stored records and the admission decisions
the curator makes for single new or edited memories.
"""

import pytest
from memorycore.config.config import CurationConfig
from memorycore.curation.curator import (
    MemoryCurator,
    find_near_duplicate,
    sanitize_insights,
    sanitize_profile_facts,
)
from memorycore.exceptions import DuplicateMemoryError, UnknownMemoryError, VagueMemoryError
from memorycore.protocols import AdmissionOutcome, Insight, InsightType, ProfileCategory, ProfileFact

from tests.helpers import metric_delta


def _fact(fact, fact_id, created_at="2024-01-01T09:00:00+00:00", is_active=True):
    return ProfileFact(
        category=ProfileCategory.BACKGROUND,
        fact=fact,
        id=fact_id,
        created_at=created_at,
        is_active=is_active,
    )


def _insight(content, insight_id, importance=5, created_at="2024-01-01T09:00:00+00:00"):
    return Insight(
        insight_type=InsightType.BLOCKER,
        content=content,
        importance=importance,
        id=insight_id,
        created_at=created_at,
    )


class TestFindNearDuplicate:
    """Test find_near_duplicate."""

    def test_returns_first_match(self):
        records = ["I went for a run", "My name is Alex", "my name is alex!"]
        assert find_near_duplicate("My name is ALEX", records, lambda r: r) == "My name is Alex"

    def test_no_match(self):
        assert find_near_duplicate("My name is Sam", ["My name is Alex"], lambda r: r) is None

    def test_counts_duplicate_reason(self):
        with metric_delta("memorycore_duplicates_total", {"reason": "signature_match"}):
            find_near_duplicate("My name is Alex", ["my name is alex"], lambda r: r)


class TestSanitizeProfileFacts:
    """Test sanitize_profile_facts."""

    def test_newest_restatement_wins(self, profile_facts):
        result = sanitize_profile_facts(profile_facts)

        assert [fact.id for fact in result.kept] == ["fact-new-name", "fact-job"]
        assert result.dropped_ids == ["fact-vague", "fact-old-name"]

    def test_kept_facts_are_normalized(self):
        fact = _fact("  Loves   “trail”  running with my dog ", "fact-dog")

        result = sanitize_profile_facts([fact])

        assert result.kept[0].fact == 'Loves "trail" running with my dog'
        assert fact.fact.startswith("  Loves")

    def test_keeps_distinct_facts(self):
        facts = [
            _fact("Works as a nurse in Kyiv hospital", "a", "2024-01-01T09:00:00+00:00"),
            _fact("They have two cats at home", "b", "2024-01-02T09:00:00+00:00"),
        ]
        result = sanitize_profile_facts(facts)
        assert [fact.id for fact in result.kept] == ["b", "a"]
        assert result.dropped_ids == []

    def test_empty_input(self):
        result = sanitize_profile_facts([])
        assert result.kept == []
        assert result.dropped_ids == []


class TestSanitizeInsights:
    """Test sanitize_insights."""

    def test_first_occurrence_wins(self, insights):
        result = sanitize_insights(insights)

        assert [insight.id for insight in result.kept] == ["insight-stuck", "insight-weather-important"]
        assert result.dropped_ids == ["insight-stuck-again", "insight-weather"]

    def test_importance_decides_short_insights(self, insights):
        result = sanitize_insights(insights)
        kept = {insight.id: insight for insight in result.kept}
        assert kept["insight-weather-important"].content == "Nice weather today"

    def test_dropped_vague_insight_does_not_shadow_later_ones(self):
        insights = [
            _insight("nice weather today", "low", importance=3),
            _insight("nice weather today", "high", importance=9),
        ]
        result = sanitize_insights(insights)
        assert [insight.id for insight in result.kept] == ["high"]


class TestClampImportance:
    """Test MemoryCurator.clamp_importance."""

    @pytest.mark.parametrize(
        "importance,expected",
        [(None, 5), (0, 5), (1, 1), (7, 7), (10, 10), (15, 10), (-3, 1)],
    )
    def test_default_range(self, importance, expected):
        assert MemoryCurator().clamp_importance(importance) == expected

    def test_custom_range(self):
        curator = MemoryCurator(CurationConfig(min_importance=2, max_importance=6, default_importance=3))
        assert curator.clamp_importance(None) == 3
        assert curator.clamp_importance(1) == 2
        assert curator.clamp_importance(9) == 6


class TestAdmitProfileFact:
    """Test MemoryCurator.admit_profile_fact."""

    def test_rejects_vague_fact(self):
        with metric_delta("memorycore_candidates_total", {"kind": "profile_fact", "outcome": "rejected"}):
            result = MemoryCurator().admit_profile_fact([], ProfileCategory.SITUATION, "ok")

        assert result.outcome is AdmissionOutcome.REJECTED
        assert result.record is None
        assert not result.accepted

    def test_returns_stored_duplicate(self):
        stored = _fact("My name is Alex", "fact-name")

        with metric_delta("memorycore_candidates_total", {"kind": "profile_fact", "outcome": "duplicate"}):
            result = MemoryCurator().admit_profile_fact([stored], ProfileCategory.BACKGROUND, "my name is ALEX!")

        assert result.outcome is AdmissionOutcome.DUPLICATE
        assert result.record is stored

    def test_accepts_new_fact(self):
        stored = _fact("My name is Alex", "fact-name")

        with metric_delta("memorycore_candidates_total", {"kind": "profile_fact", "outcome": "accepted"}):
            result = MemoryCurator().admit_profile_fact(
                [stored], ProfileCategory.GOALS, "  Wants to run   a marathon next spring "
            )

        assert result.accepted
        assert result.record.category is ProfileCategory.GOALS
        assert result.record.fact == "Wants to run a marathon next spring"
        assert result.record.is_active
        assert result.record.id != stored.id

    def test_inactive_facts_are_ignored(self):
        stored = _fact("My name is Alex", "fact-name", is_active=False)
        result = MemoryCurator().admit_profile_fact([stored], ProfileCategory.BACKGROUND, "My name is Alex")
        assert result.accepted

    def test_only_recent_facts_are_scanned(self):
        stored = [
            _fact("Works as a nurse in Kyiv hospital", "old", "2024-01-01T09:00:00+00:00"),
            _fact("They have two cats at home", "new", "2024-03-01T09:00:00+00:00"),
        ]
        candidate = "works as a nurse in Kyiv hospital"

        limited = MemoryCurator(CurationConfig(existing_limit=1))
        assert limited.admit_profile_fact(stored, ProfileCategory.SITUATION, candidate).accepted

        result = MemoryCurator().admit_profile_fact(stored, ProfileCategory.SITUATION, candidate)
        assert result.outcome is AdmissionOutcome.DUPLICATE
        assert result.record.id == "old"


class TestAdmitInsight:
    """Test MemoryCurator.admit_insight."""

    def test_rejects_vague_insight(self):
        with metric_delta("memorycore_candidates_total", {"kind": "insight", "outcome": "rejected"}):
            result = MemoryCurator().admit_insight([], InsightType.DISCOVERY, "nice weather today")
        assert result.outcome is AdmissionOutcome.REJECTED

    def test_clamped_importance_decides_relevance(self):
        result = MemoryCurator().admit_insight([], InsightType.DISCOVERY, "nice weather today", importance=12)
        assert result.accepted
        assert result.record.importance == 10

    def test_accepts_new_insight(self):
        result = MemoryCurator().admit_insight(
            [],
            InsightType.DECISION,
            "Decided to switch the thesis topic to robotics",
            importance=0,
            project_id="6f1c2a9e-0d4b-4c8e-9a51-2b7d3e8f1a60",
        )

        assert result.accepted
        assert result.record.insight_type is InsightType.DECISION
        assert result.record.importance == 5
        assert result.record.project_id == "6f1c2a9e-0d4b-4c8e-9a51-2b7d3e8f1a60"

    def test_inactive_insights_are_ignored(self):
        stored = Insight.from_dict(
            {
                "id": "insight-ci",
                "insight_type": "blocker",
                "content": "The user is blocked by a flaky CI pipeline",
                "is_active": False,
            }
        )

        result = MemoryCurator().admit_insight(
            [stored], InsightType.BLOCKER, "The user is blocked by a flaky CI pipeline"
        )

        assert result.accepted
        assert result.record.id != "insight-ci"

    def test_duplicate_raises_importance(self):
        stored = _insight("The user is blocked by a flaky CI pipeline", "insight-ci", importance=4)

        with metric_delta("memorycore_candidates_total", {"kind": "insight", "outcome": "duplicate"}):
            result = MemoryCurator().admit_insight(
                [stored], InsightType.BLOCKER, "The user is blocked by a flaky CI pipeline.", importance=8
            )

        assert result.outcome is AdmissionOutcome.DUPLICATE
        assert result.importance_raised
        assert result.record.id == "insight-ci"
        assert result.record.importance == 8
        assert stored.importance == 4

    def test_duplicate_with_lower_importance_keeps_stored(self):
        stored = _insight("The user is blocked by a flaky CI pipeline", "insight-ci", importance=6)

        result = MemoryCurator().admit_insight(
            [stored], InsightType.BLOCKER, "the user is blocked by a flaky CI pipeline", importance=3
        )

        assert result.outcome is AdmissionOutcome.DUPLICATE
        assert not result.importance_raised
        assert result.record is stored


class TestUpdateProfileFact:
    """Test MemoryCurator.update_profile_fact."""

    @pytest.fixture
    def stored(self):
        return [
            _fact("My name is Alex", "fact-name"),
            _fact("Works as a nurse in Kyiv hospital", "fact-job"),
            _fact("They have two cats at home", "fact-cats", is_active=False),
        ]

    def test_unknown_id(self, stored):
        with pytest.raises(UnknownMemoryError):
            MemoryCurator().update_profile_fact(stored, "missing", "Works as a nurse in Lviv hospital")

    def test_too_vague(self, stored):
        with pytest.raises(VagueMemoryError, match="too vague"):
            MemoryCurator().update_profile_fact(stored, "fact-job", "ok")

    def test_already_remembered(self, stored):
        with pytest.raises(DuplicateMemoryError, match="fact-name"):
            MemoryCurator().update_profile_fact(stored, "fact-job", "my name is alex")

    def test_errors_are_value_errors(self, stored):
        with pytest.raises(ValueError):
            MemoryCurator().update_profile_fact(stored, "fact-job", "ok")

    def test_restating_itself_is_allowed(self, stored):
        updated = MemoryCurator().update_profile_fact(stored, "fact-name", "My  name is Alex!")
        assert updated.id == "fact-name"
        assert updated.fact == "My name is Alex!"

    def test_inactive_facts_do_not_block(self, stored):
        updated = MemoryCurator().update_profile_fact(stored, "fact-job", "They have two cats at home")
        assert updated.id == "fact-job"
        assert updated.fact == "They have two cats at home"
        assert stored[1].fact == "Works as a nurse in Kyiv hospital"
