"""
Test configuration for MemoryCore.

Provides sample records and keeps global state (lazy settings, logging
configuration) isolated between tests.
"""

import logging
from typing import Generator, List

import pytest
import structlog
from memorycore.config.config import LazyConfig
from memorycore.protocols import Insight, InsightType, ProfileCategory, ProfileFact

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "cli: Tests driving the command-line interface")


# ============================================================================
# Global State Isolation
# ============================================================================


@pytest.fixture(autouse=True)
def isolate_global_state() -> Generator[None, None, None]:
    """Reset the lazy settings and logging setup around every test."""
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    LazyConfig.reset()

    yield

    LazyConfig.reset()
    root_logger.handlers = handlers
    root_logger.setLevel(level)
    structlog.reset_defaults()


# ============================================================================
# Sample Records
# ============================================================================


@pytest.fixture
def profile_facts() -> List[ProfileFact]:
    """Facts as a host store returns them: unordered, with repeats and noise."""
    return [
        ProfileFact(
            category=ProfileCategory.BACKGROUND,
            fact="My name is Alex",
            id="fact-old-name",
            created_at="2024-01-01T09:00:00+00:00",
        ),
        ProfileFact(
            category=ProfileCategory.BACKGROUND,
            fact="my name is alex!!",
            id="fact-new-name",
            created_at="2024-02-01T09:00:00+00:00",
        ),
        ProfileFact(
            category=ProfileCategory.SITUATION,
            fact="ok",
            id="fact-vague",
            created_at="2024-01-15T09:00:00+00:00",
        ),
        ProfileFact(
            category=ProfileCategory.SITUATION,
            fact="Works as a nurse in Kyiv hospital",
            id="fact-job",
            created_at="2024-01-20T09:00:00+00:00",
        ),
    ]


@pytest.fixture
def insights() -> List[Insight]:
    return [
        Insight(
            insight_type=InsightType.BLOCKER,
            content="The user seems stuck on motivation",
            id="insight-stuck",
            created_at="2024-01-01T09:00:00+00:00",
        ),
        Insight(
            insight_type=InsightType.BLOCKER,
            content="The user seems stuck on motivation!",
            id="insight-stuck-again",
            created_at="2024-01-02T09:00:00+00:00",
        ),
        Insight(
            insight_type=InsightType.DISCOVERY,
            content="nice weather today",
            id="insight-weather",
            created_at="2024-01-03T09:00:00+00:00",
        ),
        Insight(
            insight_type=InsightType.DISCOVERY,
            content="Nice weather today",
            importance=8,
            id="insight-weather-important",
            created_at="2024-01-04T09:00:00+00:00",
        ),
    ]
