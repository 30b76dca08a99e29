"""
Defines the Prometheus metrics for memory curation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import start_http_server

if TYPE_CHECKING:
    from memorycore.config.config import MonitoringConfig

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Duplicate-safe Prometheus metric wrappers
# ---------------------------------------------------------------------------
# Re-importing this module (test reloads, multiple entry points) must not
# register the same collector twice.


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):  # type: ignore[no-untyped-def]
        # Counters are registered under their "_total" name as well
        existing = _PROM_REGISTRY._names_to_collectors.get(name)
        if existing is not None:
            return existing

        try:
            return metric_cls(name, documentation, *args, **kwargs)
        except ValueError:
            return _PROM_REGISTRY._names_to_collectors[name]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)

METRICS: Dict[str, Any] = {
    "candidates": Counter(
        "memorycore_candidates_total",
        "Memory candidates offered to the curator, by kind and outcome",
        ["kind", "outcome"],
    ),
    "duplicates": Counter(
        "memorycore_duplicates_total",
        "Near-duplicate memories detected, by deciding step",
        ["reason"],
    ),
}


def record_candidate(kind: str, outcome: str) -> None:
    METRICS["candidates"].labels(kind=kind, outcome=outcome).inc()


def record_duplicate(reason: str) -> None:
    METRICS["duplicates"].labels(reason=reason).inc()


def start_metrics_server(config: MonitoringConfig) -> Optional[int]:
    """Expose metrics over HTTP when a port is configured. Returns the port."""
    if config.prometheus_port is None:
        return None
    start_http_server(config.prometheus_port)
    logger.info("Prometheus exporter started", port=config.prometheus_port)
    return config.prometheus_port
