"""Structured logging and Prometheus metrics for MemoryCore."""

from __future__ import annotations

from .logging import configure_logging
from .metrics import METRICS, record_candidate, record_duplicate, start_metrics_server

__all__ = ["configure_logging", "METRICS", "record_candidate", "record_duplicate", "start_metrics_server"]


def export_prometheus() -> str:
    """Export metrics in Prometheus text format."""
    from prometheus_client import generate_latest

    return generate_latest().decode("utf-8")
