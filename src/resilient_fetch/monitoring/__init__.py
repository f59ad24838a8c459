"""Monitoring and metrics instrumentation for the resilient fetcher.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from resilient_fetch.monitoring.metrics import (
    fetch_attempts_total,
    fetch_duration_seconds,
    fetch_outcomes_total,
    transport_latency_seconds,
)

__all__ = [
    "fetch_attempts_total",
    "fetch_outcomes_total",
    "fetch_duration_seconds",
    "transport_latency_seconds",
]
