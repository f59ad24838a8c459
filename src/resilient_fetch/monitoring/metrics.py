"""Custom Prometheus metrics for the resilient fetcher.

Alert rules worth configuring:
- fetch_outcomes_total{kind="transient_exhausted"} (remote side persistently unavailable)
- fetch_outcomes_total{kind="decode_error"} (remote payload shape changed)
- fetch_attempts_total{result="transient"} (high retry rate)
"""

from prometheus_client import Counter, Histogram

# === Attempt Metrics ===

fetch_attempts_total = Counter(
    "fetch_attempts_total",
    "Total fetch attempts by result",
    ["result"],
)
"""
Attempts counter by per-attempt result.

Labels:
- result: success, transient, fatal, decode_error
"""

# === Outcome Metrics ===

fetch_outcomes_total = Counter(
    "fetch_outcomes_total",
    "Total fetch calls by terminal outcome",
    ["kind"],
)
"""
Terminal outcome counter.

Labels:
- kind: success, invalid_argument, transient_exhausted, decode_error, fatal,
  cancelled_caller, cancelled_deadline
"""

fetch_duration_seconds = Histogram(
    "fetch_duration_seconds",
    "Wall time of a fetch call including retries and delays",
    ["kind"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
)

# === Transport Metrics ===

transport_latency_seconds = Histogram(
    "transport_latency_seconds",
    "Single round trip latency in seconds",
    ["status_class"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)
"""
Round trip latency histogram.

Labels:
- status_class: 2xx, 3xx, 4xx, 5xx
"""
