"""Prometheus metrics for file-explorer.

Usage::

    from file_explorer.observability.metrics import STORE_CALLS_TOTAL

    STORE_CALLS_TOTAL.labels(operation="read_dir", outcome="ok").inc()
"""

from __future__ import annotations

from prometheus_client import (
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
    CONTENT_TYPE_LATEST,
)

# ---------------------------------------------------------------------------
# HTTP request metrics
# ---------------------------------------------------------------------------

HTTP_REQUESTS_TOTAL = Counter(
    "http_server_requests_total",
    "Total HTTP requests by method, path pattern, and status code.",
    labelnames=["method", "path", "status"],
    registry=REGISTRY,
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "http_server_request_duration_seconds",
    "HTTP request latency in seconds.",
    labelnames=["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
    registry=REGISTRY,
)

HTTP_REQUESTS_IN_FLIGHT = Gauge(
    "http_server_requests_in_flight",
    "Number of HTTP requests currently being processed.",
    registry=REGISTRY,
)

# ---------------------------------------------------------------------------
# Store adapter metrics
# ---------------------------------------------------------------------------

STORE_CALLS_TOTAL = Counter(
    "file_explorer_store_calls_total",
    "Store adapter calls by operation and outcome (ok, error, timeout).",
    labelnames=["operation", "outcome"],
    registry=REGISTRY,
)

# ---------------------------------------------------------------------------
# Share gateway metrics
# ---------------------------------------------------------------------------

SHARE_RESOLUTIONS_TOTAL = Counter(
    "file_explorer_share_resolutions_total",
    "Share gateway requests by outcome (served, denied, not_found, malformed).",
    labelnames=["outcome"],
    registry=REGISTRY,
)


def metrics_text() -> tuple[bytes, str]:
    """Generate Prometheus exposition text and content-type header."""
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST
