"""Prometheus metrics for HTTP traffic."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Histogram

# Custom registry so only gateway metrics are exposed
REGISTRY = CollectorRegistry()

# Covers response times from 1ms to 10s
DEFAULT_LATENCY_BUCKETS = (
    0.001,
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
)

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
    registry=REGISTRY,
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=DEFAULT_LATENCY_BUCKETS,
    registry=REGISTRY,
)

request_size_limit_rejections_total = Counter(
    "request_size_limit_rejections_total",
    "Total number of requests rejected due to exceeding the body size limit",
    ["endpoint", "method"],
    registry=REGISTRY,
)
