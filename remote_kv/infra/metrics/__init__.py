"""Prometheus metrics registry and HTTP metrics."""
