"""
Prometheus metrics collection for the checkpoint repository

This module provides metrics instrumentation for monitoring repository
mutations, flush performance and load health.
"""
import os
from prometheus_client import (
    Counter,
    Histogram,
    Gauge,
    CollectorRegistry,
    generate_latest,
)
from typing import Optional


# Global registry for metrics
REGISTRY = CollectorRegistry()


# =======================
# REPOSITORY METRICS
# =======================

# Mutations and reloads
repository_operations_total = Counter(
    name="checkpoint_repository_operations_total",
    documentation="Total number of repository operations",
    labelnames=["repository", "operation", "status"],  # status: success, failure
    registry=REGISTRY,
)

# Records currently held in memory
repository_records = Gauge(
    name="checkpoint_repository_records",
    documentation="Number of validation data records held in memory",
    labelnames=["repository"],
    registry=REGISTRY,
)

# Flush duration histogram
flush_duration_seconds = Histogram(
    name="checkpoint_flush_duration_seconds",
    documentation="Time spent serializing and writing the repository file",
    labelnames=["repository"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
    registry=REGISTRY,
)

# =======================
# ERROR METRICS
# =======================

# Repository file could not be read or parsed
load_failures_total = Counter(
    name="checkpoint_load_failures_total",
    documentation="Total number of failed repository file loads",
    labelnames=["repository", "fallback"],  # fallback: cache, none
    registry=REGISTRY,
)

# Rule descriptors whose rule type is unknown to the rule store
unbound_rules_total = Counter(
    name="checkpoint_unbound_rules_total",
    documentation="Rule descriptors left unbound during rule sync",
    labelnames=["repository", "rule_type"],
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def start_metrics_server(port: Optional[int] = None) -> None:
    """
    Start HTTP server for Prometheus metrics

    Args:
        port: Port to listen on (defaults to env var METRICS_PORT or 8000)
    """
    # Lazy import: only needed when the metrics endpoint is enabled
    from prometheus_client import start_http_server

    metrics_port = port or int(os.getenv("METRICS_PORT", "8000"))
    start_http_server(metrics_port, registry=REGISTRY)


class track_duration:
    """
    Context manager for tracking operation duration

    Usage:
        with track_duration(flush_duration_seconds, repository="default"):
            # do work
            pass
    """

    def __init__(self, histogram: Histogram, **labels):
        self.histogram = histogram
        self.labels = labels
        self.timer = None

    def __enter__(self):
        self.timer = self.histogram.labels(**self.labels).time()
        self.timer.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.timer.__exit__(exc_type, exc_val, exc_tb)
        return False


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    """
    Increment a counter metric

    Args:
        counter: Prometheus Counter metric
        value: Amount to increment (default: 1.0)
        **labels: Label values for the metric
    """
    counter.labels(**labels).inc(value)


def set_gauge(gauge: Gauge, value: float, **labels) -> None:
    gauge.labels(**labels).set(value)


# =======================
# REPOSITORY HELPERS
# =======================

def record_operation(repository: str, operation: str, success: bool = True) -> None:
    """
    Record a repository operation.

    Args:
        repository: Repository name
        operation: save, delete, flush, refresh or truncate
        success: Whether the operation completed
    """
    status = "success" if success else "failure"
    increment_counter(repository_operations_total, 1, repository=repository, operation=operation, status=status)


def record_load_failure(repository: str, used_cache: bool) -> None:
    fallback = "cache" if used_cache else "none"
    increment_counter(load_failures_total, 1, repository=repository, fallback=fallback)


def record_unbound_rules(repository: str, rule_types: list[str]) -> None:
    for rule_type in rule_types:
        increment_counter(unbound_rules_total, 1, repository=repository, rule_type=rule_type)
