"""
Prometheus metrics collection for patient-intake

This module provides metrics instrumentation for monitoring
upload ingestion, record edits and sync staging.
"""
from prometheus_client import (
    Counter,
    Histogram,
    CollectorRegistry,
    generate_latest,
)


# Global registry for metrics
REGISTRY = CollectorRegistry()


# =======================
# INGESTION METRICS
# =======================

# Ingestion attempts counter
ingestions_total = Counter(
    name="intake_ingestions_total",
    documentation="Total number of ingestion attempts",
    labelnames=["outcome", "kind"],  # outcome: success, failure; kind: parse, validation, network, none
    registry=REGISTRY,
)

# Records emitted by successful ingestions
records_ingested_total = Counter(
    name="intake_records_ingested_total",
    documentation="Total number of patient records emitted by successful ingestions",
    registry=REGISTRY,
)

# Ingestion duration histogram
ingestion_duration_seconds = Histogram(
    name="intake_ingestion_duration_seconds",
    documentation="Time spent on one ingestion attempt in seconds",
    labelnames=["outcome"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0, 60.0],
    registry=REGISTRY,
)

# Batch size
batch_size_records = Histogram(
    name="intake_batch_size_records",
    documentation="Number of records in each successfully ingested batch",
    buckets=[1, 10, 50, 100, 500, 1000, 5000, 10000],
    registry=REGISTRY,
)

# =======================
# STORE METRICS
# =======================

# Field edits counter
field_edits_total = Counter(
    name="intake_field_edits_total",
    documentation="Total number of field edits applied to the record store",
    labelnames=["field_name", "status"],  # status: applied, rejected
    registry=REGISTRY,
)

# Sync stagings counter
sync_stagings_total = Counter(
    name="intake_sync_stagings_total",
    documentation="Total number of batches staged for CRM sync",
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


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    """
    Increment a counter metric

    Args:
        counter: Prometheus Counter metric
        value: Amount to increment (default: 1.0)
        **labels: Label values for the metric
    """
    if labels:
        counter.labels(**labels).inc(value)
    else:
        counter.inc(value)


def observe_histogram(histogram: Histogram, value: float, **labels) -> None:
    """
    Observe a value in a histogram metric

    Args:
        histogram: Prometheus Histogram metric
        value: Value to observe
        **labels: Label values for the metric
    """
    if labels:
        histogram.labels(**labels).observe(value)
    else:
        histogram.observe(value)


# =======================
# INTAKE-SPECIFIC HELPERS
# =======================

def record_ingestion(
    success: bool,
    kind: str | None,
    record_count: int,
    duration_seconds: float
) -> None:
    """
    Record one finished ingestion attempt.

    Args:
        success: Whether a batch was emitted
        kind: Error kind tag for failures (None on success)
        record_count: Records emitted (0 on failure)
        duration_seconds: Attempt duration in seconds
    """
    outcome = "success" if success else "failure"
    increment_counter(ingestions_total, 1, outcome=outcome, kind=kind or "none")
    observe_histogram(ingestion_duration_seconds, duration_seconds, outcome=outcome)

    if success:
        increment_counter(records_ingested_total, record_count)
        observe_histogram(batch_size_records, record_count)


def record_field_edit(field_name: str, applied: bool) -> None:
    """Record an applied or rejected field edit."""
    status = "applied" if applied else "rejected"
    increment_counter(field_edits_total, 1, field_name=field_name, status=status)


def record_sync_staged() -> None:
    """Record one batch staged for CRM sync."""
    increment_counter(sync_stagings_total, 1)
