"""
Prometheus metrics for parcel-intake

Counts files ingested, rows built and dropped, review status distribution,
AI review outcomes and confirmed batches.
"""
import os
from typing import Mapping, Optional

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()


# =======================
# INGESTION METRICS
# =======================

files_ingested_total = Counter(
    name="intake_files_ingested_total",
    documentation="Total number of CSV files submitted for ingestion",
    labelnames=["status"],  # status: success, empty, unreadable
    registry=REGISTRY,
)

records_built_total = Counter(
    name="intake_records_built_total",
    documentation="Total number of parcel records built from CSV rows",
    registry=REGISTRY,
)

rows_dropped_total = Counter(
    name="intake_rows_dropped_total",
    documentation="Total number of CSV rows dropped because every identifying field was empty",
    registry=REGISTRY,
)

header_fallback_total = Counter(
    name="intake_header_fallback_total",
    documentation="Canonical fields resolved by positional fallback instead of header keyword",
    labelnames=["field_name"],
    registry=REGISTRY,
)

ingestion_duration_seconds = Histogram(
    name="intake_ingestion_duration_seconds",
    documentation="Time spent turning raw CSV text into validated parcels",
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
    registry=REGISTRY,
)

# =======================
# REVIEW METRICS
# =======================

parcels_by_status = Gauge(
    name="intake_parcels_by_status",
    documentation="Parcels in the active review session per status",
    labelnames=["status"],
    registry=REGISTRY,
)

ai_analysis_total = Counter(
    name="intake_ai_analysis_total",
    documentation="AI review calls by outcome",
    labelnames=["status"],  # status: success, fallback
    registry=REGISTRY,
)

ai_corrections_total = Counter(
    name="intake_ai_corrections_total",
    documentation="Parcels flagged by the AI reviewer",
    registry=REGISTRY,
)

# =======================
# BATCH METRICS
# =======================

batches_confirmed_total = Counter(
    name="intake_batches_confirmed_total",
    documentation="Confirmation attempts by outcome",
    labelnames=["status"],  # status: confirmed, blocked
    registry=REGISTRY,
)

batch_size = Histogram(
    name="intake_batch_size_parcels",
    documentation="Number of parcels in each confirmed batch",
    buckets=[1, 5, 10, 50, 100, 500, 1000, 5000],
    registry=REGISTRY,
)

errors_total = Counter(
    name="intake_errors_total",
    documentation="Total number of handled errors",
    labelnames=["error_type", "component"],
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def generate_metrics() -> bytes:
    """Generate Prometheus metrics in text format"""
    return generate_latest(REGISTRY)


def start_metrics_server(port: Optional[int] = None) -> None:
    """
    Start HTTP server for Prometheus metrics

    Args:
        port: Port to listen on (defaults to env var METRICS_PORT or 8000)
    """
    # Resolved at call time
    from prometheus_client import start_http_server

    metrics_port = port or int(os.getenv("METRICS_PORT", "8000"))
    start_http_server(metrics_port, registry=REGISTRY)


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    """Increment a counter, applying labels when given"""
    if labels:
        counter.labels(**labels).inc(value)
    else:
        counter.inc(value)


def observe_histogram(histogram: Histogram, value: float) -> None:
    histogram.observe(value)


def record_status_counts(status_counts: Mapping[str, int]) -> None:
    """Publish the current per-status parcel counts of a review session"""
    for status, count in status_counts.items():
        parcels_by_status.labels(status=status).set(count)


def record_error(error_type: str, component: str) -> None:
    increment_counter(errors_total, error_type=error_type, component=component)
