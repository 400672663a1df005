"""Prometheus metrics for ClientScan.

Provides classification metrics in Prometheus format for monitoring and alerting.
Metrics are exposed at /metrics/prometheus endpoint.
"""

import time

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

# ============ Metrics Definitions ============

CLASSIFICATIONS_TOTAL = Counter(
    'clientscan_classifications_total',
    'Total number of classification passes (cache misses)',
    ['label']
)

CLASSIFY_DURATION = Histogram(
    'clientscan_classify_duration_seconds',
    'Time spent in a full classification pass',
    buckets=[0.0001, 0.0005, 0.001, 0.0025, 0.005, 0.01, 0.05]
)

EXTRACTOR_FAILURES_TOTAL = Counter(
    'clientscan_extractor_failures_total',
    'Extractor invocations that raised',
    ['extractor']
)

CACHE_HITS = Counter(
    'clientscan_cache_hits_total',
    'Cache hit count'
)
CACHE_MISSES = Counter(
    'clientscan_cache_misses_total',
    'Cache miss count'
)


# ============ Helper Functions ============

def record_classification(label: str, duration: float):
    """Record one classification pass.

    Args:
        label: Fused browser label
        duration: Pass duration in seconds
    """
    CLASSIFICATIONS_TOTAL.labels(label=label).inc()
    CLASSIFY_DURATION.observe(duration)


def record_extractor_failure(extractor: str):
    EXTRACTOR_FAILURES_TOTAL.labels(extractor=extractor).inc()


def track_classification():
    """Context manager timing a classification pass."""
    class ClassifyTracker:
        def __enter__(self):
            self.start_time = time.perf_counter()
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            return False

        @property
        def duration(self):
            return time.perf_counter() - self.start_time

    return ClassifyTracker()


def get_metrics():
    """Get current metrics in Prometheus format.

    Returns:
        bytes: Prometheus-formatted metrics
    """
    return generate_latest()


def get_content_type():
    """Get Prometheus content type header value."""
    return CONTENT_TYPE_LATEST
