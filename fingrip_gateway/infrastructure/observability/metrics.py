"""Prometheus metrics for scores, bank sync and HTTP performance"""

from prometheus_client import Counter, Histogram

# Score metrics
score_counter = Counter(
    "fingrip_score_computed_total",
    "Financial health scores computed",
    ["band"],  # needs_attention | fair | good | excellent
)

score_histogram = Histogram(
    "fingrip_overall_score",
    "Distribution of overall financial health scores",
    buckets=[10, 20, 30, 40, 50, 60, 70, 80, 85, 90, 100],
)

# Tink metrics
tink_failures_counter = Counter(
    "tink_api_failures_total",
    "Failed Tink API calls",
    ["operation", "error"],
)

synced_transactions_counter = Counter(
    "tink_synced_transactions_total",
    "Transactions imported from Tink",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_score(overall_score: float, band: str) -> None:
    score_counter.labels(band=band).inc()
    score_histogram.observe(overall_score)


def record_tink_failure(operation: str, error: Exception) -> None:
    tink_failures_counter.labels(operation=operation, error=type(error).__name__).inc()
