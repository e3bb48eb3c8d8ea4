"""Prometheus metrics for quote volume, validation failures and catalog health"""

from typing import Optional
from prometheus_client import Counter, Histogram

# Quote metrics
quote_counter = Counter(
    "credit_quote_total",
    "Total multi-lender quotes computed",
    ["outcome"],  # ok | invalid
)

validation_error_counter = Counter(
    "credit_validation_errors_total",
    "Quotes blocked by input validation",
    ["code"],
)

offers_per_quote_histogram = Histogram(
    "credit_offers_per_quote",
    "Number of lender offers returned per quote",
    buckets=[1, 2, 3, 5, 8, 10, 15],
)

schedule_counter = Counter(
    "credit_schedule_total",
    "Amortization schedules served",
)

# Catalog metrics
catalog_fetch_failures_counter = Counter(
    "catalog_fetch_failures_total",
    "Failed lender catalog calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_quote(valid: bool, offer_count: int, error_code: Optional[str] = None) -> None:
    """Record quote metrics for monitoring validation failure rates"""
    outcome = "ok" if valid else "invalid"
    quote_counter.labels(outcome=outcome).inc()

    if valid:
        offers_per_quote_histogram.observe(offer_count)
    elif error_code is not None:
        validation_error_counter.labels(code=error_code).inc()
