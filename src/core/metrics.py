"""Prometheus metrics for the Lipa Gateway service.

Metrics are organized into two categories:

Business Metrics (for Product/Finance):
- lipa_payments_total: Payment requests by method and outcome
- lipa_payment_amount_cents_total: Money credited to orders, by method
- lipa_orders_started_total: Installment orders created at checkout
- lipa_reschedules_total: Reschedule requests by outcome
- lipa_idempotent_replays_total: Payment requests answered from the idempotency ledger

Technical Metrics (for Engineering/SRE):
- lipa_payment_latency_seconds: Payment application latency
- lipa_sync_refresh_total: Sync layer refreshes by result
- lipa_reminders_sent_total: Reminders handed to the notifier, by kind
- lipa_gateway_request_latency_seconds: Sync layer calls to the gateway API
- lipa_http_requests_total: HTTP requests by endpoint/status
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Business Metrics (Product/Finance dashboards)
# =============================================================================

payments_total = Counter(
    "lipa_payments_total",
    "Total number of installment payment requests",
    ["method", "outcome"],  # outcome: applied, replayed, or an error code
)

payment_amount_cents_total = Counter(
    "lipa_payment_amount_cents_total",
    "Total amount credited to installment orders in cents",
    ["method"],
)

orders_started_total = Counter(
    "lipa_orders_started_total",
    "Total number of installment orders started",
)

reschedules_total = Counter(
    "lipa_reschedules_total",
    "Total number of reschedule requests",
    ["outcome"],
)

idempotent_replays_total = Counter(
    "lipa_idempotent_replays_total",
    "Payment requests answered from a recorded idempotency key",
)


# =============================================================================
# Technical Metrics (Engineering/SRE dashboards)
# =============================================================================

payment_latency = Histogram(
    "lipa_payment_latency_seconds",
    "Payment application latency in seconds",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

sync_refresh_total = Counter(
    "lipa_sync_refresh_total",
    "Sync layer refresh attempts",
    ["result"],  # success, skipped, failure
)

reminders_sent_total = Counter(
    "lipa_reminders_sent_total",
    "Payment reminders handed to the notifier",
    ["kind"],
)

gateway_request_latency = Histogram(
    "lipa_gateway_request_latency_seconds",
    "Latency of sync layer calls to the gateway API",
    ["operation"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

gateway_request_failures = Counter(
    "lipa_gateway_request_failures_total",
    "Gateway API calls that failed in transport",
    ["operation", "error_type"],  # timeout, network
)

http_requests_total = Counter(
    "lipa_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "lipa_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_payment(method: str, outcome: str, amount_cents: int = 0) -> None:
    """Record a payment request and, when money moved, its amount."""
    payments_total.labels(method=method, outcome=outcome).inc()
    if outcome == "applied" and amount_cents > 0:
        payment_amount_cents_total.labels(method=method).inc(amount_cents)


def record_idempotent_replay() -> None:
    idempotent_replays_total.inc()


def record_order_started() -> None:
    orders_started_total.inc()


def record_reschedule(outcome: str) -> None:
    reschedules_total.labels(outcome=outcome).inc()


def record_sync_refresh(result: str) -> None:
    sync_refresh_total.labels(result=result).inc()


def record_reminder_sent(kind: str) -> None:
    reminders_sent_total.labels(kind=kind).inc()


def record_gateway_failure(operation: str, error_type: str) -> None:
    gateway_request_failures.labels(operation=operation, error_type=error_type).inc()


@contextmanager
def track_payment_latency() -> Generator[None, None, None]:
    """Context manager to track payment latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        payment_latency.observe(time.perf_counter() - start)


@contextmanager
def track_gateway_latency(operation: str) -> Generator[None, None, None]:
    """Context manager to track gateway API latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        gateway_request_latency.labels(operation=operation).observe(
            time.perf_counter() - start
        )


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_latency.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST
