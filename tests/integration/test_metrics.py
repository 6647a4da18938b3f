"""
Integration tests for metrics tracking.

These tests verify:
1. The metrics endpoint returns Prometheus text format
2. Payment, order and reschedule counters move with the API
3. HTTP metrics are labelled by route template
"""

import pytest
from httpx import AsyncClient

from src.core.metrics import REGISTRY


def sample(name: str, **labels) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


# =============================================================================
# Metrics Endpoint Tests
# =============================================================================

class TestMetricsEndpoint:
    """Tests for GET /metrics endpoint."""

    @pytest.mark.asyncio
    async def test_metrics_endpoint_returns_prometheus_format(self, client: AsyncClient):
        response = await client.get("/metrics")

        assert response.status_code == 200
        content_type = response.headers.get("content-type", "")
        assert "text/plain" in content_type or "text/openmetrics" in content_type
        assert "# HELP" in response.text

    @pytest.mark.asyncio
    async def test_metrics_include_service_metrics(self, client: AsyncClient):
        response = await client.get("/metrics")

        content = response.text
        assert "lipa_payments_total" in content
        assert "lipa_orders_started_total" in content
        assert "lipa_reschedules_total" in content
        assert "lipa_payment_latency_seconds" in content


# =============================================================================
# Business Metrics Tests
# =============================================================================

class TestBusinessMetrics:
    @pytest.mark.asyncio
    async def test_order_start_counted(self, client: AsyncClient, configured_product, fund_wallet):
        before = sample("lipa_orders_started_total")
        await fund_wallet("buyer_1", 50_000)

        await client.post(
            "/v1/orders",
            json={"buyer_id": "buyer_1", "product_id": configured_product, "total_cents": 100_000},
        )

        assert sample("lipa_orders_started_total") == before + 1

    @pytest.mark.asyncio
    async def test_applied_payment_counted_with_amount(self, client: AsyncClient, active_order: dict):
        before_count = sample("lipa_payments_total", method="custom", outcome="applied")
        before_amount = sample("lipa_payment_amount_cents_total", method="custom")

        await client.post(
            f"/v1/orders/{active_order['order_id']}/payments",
            json={"buyer_id": "buyer_1", "method": "custom", "amount_cents": 4_000},
        )

        assert sample("lipa_payments_total", method="custom", outcome="applied") == before_count + 1
        assert sample("lipa_payment_amount_cents_total", method="custom") == before_amount + 4_000

    @pytest.mark.asyncio
    async def test_replay_counted_without_amount(self, client: AsyncClient, active_order: dict):
        url = f"/v1/orders/{active_order['order_id']}/payments"
        body = {"buyer_id": "buyer_1", "method": "full"}
        headers = {"Idempotency-Key": "metrics-replay"}

        await client.post(url, json=body, headers=headers)
        before_replays = sample("lipa_idempotent_replays_total")
        before_amount = sample("lipa_payment_amount_cents_total", method="full")

        await client.post(url, json=body, headers=headers)

        assert sample("lipa_idempotent_replays_total") == before_replays + 1
        assert sample("lipa_payment_amount_cents_total", method="full") == before_amount

    @pytest.mark.asyncio
    async def test_rejection_counted_by_error_code(self, client: AsyncClient, active_order: dict):
        before = sample("lipa_payments_total", method="custom", outcome="INVALID_AMOUNT")

        await client.post(
            f"/v1/orders/{active_order['order_id']}/payments",
            json={"buyer_id": "buyer_1", "method": "custom", "amount_cents": 0},
        )

        assert sample("lipa_payments_total", method="custom", outcome="INVALID_AMOUNT") == before + 1

    @pytest.mark.asyncio
    async def test_reschedule_outcomes(self, client: AsyncClient, active_order: dict):
        url = f"/v1/orders/{active_order['order_id']}/reschedule"
        before_rejected = sample("lipa_reschedules_total", outcome="RESCHEDULE_NOT_ALLOWED")

        await client.post(url, json={"buyer_id": "buyer_1", "new_due_date": "2000-01-01"})

        assert sample("lipa_reschedules_total", outcome="RESCHEDULE_NOT_ALLOWED") == before_rejected + 1


# =============================================================================
# HTTP Metrics Tests
# =============================================================================

class TestHttpMetrics:
    @pytest.mark.asyncio
    async def test_requests_labelled_by_route(self, client: AsyncClient, active_order: dict):
        labels = {"method": "GET", "endpoint": "/v1/orders/{order_id}", "status": "200"}
        before = sample("lipa_http_requests_total", **labels)

        await client.get(f"/v1/orders/{active_order['order_id']}")

        assert sample("lipa_http_requests_total", **labels) == before + 1


class TestHealthEndpoint:
    @pytest.mark.asyncio
    async def test_liveness(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["service"] == "lipa-gateway"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, client: AsyncClient):
        response = await client.get("/health", headers={"X-Request-ID": "trace-123"})

        assert response.headers["X-Request-ID"] == "trace-123"
