"""
Integration tests for HttpInstallmentGatewayClient.

These tests verify:
1. The client speaks the API's wire format (run against the app in-process)
2. API error codes come back as the matching domain exceptions
3. Reads retry on transport failures; writes are sent exactly once
4. The sync layer works end to end over HTTP
"""

from datetime import date, timedelta
from uuid import UUID

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from src.application.sync import AccountSynchronizer, PaymentClient, PlanBuilder
from src.domain.entities import OrderStatus, PaymentMethod, PaymentStatus
from src.domain.exceptions import (
    IdempotencyKeyReusedException,
    InsufficientFundsException,
    InvalidAmountException,
    NetworkError,
    NetworkTimeoutError,
    OrderNotFoundException,
)
from src.infrastructure.cache import InMemoryTTLCache
from src.infrastructure.clients import HttpInstallmentGatewayClient
from src.main import app


@pytest.fixture
def gateway(client: AsyncClient) -> HttpInstallmentGatewayClient:
    """Gateway client routed into the app with the test database."""
    return HttpInstallmentGatewayClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    )


def failing_gateway(handler, max_retries: int = 3) -> HttpInstallmentGatewayClient:
    return HttpInstallmentGatewayClient(
        base_url="http://gateway",
        max_retries=max_retries,
        transport=httpx.MockTransport(handler),
    )


# =============================================================================
# Wire Format Tests
# =============================================================================

class TestGatewayReads:
    @pytest.mark.asyncio
    async def test_list_orders_and_payments(self, gateway, active_order: dict):
        orders = await gateway.list_orders("buyer_1")

        assert len(orders) == 1
        order = orders[0]
        assert order.id == UUID(active_order["order_id"])
        assert order.remaining_cents == 70_000
        assert order.status == OrderStatus.ACTIVE

        payments = await gateway.list_payments("buyer_1", order.id)
        assert [p.amount_cents for p in payments] == [23_330, 23_330, 23_340]
        assert all(p.order_id == order.id for p in payments)
        assert payments[0].status == PaymentStatus.PENDING

    @pytest.mark.asyncio
    async def test_wallet_and_health(self, gateway, active_order: dict):
        wallet = await gateway.get_wallet_balance("buyer_1")
        health = await gateway.get_financial_health("buyer_1")

        assert wallet.balance_cents == 100_000
        assert health.score == 100

    @pytest.mark.asyncio
    async def test_other_buyers_payments_not_found(self, gateway, active_order: dict):
        with pytest.raises(OrderNotFoundException):
            await gateway.list_payments("buyer_2", UUID(active_order["order_id"]))


class TestGatewayWrites:
    @pytest.mark.asyncio
    async def test_apply_payment_and_replay(self, gateway, active_order: dict):
        order_id = UUID(active_order["order_id"])

        first = await gateway.apply_installment_payment(
            "buyer_1", order_id, PaymentMethod.CUSTOM, 5_000, "client-key-1"
        )
        second = await gateway.apply_installment_payment(
            "buyer_1", order_id, PaymentMethod.CUSTOM, 5_000, "client-key-1"
        )

        assert first.applied_amount_cents == 5_000
        assert first.amount_paid_after_cents == 35_000
        assert second.amount_paid_after_cents == 35_000
        assert (await gateway.get_wallet_balance("buyer_1")).balance_cents == 95_000

    @pytest.mark.asyncio
    async def test_error_codes_become_domain_exceptions(self, gateway, active_order: dict, fund_wallet):
        order_id = UUID(active_order["order_id"])

        with pytest.raises(InvalidAmountException):
            await gateway.apply_installment_payment(
                "buyer_1", order_id, PaymentMethod.CUSTOM, 80_000, "k-1"
            )

        await gateway.apply_installment_payment("buyer_1", order_id, PaymentMethod.CUSTOM, 1_000, "k-2")
        with pytest.raises(IdempotencyKeyReusedException):
            await gateway.apply_installment_payment(
                "buyer_1", order_id, PaymentMethod.CUSTOM, 2_000, "k-2"
            )

        await fund_wallet("buyer_1", 0)
        with pytest.raises(InsufficientFundsException) as exc_info:
            await gateway.apply_installment_payment(
                "buyer_1", order_id, PaymentMethod.STANDARD, None, "k-3"
            )
        assert exc_info.value.code == "INSUFFICIENT_FUNDS"

    @pytest.mark.asyncio
    async def test_reschedule(self, gateway, active_order: dict):
        new_due_date = date.today() + timedelta(days=40)

        order = await gateway.reschedule_installment(
            "buyer_1", UUID(active_order["order_id"]), new_due_date
        )

        assert order.next_due_date == new_due_date
        assert order.reschedule_count == 1

    @pytest.mark.asyncio
    async def test_configure_plan_through_builder(self, gateway):
        builder = PlanBuilder("product_7", "seller_7", gateway=gateway).set_duration(4)

        stored = await builder.submit()

        assert stored.product_id == "product_7"
        assert stored.version == 1
        assert [s.percent_of_total for s in stored.schedule] == [17.5, 17.5, 17.5, 17.5]


# =============================================================================
# Transport Failure Tests
# =============================================================================

class TestTransportFailures:
    @pytest.mark.asyncio
    async def test_reads_retry_then_succeed(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) < 3:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json={"buyer_id": "buyer_1", "balance_cents": 500})

        wallet = await failing_gateway(handler).get_wallet_balance("buyer_1")

        assert wallet.balance_cents == 500
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_reads_give_up_after_max_retries(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NetworkError):
            await failing_gateway(handler, max_retries=2).list_orders("buyer_1")

        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_writes_are_not_retried(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ReadTimeout("no response", request=request)

        with pytest.raises(NetworkTimeoutError):
            await failing_gateway(handler).apply_installment_payment(
                "buyer_1",
                UUID("550e8400-e29b-41d4-a716-446655440000"),
                PaymentMethod.STANDARD,
                None,
                "k-1",
            )

        assert len(calls) == 1
        assert calls[0].headers["Idempotency-Key"] == "k-1"

    @pytest.mark.asyncio
    async def test_unstructured_error_is_network_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="Bad Gateway")

        with pytest.raises(NetworkError) as exc_info:
            await failing_gateway(handler, max_retries=1).get_wallet_balance("buyer_1")

        assert exc_info.value.status_code == 502


# =============================================================================
# Sync Layer Over HTTP
# =============================================================================

class TestSyncOverHttp:
    @pytest.mark.asyncio
    async def test_pay_and_resync(self, gateway, active_order: dict):
        sync = AccountSynchronizer("buyer_1", gateway, InMemoryTTLCache())
        await sync.refresh()
        payer = PaymentClient(gateway, sync)

        order = sync.find_order(UUID(active_order["order_id"]))
        await payer.pay(order, PaymentMethod.FULL)

        assert sync.orders[0].status == OrderStatus.COMPLETED
        assert sync.wallet.balance_cents == 30_000
        health = await sync.financial_health()
        assert health.score == 100
