"""
Integration tests for buyer and seller account views.

These tests verify:
1. GET /v1/buyers/{buyer_id}/financial-health - lateness score
2. GET /v1/wallets/{buyer_id} - wallet balance
3. GET /v1/sellers/{seller_id}/analytics - dashboard totals
"""

from datetime import date, timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import update

from src.infrastructure.database import InstallmentOrderModel


async def backdate(session_manager, order_id: str, days_late: int) -> None:
    async with session_manager.session() as session:
        await session.execute(
            update(InstallmentOrderModel)
            .where(InstallmentOrderModel.id == order_id)
            .values(next_due_date=date.today() - timedelta(days=days_late))
        )


class TestFinancialHealth:
    @pytest.mark.asyncio
    async def test_buyer_without_orders(self, client: AsyncClient):
        response = await client.get("/v1/buyers/buyer_9/financial-health")

        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 100
        assert data["status"] == "Excellent"
        assert data["late_orders"] == 0
        assert data["source"] == "remote"

    @pytest.mark.asyncio
    async def test_late_order_lowers_score(
        self,
        client: AsyncClient,
        active_order: dict,
        session_manager,
    ):
        await backdate(session_manager, active_order["order_id"], 5)

        response = await client.get("/v1/buyers/buyer_1/financial-health")

        data = response.json()
        assert data["score"] == 90
        assert data["status"] == "Excellent"
        assert data["late_orders"] == 1

    @pytest.mark.asyncio
    async def test_penalty_capped_per_order(
        self,
        client: AsyncClient,
        active_order: dict,
        session_manager,
    ):
        await backdate(session_manager, active_order["order_id"], 40)

        response = await client.get("/v1/buyers/buyer_1/financial-health")

        assert response.json()["score"] == 80
        assert response.json()["status"] == "Good"

    @pytest.mark.asyncio
    async def test_completed_orders_do_not_count(
        self,
        client: AsyncClient,
        active_order: dict,
        session_manager,
    ):
        order_id = active_order["order_id"]
        await client.post(
            f"/v1/orders/{order_id}/payments",
            json={"buyer_id": "buyer_1", "method": "full"},
        )

        response = await client.get("/v1/buyers/buyer_1/financial-health")

        assert response.json()["score"] == 100


class TestWallet:
    @pytest.mark.asyncio
    async def test_unknown_buyer_has_empty_wallet(self, client: AsyncClient):
        response = await client.get("/v1/wallets/nobody")

        assert response.status_code == 200
        assert response.json() == {"buyer_id": "nobody", "balance_cents": 0}

    @pytest.mark.asyncio
    async def test_balance(self, client: AsyncClient, fund_wallet):
        await fund_wallet("buyer_1", 12_345)

        response = await client.get("/v1/wallets/buyer_1")

        assert response.json()["balance_cents"] == 12_345


class TestSellerAnalytics:
    @pytest.mark.asyncio
    async def test_totals(
        self,
        client: AsyncClient,
        active_order: dict,
        fund_wallet,
        session_manager,
    ):
        await fund_wallet("buyer_2", 100_000)
        second = await client.post(
            "/v1/orders",
            json={"buyer_id": "buyer_2", "product_id": "product_1", "total_cents": 50_000},
        )
        await client.post(
            f"/v1/orders/{second.json()['order_id']}/payments",
            json={"buyer_id": "buyer_2", "method": "full"},
        )
        await backdate(session_manager, active_order["order_id"], 1)

        response = await client.get("/v1/sellers/seller_1/analytics")

        assert response.status_code == 200
        data = response.json()
        assert data["total_revenue_cents"] == 150_000
        assert data["amount_received_cents"] == 80_000
        assert data["pending_balance_cents"] == 70_000
        assert data["active_orders"] == 1
        assert data["completed_orders"] == 1
        assert data["overdue_orders"] == 1
        assert data["completion_rate"] == 50.0

    @pytest.mark.asyncio
    async def test_seller_without_orders(self, client: AsyncClient):
        response = await client.get("/v1/sellers/seller_9/analytics")

        data = response.json()
        assert data["total_revenue_cents"] == 0
        assert data["completion_rate"] == 0.0
