"""
Integration tests for POST /v1/orders/{order_id}/reschedule.

These tests verify:
1. The next due date and the next pending payment move together
2. At most two reschedules per order
3. Minimum notice and the grace period precondition
"""

from datetime import date, timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import update

from src.infrastructure.database import InstallmentOrderModel


def days_ahead(days: int) -> str:
    return (date.today() + timedelta(days=days)).isoformat()


async def reschedule(client: AsyncClient, order_id: str, new_due_date: str, buyer_id: str = "buyer_1"):
    return await client.post(
        f"/v1/orders/{order_id}/reschedule",
        json={"buyer_id": buyer_id, "new_due_date": new_due_date},
    )


class TestReschedule:
    @pytest.mark.asyncio
    async def test_moves_due_date(self, client: AsyncClient, active_order: dict):
        order_id = active_order["order_id"]

        response = await reschedule(client, order_id, days_ahead(45))

        assert response.status_code == 200
        data = response.json()
        assert data["next_due_date"] == days_ahead(45)
        assert data["reschedule_count"] == 1

        payments = (await client.get(f"/v1/orders/{order_id}/payments")).json()["payments"]
        assert payments[0]["due_date"] == days_ahead(45)
        assert payments[1]["due_date"] == days_ahead(60)

    @pytest.mark.asyncio
    async def test_third_reschedule_rejected(self, client: AsyncClient, active_order: dict):
        order_id = active_order["order_id"]
        await reschedule(client, order_id, days_ahead(35))
        await reschedule(client, order_id, days_ahead(40))

        response = await reschedule(client, order_id, days_ahead(45))

        assert response.status_code == 409
        assert response.json()["error"] == "RESCHEDULE_LIMIT_EXCEEDED"

        order = (await client.get(f"/v1/orders/{order_id}")).json()
        assert order["next_due_date"] == days_ahead(40)
        assert order["reschedule_count"] == 2

    @pytest.mark.asyncio
    async def test_requires_notice(self, client: AsyncClient, active_order: dict):
        response = await reschedule(client, active_order["order_id"], days_ahead(2))

        assert response.status_code == 409
        assert response.json()["error"] == "RESCHEDULE_NOT_ALLOWED"

    @pytest.mark.asyncio
    async def test_exactly_minimum_notice_allowed(self, client: AsyncClient, active_order: dict):
        response = await reschedule(client, active_order["order_id"], days_ahead(3))

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_past_grace_period_rejected(
        self,
        client: AsyncClient,
        active_order: dict,
        session_manager,
    ):
        order_id = active_order["order_id"]
        async with session_manager.session() as session:
            await session.execute(
                update(InstallmentOrderModel)
                .where(InstallmentOrderModel.id == order_id)
                .values(next_due_date=date.today() - timedelta(days=4))
            )

        response = await reschedule(client, order_id, days_ahead(10))

        assert response.status_code == 409
        assert response.json()["error"] == "RESCHEDULE_NOT_ALLOWED"

    @pytest.mark.asyncio
    async def test_within_grace_period_allowed(
        self,
        client: AsyncClient,
        active_order: dict,
        session_manager,
    ):
        order_id = active_order["order_id"]
        async with session_manager.session() as session:
            await session.execute(
                update(InstallmentOrderModel)
                .where(InstallmentOrderModel.id == order_id)
                .values(next_due_date=date.today() - timedelta(days=3))
            )

        response = await reschedule(client, order_id, days_ahead(10))

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_completed_order(self, client: AsyncClient, active_order: dict):
        order_id = active_order["order_id"]
        await client.post(
            f"/v1/orders/{order_id}/payments",
            json={"buyer_id": "buyer_1", "method": "full"},
        )

        response = await reschedule(client, order_id, days_ahead(45))

        assert response.status_code == 409
        assert response.json()["error"] == "ORDER_COMPLETED"

    @pytest.mark.asyncio
    async def test_other_buyer(self, client: AsyncClient, active_order: dict):
        response = await reschedule(client, active_order["order_id"], days_ahead(45), buyer_id="buyer_2")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_date(self, client: AsyncClient, active_order: dict):
        response = await reschedule(client, active_order["order_id"], "next tuesday")

        assert response.status_code == 422
