"""Account service - buyer health, wallet and seller dashboard reads."""

from datetime import date
from typing import Callable

import structlog

from src.application.dto import (
    FinancialHealthResponse,
    SellerAnalyticsResponse,
    WalletResponse,
)
from src.domain.entities import HealthSource, Wallet
from src.domain.interfaces import OrderRepository, WalletRepository
from src.service.installments import assess_financial_health, summarize_seller_orders

logger = structlog.get_logger(__name__)


class AccountService:
    """Read-only projections over a buyer's or seller's orders."""

    def __init__(
        self,
        order_repository: OrderRepository,
        wallet_repository: WalletRepository,
        clock: Callable[[], date] = date.today,
    ):
        self._order_repo = order_repository
        self._wallet_repo = wallet_repository
        self._clock = clock

    async def get_financial_health(self, buyer_id: str) -> FinancialHealthResponse:
        """Score a buyer from the lateness of their active orders."""
        orders = await self._order_repo.list_orders(buyer_id=buyer_id)
        health = assess_financial_health(
            buyer_id,
            orders,
            today=self._clock(),
            source=HealthSource.REMOTE,
        )

        logger.info(
            "financial_health_computed",
            buyer_id=buyer_id,
            score=health.score,
            late_orders=health.late_orders,
        )

        return FinancialHealthResponse.from_entity(health)

    async def get_wallet_balance(self, buyer_id: str) -> WalletResponse:
        wallet = await self._wallet_repo.get(buyer_id)
        if wallet is None:
            wallet = Wallet(buyer_id=buyer_id)
        return WalletResponse.from_entity(wallet)

    async def get_seller_analytics(self, seller_id: str) -> SellerAnalyticsResponse:
        orders = await self._order_repo.list_orders(seller_id=seller_id)
        analytics = summarize_seller_orders(seller_id, orders, today=self._clock())
        return SellerAnalyticsResponse.from_entity(analytics)
