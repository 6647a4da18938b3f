"""Keeps a buyer's local view of orders and wallet in step with the gateway."""

import asyncio
import time
from contextlib import suppress
from datetime import date
from typing import Awaitable, Callable, List, Optional
from uuid import UUID

import structlog

from src.core.config import settings
from src.core.metrics import record_sync_refresh
from src.domain.entities import FinancialHealth, HealthSource, InstallmentOrder, Wallet
from src.domain.exceptions import NetworkError
from src.domain.interfaces import InstallmentGatewayClient, KeyValueCache
from src.service.installments import assess_financial_health

logger = structlog.get_logger(__name__)

RefreshListener = Callable[["AccountSynchronizer"], Awaitable[None]]


class AccountSynchronizer:
    """
    Periodically refreshes one buyer's orders and wallet balance.

    A refresh is skipped when the previous one finished less than
    ``interval_seconds`` ago, unless ``force=True``. Refreshes that queue
    up behind a running one are collapsed into it, except that a forced
    refresh never reuses a fetch that began before it was requested.
    """

    def __init__(
        self,
        buyer_id: str,
        gateway: InstallmentGatewayClient,
        cache: KeyValueCache,
        interval_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.buyer_id = buyer_id
        self.orders: List[InstallmentOrder] = []
        self.wallet: Optional[Wallet] = None

        self._gateway = gateway
        self._cache = cache
        self._interval = interval_seconds or settings.sync_refresh_interval_seconds
        self._clock = clock
        self._lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None
        self._listeners: List[RefreshListener] = []
        self._refreshed_key = f"last_refreshed:{buyer_id}"
        self._fetches_started = 0
        self._last_completed_fetch = 0

    @property
    def last_refreshed(self) -> Optional[float]:
        return self._cache.get(self._refreshed_key)

    def add_listener(self, listener: RefreshListener) -> None:
        """Call ``listener`` after every completed refresh."""
        self._listeners.append(listener)

    def is_fresh(self) -> bool:
        last = self.last_refreshed
        return last is not None and self._clock() - last < self._interval

    async def refresh(self, force: bool = False) -> bool:
        """
        Reload orders and wallet from the gateway.

        A forced refresh only collapses into a fetch that started after it
        was requested, so it always observes writes that completed before
        the call. An unforced refresh queued behind a running one is
        skipped once that one leaves the state fresh.

        Returns:
            True if new state was fetched, False if the refresh was skipped

        Raises:
            NetworkError: If the gateway could not be reached
        """
        if not force and self.is_fresh():
            record_sync_refresh("skipped")
            logger.debug("refresh_skipped", buyer_id=self.buyer_id, reason="interval")
            return False

        requested_after = self._fetches_started
        async with self._lock:
            if force:
                collapsed = self._last_completed_fetch > requested_after
            else:
                collapsed = self.is_fresh()
            if collapsed:
                record_sync_refresh("skipped")
                logger.debug("refresh_skipped", buyer_id=self.buyer_id, reason="collapsed")
                return False

            self._fetches_started += 1
            fetch = self._fetches_started
            try:
                orders = await self._gateway.list_orders(self.buyer_id)
                wallet = await self._gateway.get_wallet_balance(self.buyer_id)
            except NetworkError as e:
                record_sync_refresh("failure")
                logger.warning("refresh_failed", buyer_id=self.buyer_id, error=e.message)
                raise

            self.orders = orders
            self.wallet = wallet
            self._cache.set(self._refreshed_key, self._clock())
            self._last_completed_fetch = fetch

        record_sync_refresh("success")
        logger.info(
            "refresh_completed",
            buyer_id=self.buyer_id,
            orders=len(orders),
            balance_cents=wallet.balance_cents,
            forced=force,
        )

        for listener in self._listeners:
            await listener(self)

        return True

    async def start(self) -> None:
        """Refresh once, then keep refreshing in the background."""
        try:
            await self.refresh(force=True)
        except NetworkError:
            pass  # logged in refresh; the loop retries on its next tick
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            with suppress(asyncio.CancelledError):
                await self._task
            self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.refresh()
            except NetworkError:
                continue

    def find_order(self, order_id: UUID) -> Optional[InstallmentOrder]:
        for order in self.orders:
            if order.id == order_id:
                return order
        return None

    def local_health(self, today: date | None = None) -> FinancialHealth:
        """Health computed from the cached orders alone."""
        return assess_financial_health(
            self.buyer_id,
            self.orders,
            today=today,
            source=HealthSource.LOCAL,
        )

    async def financial_health(self, today: date | None = None) -> FinancialHealth:
        """Prefer the gateway's score; fall back to the cached orders offline."""
        try:
            return await self._gateway.get_financial_health(self.buyer_id)
        except NetworkError as e:
            logger.warning(
                "financial_health_fallback",
                buyer_id=self.buyer_id,
                error=e.message,
            )
            return self.local_health(today)
