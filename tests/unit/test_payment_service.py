"""
Unit tests for PaymentService with in-memory repositories.

Covers idempotent replays, key reuse, wallet debits and the per-order
in-flight guard without a database.
"""

import asyncio
from typing import Dict, List, Optional

import pytest

from src.application.dto import ApplyPaymentRequest
from src.application.services import PaymentService
from src.domain.entities import OrderStatus, PaymentMethod, PaymentRequestRecord, Wallet
from src.domain.exceptions import (
    ConcurrentModificationException,
    IdempotencyKeyReusedException,
    InsufficientFundsException,
    InvalidAmountException,
    OrderNotFoundException,
    PaymentInProgressException,
)
from src.domain.interfaces import (
    OrderRepository,
    PaymentRequestRepository,
    PlanRepository,
    WalletRepository,
)
from tests.factories import make_order, make_plan


class InMemoryPlanRepository(PlanRepository):
    def __init__(self, *plans):
        self.plans = {p.id: p for p in plans}

    async def save(self, plan):
        self.plans[plan.id] = plan
        return plan

    async def get_by_id(self, plan_id):
        return self.plans.get(plan_id)

    async def get_active_for_product(self, product_id):
        matching = [p for p in self.plans.values() if p.product_id == product_id]
        return max(matching, key=lambda p: p.version) if matching else None


class InMemoryOrderRepository(OrderRepository):
    def __init__(self):
        self.orders = {}
        self.payments: Dict = {}
        self.lock_gate: Optional[asyncio.Event] = None
        self.updates = 0

    async def save(self, order, payments):
        self.orders[order.id] = order
        self.payments[order.id] = list(payments)
        return order

    async def get_by_id(self, order_id):
        return self.orders.get(order_id)

    async def get_for_update(self, order_id):
        if self.lock_gate is not None:
            await self.lock_gate.wait()
        return self.orders.get(order_id)

    async def update(self, order, payments=()):
        self.updates += 1
        order.version += 1
        return order

    async def list_payments(self, order_id):
        return self.payments.get(order_id, [])

    async def list_orders(self, buyer_id=None, seller_id=None, status=None):
        return list(self.orders.values())


class InMemoryWalletRepository(WalletRepository):
    def __init__(self, balance_cents: int):
        self.wallets = {"buyer_1": Wallet(buyer_id="buyer_1", balance_cents=balance_cents)}
        self.debits: List[int] = []

    async def get(self, buyer_id):
        return self.wallets.get(buyer_id)

    async def save(self, wallet):
        self.wallets[wallet.buyer_id] = wallet
        return wallet

    async def debit(self, buyer_id, amount_cents):
        wallet = self.wallets[buyer_id]
        if wallet.balance_cents < amount_cents:
            raise InsufficientFundsException(amount_cents, wallet.balance_cents)
        wallet.balance_cents -= amount_cents
        self.debits.append(amount_cents)
        return wallet


class InMemoryPaymentRequestRepository(PaymentRequestRepository):
    def __init__(self):
        self.records = {}

    async def get_by_key(self, idempotency_key):
        return self.records.get(idempotency_key)

    async def save(self, record):
        self.records[record.idempotency_key] = record
        return record


@pytest.fixture
def plan():
    return make_plan()


@pytest.fixture
def order_repo(plan):
    repo = InMemoryOrderRepository()
    order, payments = make_order(plan)
    repo.orders[order.id] = order
    repo.payments[order.id] = payments
    return repo


@pytest.fixture
def order(order_repo):
    return next(iter(order_repo.orders.values()))


@pytest.fixture
def wallet_repo():
    return InMemoryWalletRepository(balance_cents=100_000)


@pytest.fixture
def request_repo():
    return InMemoryPaymentRequestRepository()


@pytest.fixture
def service(plan, order_repo, wallet_repo, request_repo):
    return PaymentService(
        order_repository=order_repo,
        plan_repository=InMemoryPlanRepository(plan),
        wallet_repository=wallet_repo,
        payment_request_repository=request_repo,
    )


def payment(order, key="key-1", method="standard", amount_cents=None, buyer_id="buyer_1"):
    return ApplyPaymentRequest(
        order_id=order.id,
        buyer_id=buyer_id,
        method=method,
        idempotency_key=key,
        amount_cents=amount_cents,
    )


class TestApplyPayment:
    @pytest.mark.asyncio
    async def test_standard_payment_debits_wallet(self, service, order, wallet_repo, request_repo):
        result = await service.apply_payment(payment(order))

        assert result.applied_amount_cents == 23_330
        assert result.amount_paid_cents == 53_330
        assert result.remaining_cents == 46_670
        assert result.replayed is False
        assert wallet_repo.wallets["buyer_1"].balance_cents == 76_670
        assert "key-1" in request_repo.records

    @pytest.mark.asyncio
    async def test_full_payment_completes_order(self, service, order):
        result = await service.apply_payment(payment(order, method="full"))

        assert result.applied_amount_cents == 70_000
        assert result.status == OrderStatus.COMPLETED.value
        assert result.next_due_date is None

    @pytest.mark.asyncio
    async def test_same_key_replays_without_second_debit(self, service, order, wallet_repo, order_repo):
        first = await service.apply_payment(payment(order, method="custom", amount_cents=5_000))
        second = await service.apply_payment(payment(order, method="custom", amount_cents=5_000))

        assert second.replayed is True
        assert second.applied_amount_cents == first.applied_amount_cents
        assert second.amount_paid_cents == first.amount_paid_cents
        assert wallet_repo.debits == [5_000]
        assert order.amount_paid_cents == 35_000
        assert order_repo.updates == 1

    @pytest.mark.asyncio
    async def test_key_reused_for_different_request(self, service, order, wallet_repo):
        await service.apply_payment(payment(order, method="custom", amount_cents=5_000))

        with pytest.raises(IdempotencyKeyReusedException):
            await service.apply_payment(payment(order, method="custom", amount_cents=6_000))

        assert wallet_repo.debits == [5_000]

    @pytest.mark.asyncio
    async def test_other_buyers_order_is_not_found(self, service, order):
        with pytest.raises(OrderNotFoundException):
            await service.apply_payment(payment(order, buyer_id="buyer_2"))

    @pytest.mark.asyncio
    async def test_insufficient_funds_leaves_order_untouched(self, plan, order_repo, order, request_repo):
        service = PaymentService(
            order_repository=order_repo,
            plan_repository=InMemoryPlanRepository(plan),
            wallet_repository=InMemoryWalletRepository(balance_cents=1_000),
            payment_request_repository=request_repo,
        )

        with pytest.raises(InsufficientFundsException):
            await service.apply_payment(payment(order))

        assert order.amount_paid_cents == 30_000
        assert request_repo.records == {}

    @pytest.mark.asyncio
    async def test_blank_idempotency_key_rejected(self, service, order):
        with pytest.raises(InvalidAmountException):
            await service.apply_payment(payment(order, key=" "))

    @pytest.mark.asyncio
    async def test_concurrent_payment_for_same_order_rejected(self, service, order, order_repo, wallet_repo):
        order_repo.lock_gate = asyncio.Event()

        first = asyncio.create_task(service.apply_payment(payment(order, key="key-1")))
        await asyncio.sleep(0)

        with pytest.raises(PaymentInProgressException):
            await service.apply_payment(payment(order, key="key-2"))

        order_repo.lock_gate.set()
        result = await first

        assert result.applied_amount_cents == 23_330
        assert wallet_repo.debits == [23_330]

    @pytest.mark.asyncio
    async def test_slot_released_after_failure(self, service, order):
        with pytest.raises(OrderNotFoundException):
            await service.apply_payment(payment(order, buyer_id="buyer_2"))

        result = await service.apply_payment(payment(order))

        assert result.applied_amount_cents == 23_330


class RacingPaymentRequestRepository(InMemoryPaymentRequestRepository):
    """Another device's request commits its key between the lookup and the insert."""

    def __init__(self, winner: PaymentRequestRecord):
        super().__init__()
        self.winner = winner
        self.lost_race = False

    async def get_by_key(self, idempotency_key):
        if not self.lost_race:
            return None
        return await super().get_by_key(idempotency_key)

    async def save(self, record):
        if not self.lost_race:
            self.lost_race = True
            self.records[self.winner.idempotency_key] = self.winner
            raise ConcurrentModificationException(str(record.order_id))
        return await super().save(record)


class TestIdempotencyRace:
    @pytest.mark.asyncio
    async def test_losing_insert_surfaces_conflict_then_retry_replays(self, plan, order_repo, order, wallet_repo):
        winner = PaymentRequestRecord(
            idempotency_key="key-1",
            order_id=order.id,
            buyer_id="buyer_1",
            method=PaymentMethod.CUSTOM,
            requested_amount_cents=5_000,
            applied_amount_cents=5_000,
            amount_paid_after_cents=35_000,
            status_after=OrderStatus.ACTIVE,
        )
        service = PaymentService(
            order_repository=order_repo,
            plan_repository=InMemoryPlanRepository(plan),
            wallet_repository=wallet_repo,
            payment_request_repository=RacingPaymentRequestRepository(winner),
        )

        with pytest.raises(ConcurrentModificationException) as exc_info:
            await service.apply_payment(payment(order, method="custom", amount_cents=5_000))
        assert exc_info.value.code == "CONCURRENT_MODIFICATION"

        retried = await service.apply_payment(payment(order, method="custom", amount_cents=5_000))

        assert retried.replayed is True
        assert retried.applied_amount_cents == 5_000
        assert retried.amount_paid_cents == 35_000
