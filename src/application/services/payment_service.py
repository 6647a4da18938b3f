"""Payment service - applies buyer payments to an order's ledger."""

from contextlib import contextmanager
from typing import Generator, Set
from uuid import UUID

import structlog

from src.application.dto import ApplyPaymentRequest, PaymentResult
from src.core.metrics import (
    record_idempotent_replay,
    record_payment,
    track_payment_latency,
)
from src.domain.entities import PaymentMethod, PaymentRequestRecord
from src.domain.exceptions import (
    DomainException,
    IdempotencyKeyReusedException,
    InvalidAmountException,
    OrderNotFoundException,
    PaymentInProgressException,
    PlanNotFoundException,
)
from src.domain.interfaces import (
    OrderRepository,
    PaymentRequestRepository,
    PlanRepository,
    WalletRepository,
)
from src.service.installments import apply_to_ledger, resolve_payment_amount

logger = structlog.get_logger(__name__)


class PaymentService:
    """
    Application service for the payment processor.

    All repositories share one session, so the wallet debit, the ledger
    update and the idempotency record commit or roll back together.
    """

    # Orders with a payment currently being applied in this process.
    _in_flight: Set[UUID] = set()

    def __init__(
        self,
        order_repository: OrderRepository,
        plan_repository: PlanRepository,
        wallet_repository: WalletRepository,
        payment_request_repository: PaymentRequestRepository,
    ):
        self._order_repo = order_repository
        self._plan_repo = plan_repository
        self._wallet_repo = wallet_repository
        self._request_repo = payment_request_repository

    async def apply_payment(self, request: ApplyPaymentRequest) -> PaymentResult:
        """
        Apply a standard, custom or full payment to an order.

        Args:
            request: Order, buyer, method, optional amount and idempotency key

        Returns:
            PaymentResult; ``replayed`` is set when the key was seen before

        Raises:
            OrderNotFoundException: Unknown order, or it belongs to someone else
            OrderAlreadyCompletedException: Nothing is owed any more
            NoPendingPaymentsException: No pending installment to pay
            InvalidAmountException: Amount not accepted for this method
            PaymentMethodNotAllowedException: Plan forbids the method
            InsufficientFundsException: Wallet cannot cover the amount
            PaymentInProgressException: Another payment for the order is running
            IdempotencyKeyReusedException: Key already used for another request
        """
        errors = request.validate()
        if errors:
            raise InvalidAmountException("; ".join(errors))

        method = PaymentMethod(request.method)
        log = logger.bind(
            order_id=str(request.order_id),
            buyer_id=request.buyer_id,
            method=method.value,
            idempotency_key=request.idempotency_key,
        )

        try:
            with self._payment_slot(request.order_id), track_payment_latency():
                result = await self._apply(request, method)
        except DomainException as e:
            record_payment(method.value, e.code)
            log.warning("payment_rejected", code=e.code, reason=e.message)
            raise

        if result.replayed:
            record_idempotent_replay()
            record_payment(method.value, "replayed")
            log.info("payment_replayed", applied_amount_cents=result.applied_amount_cents)
        else:
            record_payment(method.value, "applied", result.applied_amount_cents)
            log.info(
                "payment_applied",
                applied_amount_cents=result.applied_amount_cents,
                amount_paid_cents=result.amount_paid_cents,
                status=result.status,
            )

        return result

    async def _apply(self, request: ApplyPaymentRequest, method: PaymentMethod) -> PaymentResult:
        order = await self._order_repo.get_for_update(request.order_id)
        if order is None or order.buyer_id != request.buyer_id:
            raise OrderNotFoundException(str(request.order_id))

        previous = await self._request_repo.get_by_key(request.idempotency_key)
        if previous is not None:
            if not previous.matches(
                order.id, request.buyer_id, method, request.amount_cents
            ):
                raise IdempotencyKeyReusedException(request.idempotency_key)
            return PaymentResult.from_record(
                previous,
                order.total_cents,
                order.next_due_date,
                replayed=True,
            )

        plan = await self._plan_repo.get_by_id(order.plan_id)
        if plan is None:
            raise PlanNotFoundException(order.product_id)

        payments = await self._order_repo.list_payments(order.id)
        amount = resolve_payment_amount(
            order, plan, payments, method, request.amount_cents
        )

        await self._wallet_repo.debit(request.buyer_id, amount)
        update = apply_to_ledger(order, payments, amount)
        await self._order_repo.update(order, update.touched_payments)

        record = PaymentRequestRecord(
            idempotency_key=request.idempotency_key,
            order_id=order.id,
            buyer_id=request.buyer_id,
            method=method,
            requested_amount_cents=request.amount_cents,
            applied_amount_cents=update.applied_amount_cents,
            amount_paid_after_cents=update.amount_paid_after_cents,
            status_after=update.status_after,
        )
        await self._request_repo.save(record)

        return PaymentResult.from_record(
            record,
            order.total_cents,
            update.next_due_date_after,
        )

    @contextmanager
    def _payment_slot(self, order_id: UUID) -> Generator[None, None, None]:
        if order_id in self._in_flight:
            raise PaymentInProgressException(str(order_id))
        self._in_flight.add(order_id)
        try:
            yield
        finally:
            self._in_flight.discard(order_id)
