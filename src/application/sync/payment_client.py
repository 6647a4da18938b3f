"""Client-side payment and reschedule operations."""

from contextlib import contextmanager
from datetime import date, timedelta
from typing import Callable, Generator, Optional, Set
from uuid import UUID, uuid4

import structlog

from src.domain.entities import (
    InstallmentOrder,
    PaymentMethod,
    PaymentRequestRecord,
)
from src.domain.exceptions import (
    InvalidAmountException,
    NetworkError,
    OrderAlreadyCompletedException,
    PaymentInProgressException,
    RescheduleLimitExceededException,
    RescheduleNotAllowedException,
)
from src.domain.interfaces import InstallmentGatewayClient
from src.service.installments import InstallmentSettings, installment_settings

from .synchronizer import AccountSynchronizer

logger = structlog.get_logger(__name__)


class PaymentClient:
    """
    Submits payments and reschedules for a buyer.

    Checks what it can locally, allows one request per order at a time,
    and never resubmits after a NetworkError: it re-reads state instead,
    since the write may or may not have landed.
    """

    def __init__(
        self,
        gateway: InstallmentGatewayClient,
        synchronizer: Optional[AccountSynchronizer] = None,
        key_factory: Callable[[], str] = lambda: str(uuid4()),
        policy: InstallmentSettings = installment_settings,
    ):
        self._gateway = gateway
        self._synchronizer = synchronizer
        self._key_factory = key_factory
        self._policy = policy
        self._in_flight: Set[UUID] = set()

    async def pay(
        self,
        order: InstallmentOrder,
        method: PaymentMethod | str = PaymentMethod.STANDARD,
        amount_cents: Optional[int] = None,
    ) -> PaymentRequestRecord:
        """
        Apply a payment to ``order`` through the gateway.

        Raises:
            OrderAlreadyCompletedException: Order is already settled
            InvalidAmountException: Amount <= 0 or above the remaining balance
            PaymentInProgressException: A request for this order is in flight
            NetworkError: Transport failed; state has been re-read
            DomainException: Any error code returned by the gateway
        """
        method = PaymentMethod(method)

        if order.is_completed:
            raise OrderAlreadyCompletedException(str(order.id))
        if amount_cents is not None and amount_cents <= 0:
            raise InvalidAmountException("Payment amount must be positive")
        if amount_cents is not None and amount_cents > order.remaining_cents:
            raise InvalidAmountException(
                f"Payment of {amount_cents} cents exceeds the remaining balance of "
                f"{order.remaining_cents} cents"
            )

        idempotency_key = self._key_factory()
        log = logger.bind(
            order_id=str(order.id),
            method=method.value,
            idempotency_key=idempotency_key,
        )

        with self._single_flight(order.id):
            try:
                record = await self._gateway.apply_installment_payment(
                    order.buyer_id,
                    order.id,
                    method,
                    amount_cents,
                    idempotency_key,
                )
            except NetworkError as e:
                log.warning("payment_outcome_unknown", error=e.message)
                await self._resync()
                raise

        log.info(
            "payment_submitted",
            applied_amount_cents=record.applied_amount_cents,
            status=record.status_after.value,
        )
        await self._resync()
        return record

    async def reschedule(
        self,
        order: InstallmentOrder,
        new_due_date: date,
        today: date | None = None,
    ) -> InstallmentOrder:
        """
        Move an order's next due date through the gateway.

        The grace-period rule needs the plan and is left to the gateway.
        """
        today = today or date.today()

        if order.is_completed:
            raise OrderAlreadyCompletedException(str(order.id))
        if order.reschedule_count >= self._policy.max_reschedules:
            raise RescheduleLimitExceededException(str(order.id), self._policy.max_reschedules)
        earliest = today + timedelta(days=self._policy.min_reschedule_notice_days)
        if new_due_date < earliest:
            raise RescheduleNotAllowedException(
                f"New due date must be on or after {earliest.isoformat()}"
            )

        with self._single_flight(order.id):
            try:
                updated = await self._gateway.reschedule_installment(
                    order.buyer_id,
                    order.id,
                    new_due_date,
                )
            except NetworkError as e:
                logger.warning(
                    "reschedule_outcome_unknown",
                    order_id=str(order.id),
                    error=e.message,
                )
                await self._resync()
                raise

        await self._resync()
        return updated

    @contextmanager
    def _single_flight(self, order_id: UUID) -> Generator[None, None, None]:
        if order_id in self._in_flight:
            raise PaymentInProgressException(str(order_id))
        self._in_flight.add(order_id)
        try:
            yield
        finally:
            self._in_flight.discard(order_id)

    async def _resync(self) -> None:
        if self._synchronizer is None:
            return
        try:
            await self._synchronizer.refresh(force=True)
        except NetworkError:
            pass  # refresh logs its own failure; the periodic loop catches up
