"""
Order ledger state machine.

Pure functions that decide how much a payment request is worth and apply
it to an order and its scheduled payments. Persistence and locking live
in the application layer; nothing here does I/O.

Transitions:
    active -> active     (payment leaves a balance)
    active -> completed  (amount_paid reaches total)
    completed -> (none)
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Sequence

from src.domain.entities import (
    InstallmentOrder,
    InstallmentPayment,
    InstallmentPlan,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from src.domain.exceptions import (
    InvalidAmountException,
    NoPendingPaymentsException,
    OrderAlreadyCompletedException,
    PaymentMethodNotAllowedException,
)


@dataclass(frozen=True)
class LedgerUpdate:
    """What a single applied payment changed."""

    applied_amount_cents: int
    amount_paid_after_cents: int
    status_after: OrderStatus
    next_due_date_after: Optional[date]
    settled_payments: List[InstallmentPayment]
    touched_payments: List[InstallmentPayment]


def pending_payments(payments: Sequence[InstallmentPayment]) -> List[InstallmentPayment]:
    """Pending payments in schedule order."""
    return sorted(
        (p for p in payments if p.is_pending),
        key=lambda p: (p.step_number, p.due_date),
    )


def next_pending_payment(
    payments: Sequence[InstallmentPayment],
) -> Optional[InstallmentPayment]:
    """The earliest unpaid step, or None when everything is paid."""
    pending = pending_payments(payments)
    return pending[0] if pending else None


def resolve_payment_amount(
    order: InstallmentOrder,
    plan: InstallmentPlan,
    payments: Sequence[InstallmentPayment],
    method: PaymentMethod | str,
    amount_cents: Optional[int] = None,
) -> int:
    """
    Work out the amount a payment request should apply.

    Args:
        order: The order being paid
        plan: The plan the order was bought under
        payments: The order's scheduled payments
        method: standard, custom or full
        amount_cents: Amount supplied by the buyer, if any

    Returns:
        The amount in cents to debit and credit

    Raises:
        OrderAlreadyCompletedException: Order is already settled
        NoPendingPaymentsException: Nothing left to apply the payment to
        InvalidAmountException: Amount <= 0, above the balance, or below minimum
        PaymentMethodNotAllowedException: Plan forbids custom or full payments
    """
    method = PaymentMethod(method)

    if order.is_completed:
        raise OrderAlreadyCompletedException(str(order.id))

    if amount_cents is not None and amount_cents <= 0:
        raise InvalidAmountException("Payment amount must be positive")

    next_payment = next_pending_payment(payments)
    if next_payment is None or order.remaining_cents <= 0:
        raise NoPendingPaymentsException(str(order.id))

    remaining = order.remaining_cents

    if method == PaymentMethod.FULL:
        if not plan.allow_early_completion:
            raise PaymentMethodNotAllowedException(method.value)
        return remaining

    if amount_cents is not None and amount_cents > remaining:
        raise InvalidAmountException(
            f"Payment of {amount_cents} cents exceeds the remaining balance of "
            f"{remaining} cents"
        )

    if method == PaymentMethod.STANDARD:
        due = min(next_payment.remaining_cents, remaining)
        return due if amount_cents is None else amount_cents

    # custom
    if not plan.allow_partial_payments:
        raise PaymentMethodNotAllowedException(method.value)
    if amount_cents is None:
        raise InvalidAmountException("A custom payment requires an amount")
    settles_order = amount_cents == remaining
    if (
        plan.min_payment_cents > 0
        and amount_cents < plan.min_payment_cents
        and not settles_order
    ):
        raise InvalidAmountException(
            f"Minimum payment is {plan.min_payment_cents} cents"
        )
    return amount_cents


def apply_to_ledger(
    order: InstallmentOrder,
    payments: Sequence[InstallmentPayment],
    amount_cents: int,
    paid_at: datetime | None = None,
) -> LedgerUpdate:
    """
    Credit an order and settle its scheduled payments earliest-first.

    Mutates ``order`` and the affected ``payments`` in place. A payment only
    partly covered keeps status pending and accumulates ``paid_cents``.

    Raises:
        OrderAlreadyCompletedException: Order is already settled
        InvalidAmountException: Amount <= 0 or above the remaining balance
    """
    if order.is_completed:
        raise OrderAlreadyCompletedException(str(order.id))
    if amount_cents <= 0 or amount_cents > order.remaining_cents:
        raise InvalidAmountException(
            f"Cannot apply {amount_cents} cents to a balance of {order.remaining_cents}"
        )

    paid_at = paid_at or datetime.utcnow()
    left = amount_cents
    settled: List[InstallmentPayment] = []
    touched: List[InstallmentPayment] = []

    for payment in pending_payments(payments):
        if left == 0:
            break
        portion = min(left, payment.remaining_cents)
        payment.paid_cents += portion
        left -= portion
        touched.append(payment)

        if payment.remaining_cents == 0:
            payment.status = PaymentStatus.PAID
            payment.paid_at = paid_at
            settled.append(payment)

    order.amount_paid_cents += amount_cents

    upcoming = next_pending_payment(payments)
    order.next_due_date = upcoming.due_date if upcoming else None

    if order.amount_paid_cents == order.total_cents:
        order.status = OrderStatus.COMPLETED

    return LedgerUpdate(
        applied_amount_cents=amount_cents,
        amount_paid_after_cents=order.amount_paid_cents,
        status_after=order.status,
        next_due_date_after=order.next_due_date,
        settled_payments=settled,
        touched_payments=touched,
    )
