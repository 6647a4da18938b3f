"""Builders for domain objects used across the test suites."""

from datetime import date, timedelta
from typing import List, Optional, Tuple
from uuid import uuid4

from src.domain.entities import (
    InstallmentOrder,
    InstallmentPayment,
    InstallmentPlan,
    OrderStatus,
    PaymentFrequency,
    PaymentStatus,
)
from src.service.installments import generate_schedule, materialize_payments

TODAY = date(2025, 6, 1)


def make_plan(
    deposit: float = 30.0,
    duration: int = 3,
    frequency: PaymentFrequency = PaymentFrequency.MONTHLY,
    **overrides,
) -> InstallmentPlan:
    fields = dict(
        product_id="product_1",
        seller_id="seller_1",
        initial_deposit_percent=deposit,
        frequency=frequency,
        duration_periods=duration,
        schedule=generate_schedule(deposit, duration, frequency),
    )
    fields.update(overrides)
    return InstallmentPlan(**fields)


def make_order(
    plan: Optional[InstallmentPlan] = None,
    total_cents: int = 100_000,
    start_date: date = TODAY,
    buyer_id: str = "buyer_1",
) -> Tuple[InstallmentOrder, List[InstallmentPayment]]:
    """A freshly started order: deposit paid, every step pending."""
    plan = plan or make_plan()
    breakdown = materialize_payments(total_cents, plan, start_date)

    order = InstallmentOrder(
        buyer_id=buyer_id,
        seller_id=plan.seller_id,
        product_id=plan.product_id,
        plan_id=plan.id,
        total_cents=total_cents,
        amount_paid_cents=breakdown.deposit_cents,
        installment_amount_cents=breakdown.installment_amount_cents,
        next_due_date=breakdown.first_due_date,
    )
    payments = [
        InstallmentPayment(
            order_id=order.id,
            step_number=item.step_number,
            due_date=item.due_date,
            amount_cents=item.amount_cents,
        )
        for item in breakdown.installments
    ]
    return order, payments


def order_due(
    next_due_date: Optional[date],
    status: OrderStatus = OrderStatus.ACTIVE,
    total_cents: int = 100_000,
    amount_paid_cents: int = 30_000,
    buyer_id: str = "buyer_1",
    seller_id: str = "seller_1",
) -> InstallmentOrder:
    """A bare order with a chosen next due date, for scoring and reminders."""
    if status == OrderStatus.COMPLETED:
        amount_paid_cents = total_cents
    return InstallmentOrder(
        buyer_id=buyer_id,
        seller_id=seller_id,
        product_id="product_1",
        plan_id=uuid4(),
        total_cents=total_cents,
        amount_paid_cents=amount_paid_cents,
        installment_amount_cents=23_330,
        next_due_date=next_due_date,
        status=status,
    )


def days_from_today(days: int) -> date:
    return TODAY + timedelta(days=days)


def settle(payment: InstallmentPayment, paid_cents: Optional[int] = None) -> None:
    payment.paid_cents = payment.amount_cents if paid_cents is None else paid_cents
    if payment.paid_cents == payment.amount_cents:
        payment.status = PaymentStatus.PAID
