"""Data transfer objects for installment orders and their payments."""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional
from uuid import UUID


@dataclass(frozen=True)
class StartOrderRequest:
    """Checkout input: buy a product on its active installment plan."""

    buyer_id: str
    product_id: str
    total_cents: int

    def validate(self) -> List[str]:
        errors = []

        if not self.buyer_id or not self.buyer_id.strip():
            errors.append("buyer_id is required")

        if not self.product_id or not self.product_id.strip():
            errors.append("product_id is required")

        if self.total_cents <= 0:
            errors.append("total_cents must be positive")

        return errors


@dataclass(frozen=True)
class PaymentDTO:
    payment_id: str
    step_number: int
    due_date: str
    amount_cents: int
    paid_cents: int
    status: str
    paid_at: Optional[str]

    @classmethod
    def from_entity(cls, payment) -> "PaymentDTO":
        return cls(
            payment_id=str(payment.id),
            step_number=payment.step_number,
            due_date=payment.due_date.isoformat(),
            amount_cents=payment.amount_cents,
            paid_cents=payment.paid_cents,
            status=payment.status.value,
            paid_at=payment.paid_at.isoformat() + "Z" if payment.paid_at else None,
        )


@dataclass(frozen=True)
class OrderResponse:
    """Response data for one installment order."""

    order_id: str
    buyer_id: str
    seller_id: str
    product_id: str
    plan_id: str
    total_cents: int
    amount_paid_cents: int
    remaining_cents: int
    installment_amount_cents: int
    next_due_date: Optional[str]
    status: str
    reschedule_count: int
    created_at: str

    @classmethod
    def from_entity(cls, order) -> "OrderResponse":
        return cls(
            order_id=str(order.id),
            buyer_id=order.buyer_id,
            seller_id=order.seller_id,
            product_id=order.product_id,
            plan_id=str(order.plan_id),
            total_cents=order.total_cents,
            amount_paid_cents=order.amount_paid_cents,
            remaining_cents=order.remaining_cents,
            installment_amount_cents=order.installment_amount_cents,
            next_due_date=order.next_due_date.isoformat() if order.next_due_date else None,
            status=order.status.value,
            reschedule_count=order.reschedule_count,
            created_at=order.created_at.isoformat() + "Z",
        )


@dataclass(frozen=True)
class OrderPaymentsResponse:
    order_id: str
    payments: List[PaymentDTO]

    @classmethod
    def from_entities(cls, order_id: str, payments: list) -> "OrderPaymentsResponse":
        return cls(
            order_id=order_id,
            payments=[PaymentDTO.from_entity(p) for p in payments],
        )


@dataclass(frozen=True)
class RescheduleRequest:
    order_id: UUID
    buyer_id: str
    new_due_date: date
