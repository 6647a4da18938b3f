"""Installment order, scheduled payment and payment request entities."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


class OrderStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class PaymentMethod(str, Enum):
    """How the buyer chose to pay."""

    STANDARD = "standard"  # the next scheduled installment
    CUSTOM = "custom"  # a buyer-chosen partial amount
    FULL = "full"  # settle everything that remains


@dataclass
class InstallmentPayment:
    """A single scheduled step materialized for one order."""

    order_id: UUID
    step_number: int
    due_date: date
    amount_cents: int
    id: UUID = field(default_factory=uuid4)
    status: PaymentStatus = PaymentStatus.PENDING
    paid_cents: int = 0
    paid_at: datetime | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == PaymentStatus.PENDING

    @property
    def remaining_cents(self) -> int:
        """Amount still owed on this step after partial payments."""
        return self.amount_cents - self.paid_cents

    def to_dict(self) -> dict:
        return {
            "payment_id": str(self.id),
            "order_id": str(self.order_id),
            "step_number": self.step_number,
            "due_date": self.due_date.isoformat(),
            "amount_cents": self.amount_cents,
            "paid_cents": self.paid_cents,
            "status": self.status.value,
            "paid_at": self.paid_at.isoformat() + "Z" if self.paid_at else None,
        }


@dataclass
class InstallmentOrder:
    """
    The running ledger of one buyer's installment purchase.

    ``amount_paid_cents`` starts at the escrowed deposit and only grows.
    The order is completed exactly when it reaches ``total_cents``.
    """

    buyer_id: str
    seller_id: str
    product_id: str
    plan_id: UUID
    total_cents: int
    amount_paid_cents: int
    installment_amount_cents: int
    next_due_date: Optional[date]
    id: UUID = field(default_factory=uuid4)
    status: OrderStatus = OrderStatus.ACTIVE
    reschedule_count: int = 0
    version: int = 1
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def remaining_cents(self) -> int:
        return self.total_cents - self.amount_paid_cents

    @property
    def is_completed(self) -> bool:
        return self.status == OrderStatus.COMPLETED

    def days_late(self, today: date) -> int:
        """Whole days past the next due date, 0 when not late."""
        if self.is_completed or self.next_due_date is None:
            return 0
        return max(0, (today - self.next_due_date).days)

    def to_dict(self) -> dict:
        return {
            "order_id": str(self.id),
            "buyer_id": self.buyer_id,
            "seller_id": self.seller_id,
            "product_id": self.product_id,
            "plan_id": str(self.plan_id),
            "total_cents": self.total_cents,
            "amount_paid_cents": self.amount_paid_cents,
            "installment_amount_cents": self.installment_amount_cents,
            "next_due_date": (
                self.next_due_date.isoformat() if self.next_due_date else None
            ),
            "status": self.status.value,
            "reschedule_count": self.reschedule_count,
            "created_at": self.created_at.isoformat() + "Z",
        }


@dataclass(frozen=True)
class PaymentRequestRecord:
    """
    Outcome of one logical payment request, keyed by its idempotency key.

    Persisted in the same transaction as the ledger change so a retried
    request can be answered from here instead of being applied twice.
    """

    idempotency_key: str
    order_id: UUID
    buyer_id: str
    method: PaymentMethod
    requested_amount_cents: Optional[int]
    applied_amount_cents: int
    amount_paid_after_cents: int
    status_after: OrderStatus
    created_at: datetime = field(default_factory=datetime.utcnow)

    def matches(
        self,
        order_id: UUID,
        buyer_id: str,
        method: PaymentMethod,
        requested_amount_cents: Optional[int],
    ) -> bool:
        """Check whether a new request is the same logical request."""
        return (
            self.order_id == order_id
            and self.buyer_id == buyer_id
            and self.method == method
            and self.requested_amount_cents == requested_amount_cents
        )
