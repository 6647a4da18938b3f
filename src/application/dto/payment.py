"""Data transfer objects for applying installment payments."""

from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID


@dataclass(frozen=True)
class ApplyPaymentRequest:
    """A buyer's request to pay toward an order."""

    order_id: UUID
    buyer_id: str
    method: str
    idempotency_key: str
    amount_cents: Optional[int] = None

    def validate(self) -> List[str]:
        errors = []

        if not self.buyer_id or not self.buyer_id.strip():
            errors.append("buyer_id is required")

        if not self.idempotency_key or not self.idempotency_key.strip():
            errors.append("idempotency_key is required")

        return errors


@dataclass(frozen=True)
class PaymentResult:
    """
    Outcome of a payment request.

    ``replayed`` is True when the outcome was read back from an earlier
    request with the same idempotency key and no money moved this time.
    """

    order_id: str
    idempotency_key: str
    method: str
    applied_amount_cents: int
    amount_paid_cents: int
    remaining_cents: int
    status: str
    next_due_date: Optional[str]
    replayed: bool = False

    @classmethod
    def from_record(
        cls,
        record,
        total_cents: int,
        next_due_date=None,
        replayed: bool = False,
    ) -> "PaymentResult":
        return cls(
            order_id=str(record.order_id),
            idempotency_key=record.idempotency_key,
            method=record.method.value,
            applied_amount_cents=record.applied_amount_cents,
            amount_paid_cents=record.amount_paid_after_cents,
            remaining_cents=total_cents - record.amount_paid_after_cents,
            status=record.status_after.value,
            next_due_date=next_due_date.isoformat() if next_due_date else None,
            replayed=replayed,
        )
