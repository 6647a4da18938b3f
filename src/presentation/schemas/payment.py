"""Payment-related Pydantic schemas."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ApplyPaymentRequestSchema(BaseModel):
    """Schema for POST /v1/orders/{order_id}/payments request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"buyer_id": "buyer_1", "method": "standard"},
                {"buyer_id": "buyer_1", "method": "custom", "amount_cents": 5000},
                {"buyer_id": "buyer_1", "method": "full"},
            ]
        }
    )

    buyer_id: str = Field(..., min_length=1, max_length=255)
    method: Literal["standard", "custom", "full"] = "standard"
    amount_cents: Optional[int] = Field(
        None,
        description="Amount to pay; defaults to the next installment for standard payments",
    )


class PaymentResultSchema(BaseModel):
    """Outcome of a payment request."""

    order_id: str
    idempotency_key: str
    method: str
    applied_amount_cents: int
    amount_paid_cents: int
    remaining_cents: int
    status: str
    next_due_date: Optional[str] = None
    replayed: bool = Field(
        False,
        description="True when answered from an earlier request with the same key",
    )
