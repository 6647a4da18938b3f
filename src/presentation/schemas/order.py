"""Order-related Pydantic schemas."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StartOrderRequestSchema(BaseModel):
    """Schema for POST /v1/orders request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "buyer_id": "buyer_1",
                    "product_id": "product_1",
                    "total_cents": 100000,
                }
            ]
        }
    )

    buyer_id: str = Field(..., min_length=1, max_length=255)
    product_id: str = Field(..., min_length=1, max_length=255)
    total_cents: int = Field(..., description="Purchase price in cents", examples=[100000])

    @field_validator("buyer_id", "product_id")
    @classmethod
    def strip_ids(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("identifier cannot be empty or whitespace")
        return v.strip()


class OrderResponseSchema(BaseModel):
    """Schema for one installment order."""

    order_id: str
    buyer_id: str
    seller_id: str
    product_id: str
    plan_id: str
    total_cents: int
    amount_paid_cents: int
    remaining_cents: int
    installment_amount_cents: int = Field(..., description="Standard periodic amount")
    next_due_date: Optional[str] = Field(None, description="Due date of the earliest pending step")
    status: str = Field(..., examples=["active"])
    reschedule_count: int
    created_at: str


class OrderListResponseSchema(BaseModel):
    orders: list[OrderResponseSchema]
    count: int


class PaymentSchema(BaseModel):
    """One scheduled payment of an order."""

    payment_id: str
    step_number: int
    due_date: str
    amount_cents: int
    paid_cents: int = Field(..., description="Portion covered by partial payments")
    status: str = Field(..., examples=["pending"])
    paid_at: Optional[str] = None


class OrderPaymentsResponseSchema(BaseModel):
    order_id: str
    payments: list[PaymentSchema]


class RescheduleRequestSchema(BaseModel):
    """Schema for POST /v1/orders/{order_id}/reschedule request body."""

    buyer_id: str = Field(..., min_length=1, max_length=255)
    new_due_date: date = Field(..., examples=["2025-12-01"])
