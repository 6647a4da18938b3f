"""Buyer and seller account schemas."""

from pydantic import BaseModel, Field


class FinancialHealthResponseSchema(BaseModel):
    buyer_id: str
    score: int = Field(..., ge=0, le=100, examples=[94])
    status: str = Field(..., examples=["Excellent"])
    late_orders: int
    source: str = Field(..., examples=["remote"])


class WalletResponseSchema(BaseModel):
    buyer_id: str
    balance_cents: int = Field(..., ge=0)


class SellerAnalyticsResponseSchema(BaseModel):
    """Seller dashboard totals."""

    seller_id: str
    total_revenue_cents: int
    amount_received_cents: int
    pending_balance_cents: int
    active_orders: int
    completed_orders: int
    overdue_orders: int
    completion_rate: float = Field(..., description="Completed orders as a percentage")
