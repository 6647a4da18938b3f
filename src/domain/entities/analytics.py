"""Seller-facing aggregates over installment orders."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SellerAnalytics:
    """Totals shown on a seller's installment dashboard."""

    seller_id: str
    total_revenue_cents: int
    amount_received_cents: int
    pending_balance_cents: int
    active_orders: int
    completed_orders: int
    overdue_orders: int
    completion_rate: float

    def to_dict(self) -> dict:
        return {
            "seller_id": self.seller_id,
            "total_revenue_cents": self.total_revenue_cents,
            "amount_received_cents": self.amount_received_cents,
            "pending_balance_cents": self.pending_balance_cents,
            "active_orders": self.active_orders,
            "completed_orders": self.completed_orders,
            "overdue_orders": self.overdue_orders,
            "completion_rate": round(self.completion_rate, 2),
        }
